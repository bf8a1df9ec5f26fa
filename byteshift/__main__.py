from byteshift.cli import main

raise SystemExit(main())
