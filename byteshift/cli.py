from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

from byteshift.log import setup_logging
from byteshift.settings import load_settings
from byteshift.transform import ShiftMode, transform_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="byteshift",
        description="Shift every byte of a file by +1 (encrypt) or -1 (decrypt). Not real encryption.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="log at DEBUG level")
    p.add_argument("--log-file", type=Path, help="also write log output to this file")

    sub = p.add_subparsers(dest="command")
    enc = sub.add_parser("encrypt", help="write <path>.encrypted")
    enc.add_argument("path", type=Path)
    dec = sub.add_parser("decrypt", help="strip .encrypted from the name and restore the bytes")
    dec.add_argument("path", type=Path)
    sub.add_parser("gui", help="start the desktop GUI (default)")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    setup_logging(
        logging.DEBUG if args.verbose else settings.log_level,
        args.log_file or settings.log_file,
    )

    if args.command in (None, "gui"):
        from byteshift import gui

        return gui.main(chunk_size=settings.chunk_size)

    mode = ShiftMode.ENCRYPT if args.command == "encrypt" else ShiftMode.DECRYPT
    result = transform_file(args.path, mode, chunk_size=settings.chunk_size)
    if not result.ok:
        print(f"ERROR: {result.user_message()} {result.message}", file=sys.stderr)
        return 1

    print(f"{result.user_message()} Saved to: {result.output_path}")
    return 0


def gui_main() -> int:
    return main(["gui"])


if __name__ == "__main__":
    raise SystemExit(main())
