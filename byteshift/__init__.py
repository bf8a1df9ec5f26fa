from byteshift.transform import (
    SUFFIX,
    ErrorKind,
    ShiftMode,
    TransformResult,
    decrypt_file,
    encrypt_file,
    output_path_for,
    shift_bytes,
    transform_file,
)

__version__ = "1.0.0"
