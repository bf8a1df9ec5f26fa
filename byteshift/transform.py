"""
Byte-shift file transform.

"Encrypts" a file by adding 1 to every byte and "decrypts" it by subtracting 1,
both modulo 256. This is an obfuscation toy, not cryptography.

Naming:
  encrypt:  <path>            -> <path>.encrypted
  decrypt:  <path>.encrypted  -> <path>   (first ".encrypted" in the path is removed)

Known limitation: decrypt strips the first occurrence of the suffix anywhere in
the full path, so a directory such as "x.encrypted/file.encrypted" maps to
"x/file.encrypted". A path without the suffix maps to itself and the source is
rewritten in place.
"""
from __future__ import annotations
import enum
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

SUFFIX = ".encrypted"
CHUNK_SIZE = 1024 * 1024  # 1 MiB
TAIL_BYTES = 16

PathLike = Union[str, "os.PathLike[str]"]
ProgressCallback = Callable[[int, int], None]


class ShiftMode(enum.Enum):
    ENCRYPT = 1
    DECRYPT = -1

    @property
    def delta(self) -> int:
        return self.value

    @property
    def verb(self) -> str:
        return "encrypt" if self is ShiftMode.ENCRYPT else "decrypt"


class ErrorKind(enum.Enum):
    SOURCE_OPEN_FAILED = "source_open_failed"
    DESTINATION_OPEN_FAILED = "destination_open_failed"


@dataclass(frozen=True)
class TransformResult:
    mode: ShiftMode
    source: Path
    output_path: Optional[Path] = None
    error: Optional[ErrorKind] = None
    message: str = ""
    size: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def user_message(self) -> str:
        """Text suitable for a message box."""
        if self.ok:
            return f"File {self.mode.verb}ed successfully!"
        if self.error is ErrorKind.SOURCE_OPEN_FAILED:
            return "Failed to open file for reading."
        return f"Failed to write {self.mode.verb}ed file."


_TABLES = {
    mode: bytes((i + mode.delta) % 256 for i in range(256)) for mode in ShiftMode
}


def shift_bytes(data: bytes, mode: ShiftMode) -> bytes:
    """Return ``data`` with every byte shifted by the mode's delta, wrapping at 256."""
    if not isinstance(mode, ShiftMode):
        raise TypeError(f"mode must be a ShiftMode, not {type(mode).__name__}")
    return bytes(data).translate(_TABLES[mode])


def output_path_for(source: PathLike, mode: ShiftMode) -> Path:
    text = os.fspath(source)
    if mode is ShiftMode.ENCRYPT:
        return Path(text + SUFFIX)
    return Path(text.replace(SUFFIX, "", 1))


def tail_hex(data: bytes, count: int = TAIL_BYTES) -> list[str]:
    return [f"{b:02x}" for b in data[-count:]] if count > 0 else []


class ByteShiftTransform:
    @staticmethod
    def _read_source(source: Path) -> bytes:
        with open(source, "rb") as fin:
            return fin.read()

    @staticmethod
    def _write_output(
        destination: Path, source: Path, data: bytes, chunk_size: int, progress_cb: Optional[ProgressCallback]
    ) -> None:
        """Write ``data`` to a sibling temp file, then move it over ``destination``.

        The destination (which may be the source itself) is untouched unless
        every byte was written.
        """
        total = len(data)
        view = memoryview(data)

        def report(processed: int) -> None:
            nonlocal progress_cb
            if progress_cb is None:
                return
            try:
                progress_cb(processed, total)
            except Exception:
                # progress is advisory; keep writing without it
                logger.exception("Progress callback failed, further updates dropped")
                progress_cb = None

        fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent)
        tmp = Path(tmp_name)
        try:
            try:
                fout = open(fd, "wb")
            except BaseException:
                os.close(fd)
                raise
            with fout:
                report(0)
                processed = 0
                while processed < total:
                    written = fout.write(view[processed : processed + chunk_size])
                    processed += written
                    report(processed)
            shutil.copymode(source, tmp)
            os.replace(tmp, destination)
        except BaseException:
            ByteShiftTransform._remove_temp(tmp)
            raise

    @staticmethod
    def _remove_temp(tmp: Path) -> None:
        try:
            tmp.unlink()
            logger.warning("Removed partial output %s", tmp)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Failed to remove partial output %s: %s", tmp, e)

    @staticmethod
    def run(
        source: PathLike,
        mode: ShiftMode,
        progress_cb: Optional[ProgressCallback] = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> TransformResult:
        if not isinstance(mode, ShiftMode):
            raise TypeError(f"mode must be a ShiftMode, not {type(mode).__name__}")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        source = Path(source)
        destination = output_path_for(source, mode)
        logger.info("Starting %s: %s -> %s", mode.verb, source, destination)
        if destination == source:
            logger.warning("%s has no %r suffix; it will be overwritten in place", source, SUFFIX)

        try:
            data = ByteShiftTransform._read_source(source)
        except OSError as e:
            logger.error("Failed to open %s for reading: %s", source, e)
            return TransformResult(mode, source, error=ErrorKind.SOURCE_OPEN_FAILED, message=str(e))

        logger.debug("Last %d file bytes: %s", TAIL_BYTES, " ".join(tail_hex(data)))

        try:
            ByteShiftTransform._write_output(destination, source, shift_bytes(data, mode), chunk_size, progress_cb)
        except OSError as e:
            logger.error("Failed to write %s: %s", destination, e)
            return TransformResult(
                mode, source, error=ErrorKind.DESTINATION_OPEN_FAILED, message=str(e), size=len(data)
            )

        logger.info("Wrote %d bytes to %s", len(data), destination)
        return TransformResult(mode, source, output_path=destination, size=len(data))


def transform_file(
    source: PathLike,
    mode: ShiftMode,
    progress_cb: Optional[ProgressCallback] = None,
    chunk_size: int = CHUNK_SIZE,
) -> TransformResult:
    return ByteShiftTransform.run(source, mode, progress_cb=progress_cb, chunk_size=chunk_size)


def encrypt_file(source: PathLike, progress_cb: Optional[ProgressCallback] = None, chunk_size: int = CHUNK_SIZE) -> TransformResult:
    return transform_file(source, ShiftMode.ENCRYPT, progress_cb, chunk_size)


def decrypt_file(source: PathLike, progress_cb: Optional[ProgressCallback] = None, chunk_size: int = CHUNK_SIZE) -> TransformResult:
    return transform_file(source, ShiftMode.DECRYPT, progress_cb, chunk_size)
