"""Text helpers and whole-file utilities."""

from __future__ import annotations

import os
from typing import BinaryIO, Callable, Optional, Union

PathLike = Union[str, "os.PathLike[str]"]

MAX_READ_FILE_SIZE = 4 * 1024 * 1024

_BLANKS = " \t"
_ASCII_LOWER = {code: code + 32 for code in range(ord("A"), ord("Z") + 1)}


def ltrim(text: str) -> str:
    """Remove leading spaces and tabs."""
    return text.lstrip(_BLANKS)


def rtrim(text: str) -> str:
    """Remove trailing spaces and tabs."""
    return text.rstrip(_BLANKS)


def caseless_compare(s1: Optional[str], s2: Optional[str]) -> bool:
    """Compare two strings ignoring ASCII case; two Nones are equal."""
    if s1 is None or s2 is None:
        return s1 is None and s2 is None
    return s1.translate(_ASCII_LOWER) == s2.translate(_ASCII_LOWER)


def copy_data(
    source: BinaryIO,
    target: BinaryIO,
    size: int,
    buffer_size: int,
    progress: Optional[Callable[[int], object]] = None,
) -> int:
    """Copy size bytes from source to target, or until end of file if size is 0.

    The progress callable receives the running byte count after each chunk;
    it may raise to abort the copy. Returns the number of bytes copied.
    """
    if buffer_size <= 0:
        raise ValueError("buffer_size must be positive")
    until_eof = size == 0
    remaining = size
    copied = 0
    while until_eof or remaining > 0:
        chunk_size = buffer_size if until_eof else min(buffer_size, remaining)
        data = source.read(chunk_size)
        if not data:
            break
        target.write(data)
        copied += len(data)
        if progress is not None:
            progress(copied)
        if not until_eof:
            remaining -= chunk_size
    return copied


def read_file(file_name: PathLike) -> bytes:
    """Return the whole contents of a file of at most MAX_READ_FILE_SIZE bytes."""
    with open(file_name, "rb") as src:
        size = os.fstat(src.fileno()).st_size
        if size > MAX_READ_FILE_SIZE:
            raise ValueError(
                f"{os.fspath(file_name)}: {size} bytes exceeds the "
                f"{MAX_READ_FILE_SIZE}-byte limit"
            )
        return src.read(size)


def write_file(file_name: PathLike, data: bytes) -> int:
    """Create file_name holding data; an existing file is not overwritten."""
    with open(file_name, "xb") as out:
        written = out.write(data)
    return written


def file_exists(path: PathLike) -> bool:
    """True if path can be opened for reading."""
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


def _after_last_separator(path: str) -> int:
    """Index just past the last '\\' or, failing that, the last '/'."""
    pos = path.rfind("\\")
    if pos < 0:
        pos = path.rfind("/")
    return pos + 1


def lookup_file(original_file: str, secondary_file: str) -> str:
    """Locate original_file, falling back to its name in secondary_file's folder.

    Returns the path that exists; raises FileNotFoundError if neither does.
    """
    if file_exists(original_file):
        return original_file
    file_name = original_file[_after_last_separator(original_file):]
    folder = secondary_file[:_after_last_separator(secondary_file)]
    candidate = folder + file_name
    if file_exists(candidate):
        return candidate
    raise FileNotFoundError(f"{original_file}: not found (also tried {candidate})")