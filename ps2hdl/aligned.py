"""Sector-aligned reading through a reusable cache buffer."""

from __future__ import annotations

from typing import BinaryIO, Optional


class AlignedReader:
    """Read arbitrary byte ranges while issuing only sector-aligned reads.

    Each underlying read starts on a multiple of sector_size and asks for up
    to sector_size * buffer_size_in_sectors bytes; cached data is reused.
    """

    def __init__(
        self, stream: BinaryIO, sector_size: int, buffer_size_in_sectors: int
    ) -> None:
        if sector_size <= 0 or sector_size & (sector_size - 1):
            raise ValueError(f"sector size {sector_size} is not a power of two")
        if buffer_size_in_sectors <= 0:
            raise ValueError("buffer must hold at least one sector")
        self._stream = stream
        self._sector_size = sector_size
        self._buffer_size = sector_size * buffer_size_in_sectors
        self._buffer = b""
        self._offset: Optional[int] = None

    @property
    def buffer_size(self) -> int:
        """Maximum number of bytes fetched by one underlying read."""
        return self._buffer_size

    def _cached(self, start: int, end: int) -> bool:
        return (
            self._offset is not None
            and self._offset <= start
            and end <= self._offset + len(self._buffer)
        )

    def read(self, offset: int, size: int) -> bytes:
        """Return up to size bytes at offset; shorter near end of data."""
        if offset < 0 or size < 0:
            raise ValueError("offset and size must not be negative")

        if self._cached(offset, offset + size):
            start = offset - self._offset
            return self._buffer[start:start + size]

        aligned_offset = offset & ~(self._sector_size - 1)
        keep = b""
        if self._offset is not None and (
            self._offset <= aligned_offset < self._offset + len(self._buffer)
        ):
            keep = self._buffer[aligned_offset - self._offset:]

        self._stream.seek(aligned_offset + len(keep))
        fresh = self._stream.read(self._buffer_size - len(keep)) or b""
        self._buffer = keep + fresh
        self._offset = aligned_offset

        skip = offset - aligned_offset
        return self._buffer[skip:skip + size]