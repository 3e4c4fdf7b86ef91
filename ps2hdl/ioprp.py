"""Replacing modules inside an IOPRP ROM image."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import List

_ENTRY = struct.Struct("<10sHI")
ENTRY_SIZE = _ENTRY.size
NAME_SIZE = 10


def _align16(size: int) -> int:
    return (size + 0xF) & ~0xF


@dataclass
class RomdirEntry:
    """One entry of a ROM directory: file name, extended-info size, file size."""

    name: str
    extinfo_size: int = 0
    file_size: int = 0

    @classmethod
    def from_bytes(cls, data) -> "RomdirEntry":
        if len(data) < ENTRY_SIZE:
            raise ValueError(f"romdir entry needs {ENTRY_SIZE} bytes")
        raw_name, extinfo_size, file_size = _ENTRY.unpack_from(data)
        return cls(raw_name.split(b"\0", 1)[0].decode("latin-1"), extinfo_size, file_size)

    def to_bytes(self) -> bytes:
        raw_name = self.name.encode("latin-1")
        if len(raw_name) > NAME_SIZE:
            raise ValueError(f"file name {self.name!r} longer than {NAME_SIZE} bytes")
        return _ENTRY.pack(raw_name, self.extinfo_size & 0xFFFF, self.file_size & 0xFFFFFFFF)


def parse_romdir(image) -> List[RomdirEntry]:
    """Entries of the ROM directory at the start of image, up to its terminator."""
    entries = []
    for offset in range(0, len(image) - ENTRY_SIZE + 1, ENTRY_SIZE):
        if image[offset] == 0:
            return entries
        entries.append(RomdirEntry.from_bytes(image[offset:offset + ENTRY_SIZE]))
    raise ValueError("romdir has no terminating entry")


def _put(buffer: bytearray, offset: int, data: bytes) -> None:
    end = offset + len(data)
    if len(buffer) < end:
        buffer.extend(bytes(end - len(buffer)))
    buffer[offset:end] = data


def patch_ioprp_image(image, cdvdman: bytes, cdvdfsv: bytes, eesync: bytes) -> bytes:
    """Return a copy of image with CDVDMAN, CDVDFSV and EESYNC replaced.

    Every file stays 16-byte aligned, gaps are filled with zeros, and the
    directory entries are rewritten with the new sizes.
    """
    replacements = {"CDVDMAN": cdvdman, "CDVDFSV": cdvdfsv, "EESYNC": eesync}
    out = bytearray()
    offset_in = offset_out = 0

    for index, entry in enumerate(parse_romdir(image)):
        entry_offset = index * ENTRY_SIZE
        _put(out, entry_offset, bytes(ENTRY_SIZE))

        content = replacements.get(entry.name)
        if content is None:
            if offset_in + entry.file_size > len(image):
                raise ValueError(f"{entry.name}: file runs past the end of the image")
            content = bytes(image[offset_in:offset_in + entry.file_size])
        _put(out, offset_out, bytes(content))

        new_entry = RomdirEntry(entry.name, entry.extinfo_size, len(content))
        _put(out, entry_offset, new_entry.to_bytes())

        offset_in += _align16(entry.file_size)
        padded = _align16(len(content))
        _put(out, offset_out + len(content), bytes(padded - len(content)))
        offset_out += padded

    if len(out) < offset_out:
        out.extend(bytes(offset_out - len(out)))
    return bytes(out[:offset_out])