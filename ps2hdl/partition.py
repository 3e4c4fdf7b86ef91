"""The 1024-byte APA partition header and its parts."""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass, field
from typing import List

PS2_PARTITION_MAGIC = b"APA\0"
PS2_PART_IDMAX = 32
PS2_PART_PASSMAX = 8
PS2_PART_MAXSUB = 64
PS2_PART_FLAG_SUB = 0x0001
PS2_MBR_VERSION = 2
PARTITION_HEADER_SIZE = 1024

_RESERVED_SIZE = 156
_MBR_MAGIC_SIZE = 32
_MBR_RESERVED_SIZE = 200

_DATETIME = struct.Struct("<6BH")
_SUB = struct.Struct("<II")
_MBR = struct.Struct("<32sII8sII200s")
_HEADER = struct.Struct("<I4sII32s8s8sIIHHI8sIII156s256s512s")
_WORDS = struct.Struct("<256I")


def _fixed(value: bytes, size: int) -> bytes:
    return bytes(value)[:size].ljust(size, b"\0")


def partition_checksum(data) -> int:
    """Sum of the 32-bit words 1..255 of a header, modulo 2**32."""
    if len(data) < PARTITION_HEADER_SIZE:
        raise ValueError(f"partition header needs {PARTITION_HEADER_SIZE} bytes")
    return sum(_WORDS.unpack_from(data)[1:]) & 0xFFFFFFFF


@dataclass
class Ps2DateTime:
    """A date and time as stored on a PS2 hard disk."""

    second: int = 0
    minute: int = 0
    hour: int = 0
    day: int = 0
    month: int = 0
    year: int = 0
    unused: int = 0

    @classmethod
    def from_timestamp(cls, timestamp: float) -> "Ps2DateTime":
        """Local time of timestamp; 2005-01-01 00:00:00 if it cannot be converted."""
        try:
            tm = time.localtime(timestamp)
        except (OverflowError, OSError, ValueError):
            return cls(day=1, month=1, year=2005)
        return cls(
            second=tm.tm_sec,
            minute=tm.tm_min,
            hour=tm.tm_hour,
            day=tm.tm_mday,
            month=tm.tm_mon,
            year=tm.tm_year,
        )

    @classmethod
    def from_bytes(cls, data) -> "Ps2DateTime":
        if len(data) < _DATETIME.size:
            raise ValueError(f"date/time needs {_DATETIME.size} bytes")
        unused, sec, minute, hour, day, month, year = _DATETIME.unpack_from(data)
        return cls(sec, minute, hour, day, month, year, unused)

    def to_bytes(self) -> bytes:
        return _DATETIME.pack(
            self.unused & 0xFF,
            self.second & 0xFF,
            self.minute & 0xFF,
            self.hour & 0xFF,
            self.day & 0xFF,
            self.month & 0xFF,
            self.year & 0xFFFF,
        )


@dataclass
class SubPartition:
    """Start sector and length in sectors of one sub-partition."""

    start: int = 0
    length: int = 0


@dataclass
class MbrInfo:
    """MBR area of the first partition header."""

    magic: bytes = bytes(_MBR_MAGIC_SIZE)
    version: int = 0
    nsector: int = 0
    created: Ps2DateTime = field(default_factory=Ps2DateTime)
    data_start: int = 0
    data_len: int = 0
    reserved: bytes = bytes(_MBR_RESERVED_SIZE)

    def __post_init__(self) -> None:
        self.magic = _fixed(self.magic, _MBR_MAGIC_SIZE)
        self.reserved = _fixed(self.reserved, _MBR_RESERVED_SIZE)


def _unpack_mbr(data: bytes) -> MbrInfo:
    magic, version, nsector, created, start, length, reserved = _MBR.unpack(data)
    return MbrInfo(
        magic, version, nsector, Ps2DateTime.from_bytes(created), start, length, reserved
    )


def _pack_mbr(mbr: MbrInfo) -> bytes:
    return _MBR.pack(
        _fixed(mbr.magic, _MBR_MAGIC_SIZE),
        mbr.version & 0xFFFFFFFF,
        mbr.nsector & 0xFFFFFFFF,
        mbr.created.to_bytes(),
        mbr.data_start & 0xFFFFFFFF,
        mbr.data_len & 0xFFFFFFFF,
        _fixed(mbr.reserved, _MBR_RESERVED_SIZE),
    )


def _pad_subs(subs: List[SubPartition]) -> List[SubPartition]:
    if len(subs) > PS2_PART_MAXSUB:
        raise ValueError(f"at most {PS2_PART_MAXSUB} sub-partitions are allowed")
    return list(subs) + [SubPartition() for _ in range(PS2_PART_MAXSUB - len(subs))]


@dataclass
class PartitionHeader:
    """One APA partition header sector pair (1024 bytes)."""

    checksum: int = 0
    magic: bytes = PS2_PARTITION_MAGIC
    next: int = 0
    prev: int = 0
    id: bytes = bytes(PS2_PART_IDMAX)
    rpwd: bytes = bytes(PS2_PART_PASSMAX)
    fpwd: bytes = bytes(PS2_PART_PASSMAX)
    start: int = 0
    length: int = 0
    type: int = 0
    flags: int = 0
    nsub: int = 0
    created: Ps2DateTime = field(default_factory=Ps2DateTime)
    main: int = 0
    number: int = 0
    modver: int = 0
    reserved: bytes = bytes(_RESERVED_SIZE)
    mbr: MbrInfo = field(default_factory=MbrInfo)
    subs: List[SubPartition] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.magic = _fixed(self.magic, 4)
        self.id = _fixed(self.id, PS2_PART_IDMAX)
        self.rpwd = _fixed(self.rpwd, PS2_PART_PASSMAX)
        self.fpwd = _fixed(self.fpwd, PS2_PART_PASSMAX)
        self.reserved = _fixed(self.reserved, _RESERVED_SIZE)
        self.subs = _pad_subs(self.subs)

    @classmethod
    def from_bytes(cls, data) -> "PartitionHeader":
        if len(data) < PARTITION_HEADER_SIZE:
            raise ValueError(f"partition header needs {PARTITION_HEADER_SIZE} bytes")
        (checksum, magic, nxt, prev, ident, rpwd, fpwd, start, length, ptype,
         flags, nsub, created, main, number, modver, reserved, mbr,
         subs) = _HEADER.unpack_from(data)
        return cls(
            checksum=checksum,
            magic=magic,
            next=nxt,
            prev=prev,
            id=ident,
            rpwd=rpwd,
            fpwd=fpwd,
            start=start,
            length=length,
            type=ptype,
            flags=flags,
            nsub=nsub,
            created=Ps2DateTime.from_bytes(created),
            main=main,
            number=number,
            modver=modver,
            reserved=reserved,
            mbr=_unpack_mbr(mbr),
            subs=[SubPartition(s, n) for s, n in _SUB.iter_unpack(subs)],
        )

    def to_bytes(self) -> bytes:
        subs = b"".join(
            _SUB.pack(sub.start & 0xFFFFFFFF, sub.length & 0xFFFFFFFF)
            for sub in _pad_subs(self.subs)
        )
        return _HEADER.pack(
            self.checksum & 0xFFFFFFFF,
            _fixed(self.magic, 4),
            self.next & 0xFFFFFFFF,
            self.prev & 0xFFFFFFFF,
            _fixed(self.id, PS2_PART_IDMAX),
            _fixed(self.rpwd, PS2_PART_PASSMAX),
            _fixed(self.fpwd, PS2_PART_PASSMAX),
            self.start & 0xFFFFFFFF,
            self.length & 0xFFFFFFFF,
            self.type & 0xFFFF,
            self.flags & 0xFFFF,
            self.nsub & 0xFFFFFFFF,
            self.created.to_bytes(),
            self.main & 0xFFFFFFFF,
            self.number & 0xFFFFFFFF,
            self.modver & 0xFFFFFFFF,
            _fixed(self.reserved, _RESERVED_SIZE),
            _pack_mbr(self.mbr),
            subs,
        )

    def compute_checksum(self) -> int:
        """Checksum the header would need to be valid."""
        return partition_checksum(self.to_bytes())

    def update_checksum(self) -> int:
        """Store and return the correct checksum."""
        self.checksum = self.compute_checksum()
        return self.checksum

    def trimmed_id(self) -> str:
        """Partition name with trailing space padding removed."""
        raw = _fixed(self.id, PS2_PART_IDMAX)
        end = len(raw)
        while end > 1 and raw[end - 1] == 0x20:
            end -= 1
        return raw[:end].split(b"\0", 1)[0].decode("latin-1")