import time

import pytest

from ps2hdl.byteseq import get_u32
from ps2hdl.partition import (
    PARTITION_HEADER_SIZE,
    PS2_PART_MAXSUB,
    PS2_PARTITION_MAGIC,
    MbrInfo,
    PartitionHeader,
    Ps2DateTime,
    SubPartition,
    partition_checksum,
)


def test_default_header_layout():
    data = PartitionHeader().to_bytes()
    assert len(data) == 1024
    assert data[4:8] == b"APA\0"
    assert data[4:8] == PS2_PARTITION_MAGIC


def test_bytes_round_trip_exact():
    data = bytes(range(256)) * 4
    assert PartitionHeader.from_bytes(data).to_bytes() == data


def test_header_round_trip_equality():
    header = PartitionHeader(
        next=0x40000,
        prev=0x80000,
        id=b"PP.HDL.GAME",
        start=0x40000,
        length=0x40000,
        type=0x1337,
        nsub=1,
        main=0,
        modver=0x201,
        subs=[SubPartition(0x80000, 0x40000)],
        mbr=MbrInfo(version=2, data_start=0x2020, data_len=7),
    )
    copy = PartitionHeader.from_bytes(header.to_bytes())
    assert copy == header
    assert copy.subs[0] == SubPartition(0x80000, 0x40000)
    assert copy.mbr.data_start == 0x2020


def test_update_checksum_stored_in_first_word():
    header = PartitionHeader(start=0x40000, length=0x40000)
    value = header.update_checksum()
    data = header.to_bytes()
    assert get_u32(data, 0) == value
    assert partition_checksum(data) == value


def test_checksum_ignores_checksum_field():
    header = PartitionHeader(next=7)
    base = header.compute_checksum()
    header.checksum = 123
    assert header.compute_checksum() == base


def test_checksum_tracks_field_changes():
    header = PartitionHeader()
    base = header.compute_checksum()
    header.next = 5
    assert header.compute_checksum() == base + 5


def test_checksum_of_zero_header():
    assert partition_checksum(bytes(PARTITION_HEADER_SIZE)) == 0


def test_checksum_short_data():
    with pytest.raises(ValueError):
        partition_checksum(bytes(100))


def test_from_bytes_short_data():
    with pytest.raises(ValueError):
        PartitionHeader.from_bytes(bytes(PARTITION_HEADER_SIZE - 1))


def test_too_many_subs():
    header = PartitionHeader()
    header.subs = [SubPartition() for _ in range(PS2_PART_MAXSUB + 1)]
    with pytest.raises(ValueError):
        header.to_bytes()


def test_trimmed_id_space_padded():
    header = PartitionHeader(id=b"__boot".ljust(32, b" "))
    assert header.trimmed_id() == "__boot"


def test_trimmed_id_keeps_space_before_nul():
    header = PartitionHeader(id=b"abc ")
    assert header.trimmed_id() == "abc "


def test_trimmed_id_all_spaces_keeps_first():
    header = PartitionHeader(id=b" " * 32)
    assert header.trimmed_id() == " "


def test_datetime_from_timestamp():
    stamp = time.mktime((2006, 9, 1, 17, 18, 31, 0, 0, -1))
    dt = Ps2DateTime.from_timestamp(stamp)
    assert (dt.year, dt.month, dt.day) == (2006, 9, 1)
    assert (dt.hour, dt.minute, dt.second) == (17, 18, 31)


def test_datetime_fallback():
    dt = Ps2DateTime.from_timestamp(1e20)
    assert (dt.year, dt.month, dt.day) == (2005, 1, 1)


def test_datetime_round_trip():
    dt = Ps2DateTime(second=1, minute=2, hour=3, day=4, month=5, year=2010)
    data = dt.to_bytes()
    assert len(data) == 8
    assert Ps2DateTime.from_bytes(data) == dt


def test_datetime_short_data():
    with pytest.raises(ValueError):
        Ps2DateTime.from_bytes(b"\0" * 7)