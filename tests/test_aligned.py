import io

import pytest

from ps2hdl.aligned import AlignedReader

DATA = bytes(range(256)) * 16


class RecordingStream(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self.calls = []

    def read(self, size=-1):
        self.calls.append((self.tell(), size))
        return super().read(size)


def make_reader(sectors=2):
    stream = RecordingStream(DATA)
    return stream, AlignedReader(stream, 512, sectors)


def test_read_returns_requested_range():
    _, reader = make_reader()
    assert reader.read(10, 20) == DATA[10:30]


def test_underlying_reads_are_aligned():
    stream, reader = make_reader()
    reader.read(700, 10)
    reader.read(2000, 30)
    for position, size in stream.calls:
        assert position % 512 == 0 or size < reader.buffer_size
    assert stream.calls[0][0] == 512


def test_cached_read_does_not_touch_stream():
    stream, reader = make_reader()
    reader.read(0, 100)
    count = len(stream.calls)
    assert reader.read(200, 300) == DATA[200:500]
    assert len(stream.calls) == count


def test_partial_overlap_reuses_cache():
    stream, reader = make_reader()
    reader.read(0, 10)
    assert reader.read(600, 600) == DATA[600:1200]
    position, size = stream.calls[-1]
    assert position == 1024
    assert size == reader.buffer_size - 512


def test_read_larger_than_buffer_is_truncated():
    _, reader = make_reader(sectors=1)
    result = reader.read(100, 2000)
    assert result == DATA[100:512]


def test_read_near_end_is_short():
    _, reader = make_reader()
    assert reader.read(len(DATA) - 6, 20) == DATA[-6:]


def test_read_past_end_is_empty():
    _, reader = make_reader()
    assert reader.read(len(DATA) + 1000, 10) == b""


@pytest.mark.parametrize("offset", [0, 511, 512, 1023, 3000, 4000])
def test_sequence_of_reads_matches_data(offset):
    _, reader = make_reader()
    reader.read(1500, 50)
    assert reader.read(offset, 64) == DATA[offset:offset + 64]


def test_bad_sector_size_rejected():
    with pytest.raises(ValueError):
        AlignedReader(io.BytesIO(DATA), 500, 2)


def test_zero_buffer_rejected():
    with pytest.raises(ValueError):
        AlignedReader(io.BytesIO(DATA), 512, 0)


def test_negative_offset_rejected():
    _, reader = make_reader()
    with pytest.raises(ValueError):
        reader.read(-1, 4)