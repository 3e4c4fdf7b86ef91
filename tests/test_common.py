import io

import pytest

from ps2hdl.common import (
    MAX_READ_FILE_SIZE,
    caseless_compare,
    copy_data,
    file_exists,
    lookup_file,
    ltrim,
    read_file,
    rtrim,
    write_file,
)


def test_ltrim_removes_spaces_and_tabs_only():
    assert ltrim(" \t hello \t") == "hello \t"
    assert ltrim("\nx") == "\nx"


def test_rtrim_removes_spaces_and_tabs_only():
    assert rtrim(" \t hello \t ") == " \t hello"
    assert rtrim("x\n") == "x\n"


def test_trims_of_blank_string_are_empty():
    assert ltrim(" \t ") == ""
    assert rtrim(" \t ") == ""


@pytest.mark.parametrize(
    "s1, s2, expected",
    [
        ("__empty", "__EMPTY", True),
        ("PP.Game", "pp.game", True),
        ("abc", "abcd", False),
        ("abc", "abd", False),
        (None, None, True),
        (None, "x", False),
        ("x", None, False),
        ("", "", True),
    ],
)
def test_caseless_compare(s1, s2, expected):
    assert caseless_compare(s1, s2) is expected


def test_copy_data_until_eof():
    payload = bytes(range(256)) * 10
    target = io.BytesIO()
    seen = []
    copied = copy_data(io.BytesIO(payload), target, 0, 100, seen.append)
    assert copied == len(payload)
    assert target.getvalue() == payload
    assert seen[-1] == len(payload)
    assert seen == sorted(seen)


def test_copy_data_limited_size():
    payload = bytes(range(256)) * 4
    target = io.BytesIO()
    copied = copy_data(io.BytesIO(payload), target, 300, 128)
    assert copied == 300
    assert target.getvalue() == payload[:300]


def test_copy_data_stops_at_short_source():
    payload = b"abcdef"
    target = io.BytesIO()
    assert copy_data(io.BytesIO(payload), target, 1000, 4) == len(payload)
    assert target.getvalue() == payload


def test_copy_data_progress_can_abort():
    def abort(_):
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        copy_data(io.BytesIO(b"x" * 50), io.BytesIO(), 0, 10, abort)


def test_copy_data_rejects_zero_buffer():
    with pytest.raises(ValueError):
        copy_data(io.BytesIO(b"x"), io.BytesIO(), 0, 0)


def test_write_then_read_round_trip(tmp_path):
    path = tmp_path / "data.bin"
    payload = bytes(range(256)) * 3
    assert write_file(path, payload) == len(payload)
    assert read_file(path) == payload


def test_write_file_does_not_overwrite(tmp_path):
    path = tmp_path / "data.bin"
    write_file(path, b"first")
    with pytest.raises(FileExistsError):
        write_file(path, b"second")
    assert read_file(path) == b"first"


def test_read_file_size_limit(tmp_path):
    path = tmp_path / "big.bin"
    path.write_bytes(b"\0" * (MAX_READ_FILE_SIZE + 1))
    with pytest.raises(ValueError):
        read_file(path)


def test_read_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_file(tmp_path / "missing.bin")


def test_file_exists(tmp_path):
    path = tmp_path / "a.txt"
    assert file_exists(path) is False
    path.write_bytes(b"a")
    assert file_exists(path) is True
    assert file_exists(tmp_path) is False


def test_lookup_file_existing_path_is_returned(tmp_path):
    path = tmp_path / "game.iso"
    path.write_bytes(b"x")
    assert lookup_file(str(path), "/nowhere/game.cue") == str(path)


def test_lookup_file_falls_back_to_secondary_folder(tmp_path):
    (tmp_path / "game.bin").write_bytes(b"x")
    cue = str(tmp_path / "game.cue")
    found = lookup_file("/elsewhere/dir/game.bin", cue)
    assert found == str(tmp_path) + "/game.bin"
    assert file_exists(found)


def test_lookup_file_backslash_original(tmp_path):
    (tmp_path / "track.bin").write_bytes(b"x")
    found = lookup_file("C:\\discs\\track.bin", str(tmp_path / "image.cue"))
    assert found == str(tmp_path) + "/track.bin"


def test_lookup_file_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        lookup_file("/elsewhere/none.bin", str(tmp_path / "a.cue"))