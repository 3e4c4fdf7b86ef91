# ps2hdl

A library for the on-disk structures of PlayStation 2 hard disks that use the
APA partition scheme, and for the small formats around HDLoader games: the
1024-byte partition header, an in-memory partition slice with consistency
checks, HDLoader game headers, the compatibility-flag database and IOPRP
images.

It has no dependencies outside the standard library.

## Partition headers

`ps2hdl.partition.PartitionHeader` decodes and encodes one 1024-byte header.
`compute_checksum()` returns the checksum the header needs (the sum of 32-bit
words 1 to 255), `update_checksum()` stores it, and `trimmed_id()` returns the
name without its space padding.

```python
from ps2hdl.partition import PartitionHeader, partition_checksum

with open("ps2-disk.img", "rb") as image:
    raw = image.read(1024)

header = PartitionHeader.from_bytes(raw)
print(header.trimmed_id(), header.start, header.length, header.next)
print(header.checksum == partition_checksum(raw))
```

`SubPartition`, `MbrInfo` and `Ps2DateTime` describe the parts of a header;
`Ps2DateTime.from_timestamp()` converts a Unix time to local date and time.

## Checking and editing a slice

`ps2hdl.apa_slice.ApaSlice` holds the partitions of one slice together with
a map of its 128 MB chunks.

```python
from ps2hdl.apa_slice import ApaSlice
from ps2hdl.partition import PartitionHeader
from ps2hdl.errors import NotAllowedError

mbr = PartitionHeader(id=b"__mbr", start=0, length=262144, type=1)
mbr.update_checksum()

slice_ = ApaSlice(size_in_mb=1024)
slice_.add(mbr, existing=True, linked=True)
slice_.setup_statistics()
print(slice_.map_string)        # "M......."
print(slice_.problems())        # []
slice_.check()                  # raises BadApaError on the first problem

print(slice_.find("__MBR"))     # 0 - names compare without regard to case
try:
    slice_.delete("__mbr")
except NotAllowedError:
    print("system partitions cannot be deleted")
```

`problems()` lists bad checksums, partitions outside the slice, sizes that are
not multiples of 128 MB, misaligned starts, inconsistent sub-partitions and
broken prev/next links. `delete()` removes a partition with its
sub-partitions, frees their chunks and relinks the list;
`normalize_linked_list()` sorts by start sector and rewrites prev/next links
and checksums where they changed.

Errors are subclasses of `ps2hdl.errors.HdlError`, such as `BadApaError`,
`PartitionNotFoundError` and `NotAllowedError`.

## HDLoader game headers

```python
from ps2hdl.hdlgame import parse_hdl_header, CompatMode

info = parse_hdl_header(data, "PP.HDL.MYGAME", partition_size, partition_start)
print(info.name, info.startup, info.start_sector, info.total_size_in_kb)
print(CompatMode.ACCURATE_READS in info.ops2l_modes)
```

`partition_size` is in 512-byte sectors; `partition_start` is the first sector
of the partition's data area.

## Compatibility flags and the disc database

```python
from ps2hdl.ddb import parse_compat_flags, parse_dma

parse_compat_flags("+1+3")   # 5
parse_compat_flags("0x02")   # 2
parse_dma("*u4")             # 1088, UDMA mode 4
```

`parse_compat_flags` raises `ValueError` for malformed, repeated or
out-of-range flags. `ddb_lookup(config, startup)` returns `(name, flags)` from
the database file named in `config`, and raises `NoDdbEntryError`,
`DdbIncompatibleError` or `NoDiscDatabaseError`; `ddb_update` records a new
entry. `set_config_defaults` and `get_config_file` give the per-user default
locations.

The database is a `ps2hdl.kvstore.KeyValueStore`: a sorted key/value store
saved as `"key" = "value"` lines with escaped quotes, backslashes, tabs and
line breaks.

```python
from ps2hdl.kvstore import KeyValueStore

store = KeyValueStore()
store.put("SLUS_123.45", "My Game;0x05")
store.put_flag("enable_aspi", False)
store.store("settings.list")
print(KeyValueStore.load("settings.list").lookup("SLUS_123.45"))
```

## IOPRP images

`ps2hdl.ioprp.parse_romdir` lists the `RomdirEntry` items of an image, and
`patch_ioprp_image(image, cdvdman, cdvdfsv, eesync)` returns a copy with those
three modules replaced, every file kept 16-byte aligned.

## Other pieces

- `ps2hdl.byteseq` — `get_u32`, `set_u32`, `get_u16`, `set_u16`, `get_u8`,
  `set_u8` for little-endian fields in byte buffers.
- `ps2hdl.aligned.AlignedReader` — reads any byte range from a stream while
  issuing only sector-aligned reads, reusing cached data.
- `ps2hdl.common` — `ltrim`, `rtrim`, `caseless_compare`, `copy_data`,
  `read_file` (files up to 4 MB), `write_file` (never overwrites),
  `file_exists` and `lookup_file`.
- `ps2hdl.execli.exec_cli` — runs a program, passes its merged output to a
  callback in chunks and returns the exit code.

## What it does not do

The package works on headers and slices held in memory. It does not open a
disk or disk image as a block device, does not walk a whole disk to build its
partition table (including two-slice disks), does not allocate space for new
partitions, and does not write partition tables, MBR data or game data back
to a disk. There is no command-line program.