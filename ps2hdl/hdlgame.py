"""Game information stored in the header of an HDL game partition."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

PS2PART_IDMAX = 32
HDL_GAME_NAME_MAX = 64
STARTUP_MAX = 8 + 1 + 3
HDL_HEADER_SIZE = 1024

# The game header sits 1 MB into the partition's user data area, which in
# turn follows a 4 KB block of partition information.
HDL_GAME_DATA_OFFSET = 0x100000
GAME_DATA_START_SECTOR = (HDL_GAME_DATA_OFFSET + 4096) // 512

OPL_MOD_STORAGE = 0x00097000
OPL_MOD_STORAGE_HI = 0x01C00000

_HDL_HEADER = struct.Struct("<IHH160s4B60sIii")


class CompatMode(enum.IntFlag):
    """Loader compatibility modes."""

    ACCURATE_READS = 0x01
    SYNC_READS = 0x02
    UNHOOK_SYSCALLS = 0x04
    ZERO_PSS = 0x08
    EMULATE_DVD_DL = 0x10
    DISABLE_IGR = 0x20
    HIGH_MODULE_STORAGE = 0x40
    HIDE_DEV9 = 0x80


@dataclass
class HdlGameInfo:
    """What is known about an installed game."""

    partition_name: str
    name: str
    startup: str
    hdl_compat_flags: int
    ops2l_compat_flags: int
    dma_type: int
    dma_mode: int
    layer_break: int
    disctype: int
    start_sector: int
    total_size_in_kb: int

    @property
    def ops2l_modes(self) -> CompatMode:
        """Loader compatibility flags as a CompatMode."""
        return CompatMode(self.ops2l_compat_flags & 0xFF)


def _c_string(raw: bytes, limit: int) -> str:
    return raw.split(b"\0", 1)[0][:limit].decode("latin-1")


def parse_hdl_header(
    data, partition_name: str, partition_size: int, partition_start: int
) -> HdlGameInfo:
    """Decode a game header.

    partition_size is in 512-byte sectors and partition_start is the first
    sector of the partition's data area. Raises ValueError if data is short.
    """
    if len(data) < HDL_HEADER_SIZE:
        raise ValueError(f"game header needs {HDL_HEADER_SIZE} bytes, got {len(data)}")
    (_magic, _reserved, _version, gamename, hdl_flags, ops2l_flags, dma_type,
     dma_mode, startup, layer1_start, disc_type, _num_parts) = _HDL_HEADER.unpack_from(data)
    return HdlGameInfo(
        partition_name=partition_name.split("\0", 1)[0][:PS2PART_IDMAX],
        name=_c_string(gamename, HDL_GAME_NAME_MAX),
        startup=_c_string(startup, STARTUP_MAX),
        hdl_compat_flags=hdl_flags,
        ops2l_compat_flags=ops2l_flags,
        dma_type=dma_type,
        dma_mode=dma_mode,
        layer_break=layer1_start,
        disctype=disc_type,
        start_sector=(partition_start + GAME_DATA_START_SECTOR) & 0xFFFFFFFF,
        total_size_in_kb=(partition_size & 0xFFFFFFFF) // 2,
    )