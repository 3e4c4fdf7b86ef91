"""Little-endian integer access inside byte buffers."""

import struct

_U32 = struct.Struct("<I")
_U16 = struct.Struct("<H")
_U8 = struct.Struct("<B")


def _get(fmt: struct.Struct, buffer, offset: int) -> int:
    if offset < 0:
        raise ValueError(f"negative offset {offset}")
    try:
        return fmt.unpack_from(buffer, offset)[0]
    except struct.error as exc:
        raise ValueError(
            f"buffer too short for {fmt.size} bytes at offset {offset}"
        ) from exc


def _set(fmt: struct.Struct, mask: int, buffer, offset: int, value: int) -> None:
    if offset < 0:
        raise ValueError(f"negative offset {offset}")
    try:
        fmt.pack_into(buffer, offset, value & mask)
    except struct.error as exc:
        raise ValueError(
            f"buffer too short for {fmt.size} bytes at offset {offset}"
        ) from exc


def get_u32(buffer, offset: int = 0) -> int:
    """Read an unsigned little-endian 32-bit integer."""
    return _get(_U32, buffer, offset)


def set_u32(buffer, offset: int, value: int) -> None:
    """Write the low 32 bits of value, little-endian."""
    _set(_U32, 0xFFFFFFFF, buffer, offset, value)


def get_u16(buffer, offset: int = 0) -> int:
    """Read an unsigned little-endian 16-bit integer."""
    return _get(_U16, buffer, offset)


def set_u16(buffer, offset: int, value: int) -> None:
    """Write the low 16 bits of value, little-endian."""
    _set(_U16, 0xFFFF, buffer, offset, value)


def get_u8(buffer, offset: int = 0) -> int:
    """Read one unsigned byte."""
    return _get(_U8, buffer, offset)


def set_u8(buffer, offset: int, value: int) -> None:
    """Write the low 8 bits of value."""
    _set(_U8, 0xFF, buffer, offset, value)