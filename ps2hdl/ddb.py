"""Disc compatibility database and compatibility-flag parsing."""

from __future__ import annotations

import os
import re
from typing import Optional, Tuple

from .errors import DdbIncompatibleError, NoDdbEntryError, NoDiscDatabaseError
from .hdlgame import HDL_GAME_NAME_MAX
from .kvstore import KeyValueStore

CONFIG_DISC_DATABASE_FILE = "disc_database_file"
CONFIG_ENABLE_ASPI_FLAG = "enable_aspi"

MAX_FLAGS = 8

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")
_DECIMAL_DIGITS = frozenset("0123456789")


def _user_file(name: str) -> str:
    """Locate a per-user file the way the platform expects it."""
    if os.name == "nt":
        app_data = os.environ.get("APPDATA")
        if app_data:
            return os.path.join(app_data, name)
        profile = os.environ.get("USERPROFILE")
        if profile:
            return os.path.join(profile, "Application Data", name)
    else:
        home = os.environ.get("HOME")
        if home:
            return os.path.join(home, "." + name)
    return "./" + name


def get_config_file() -> str:
    """Path of the configuration file for the current user."""
    return _user_file("hdl_dump.conf")


def set_config_defaults(config: KeyValueStore) -> None:
    """Fill config with the default settings."""
    if os.name == "nt":
        config.put_flag(CONFIG_ENABLE_ASPI_FLAG, False)
    config.put(CONFIG_DISC_DATABASE_FILE, _user_file("hdl_dump.list"))


def parse_compat_flags(flags: Optional[str]) -> int:
    """Parse "0x.." or "+1+2..." compatibility flags; None means no flags.

    Raises ValueError for malformed, out-of-range or repeated flags.
    """
    if flags is None:
        return 0
    if flags.startswith("0x"):
        digits = _HEX_DIGITS.match(flags, 2).group()
        value = int(digits, 16) if digits else 0
        if value >= 1 << MAX_FLAGS:
            raise ValueError(f"compatibility flags {flags!r} out of range")
        return value
    if flags.startswith("+") and len(flags) % 2 == 0:
        result = 0
        for pos in range(0, len(flags), 2):
            plus, digit = flags[pos], flags[pos + 1]
            if plus != "+":
                raise ValueError(f"compatibility flags {flags!r}: expected '+'")
            flag = ord(digit) - ord("0")
            if not 1 <= flag <= MAX_FLAGS:
                raise ValueError(
                    f"compatibility flag {digit!r} not in 1..{MAX_FLAGS}"
                )
            bit = 1 << (flag - 1)
            if result & bit:
                raise ValueError(f"compatibility flag {flag} given twice")
            result |= bit
        return result
    raise ValueError(f"cannot parse compatibility flags {flags!r}")


def parse_dma(flags: Optional[str]) -> int:
    """Encode a "*uN" (UDMA 0-4) or "*mN" (MDMA 0-2) mode; 0 if not valid."""
    if not flags or flags[0] != "*":
        return 0
    digit = flags[2:3]
    level = int(digit) if digit in _DECIMAL_DIGITS else 0
    if level > 4:
        return 0
    mode = flags[1:2]
    if mode == "u":
        return level * 256 + 0x40
    if mode == "m" and level <= 2:
        return level * 256 + 0x20
    return 0


def _load_database(config: KeyValueStore) -> Tuple[str, KeyValueStore]:
    path = config.lookup(CONFIG_DISC_DATABASE_FILE)
    if path is None:
        raise NoDiscDatabaseError("no disc database configured")
    try:
        return path, KeyValueStore.load(path)
    except ValueError as exc:
        raise NoDiscDatabaseError(f"{path}: {exc}") from exc


def ddb_lookup(config: KeyValueStore, startup: str) -> Tuple[str, int]:
    """Return (game name, compatibility flags) recorded for startup.

    Raises NoDdbEntryError when there is no entry and DdbIncompatibleError,
    with arguments (startup, name), when the game is marked incompatible.
    """
    _, database = _load_database(config)
    entry = database.lookup(startup)
    if entry is None:
        raise NoDdbEntryError(startup)

    name, flags, incompatible = entry, 0, False
    pos = entry.rfind(";")
    if pos >= 0:
        tail = entry[pos + 1:]
        if tail[:1] == "x":
            incompatible = True
            name = entry[:pos]
        else:
            try:
                parsed = 0 if tail == "0" else parse_compat_flags(tail)
            except ValueError:
                pass
            else:
                flags = parsed
                name = entry[:pos]

    name = name[:HDL_GAME_NAME_MAX]
    if incompatible:
        raise DdbIncompatibleError(startup, name)
    return name, flags


def ddb_update(config: KeyValueStore, startup: str, name: str, flags: int) -> None:
    """Record name and flags for startup; incompatible entries are kept."""
    path, database = _load_database(config)
    try:
        ddb_lookup(config, startup)
    except NoDdbEntryError:
        pass
    database.put(startup, f"{name};0x{flags:02x}")
    database.store(path)