"""A small sorted key/value store persisted as quoted text lines."""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

_C_SPACE = " \t\n\v\f\r"
_ESCAPES = {"\\": "\\", '"': '"', "\r": "r", "\n": "n", "\t": "t"}
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _strtol(text: str) -> int:
    """Parse the leading integer of text like strtol with base 0; 0 if none."""
    s = text.lstrip(_C_SPACE)
    sign = 1
    if s[:1] in ("+", "-"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    if s[:2].lower() == "0x" and s[2:3] and s[2].lower() in "0123456789abcdef":
        base, s = 16, s[2:]
    elif s.startswith("0"):
        base = 8
    else:
        base = 10
    digits = "0123456789abcdef"[:base]
    end = 0
    while end < len(s) and s[end].lower() in digits:
        end += 1
    return sign * int(s[:end], base) if end else 0


def _escape(text: Optional[str]) -> str:
    body = "".join(
        "\\" + _ESCAPES[ch] if ch in _ESCAPES else ch for ch in (text or "")
    )
    return f'"{body}"'


class _CharReader:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._text)

    def getc(self) -> str:
        if self._pos >= len(self._text):
            self._pos = len(self._text) + 1
            return ""
        ch = self._text[self._pos]
        self._pos += 1
        return ch

    def ungetc(self) -> None:
        self._pos = min(self._pos, len(self._text)) - 1

    def skip_past(self, wanted: str) -> bool:
        while True:
            ch = self.getc()
            if ch == "":
                return False
            if ch == wanted:
                return True


def _read_string(reader: _CharReader, term: str) -> str:
    """Read a quoted or term-terminated string; term is left in the stream."""
    ch = reader.getc()
    while ch and ch in _C_SPACE:
        ch = reader.getc()
    if ch == "":
        return ""
    quoted = ch == '"'
    if not quoted:
        reader.ungetc()

    chars = []
    while True:
        ch = reader.getc()
        if ch == "":
            break
        if (quoted and ch == '"') or ch == term:
            if not quoted:
                reader.ungetc()
            break
        if ch == "\\":
            escaped = reader.getc()
            if escaped == "":
                raise ValueError("escape sequence cut short by end of file")
            chars.append(_UNESCAPES.get(escaped, escaped))
        else:
            chars.append(ch)

    text = "".join(chars)
    return text if quoted else text.rstrip(_C_SPACE)


class KeyValueStore:
    """String keys mapped to string values, kept in key order."""

    def __init__(self) -> None:
        self._items: Dict[str, Optional[str]] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._items))

    def items(self) -> Iterator[Tuple[str, Optional[str]]]:
        """Yield (key, value) pairs in key order."""
        for key in sorted(self._items):
            yield key, self._items[key]

    def put(self, key: str, value: Optional[str]) -> None:
        """Set or replace the value for key."""
        self._items[key] = value

    def lookup(self, key: str) -> Optional[str]:
        """Return the value for key, or None when absent."""
        return self._items.get(key)

    def put_flag(self, key: str, value: bool) -> None:
        """Store a boolean as "yes" or "no"."""
        self.put(key, "yes" if value else "no")

    def get_flag(self, key: str, default: bool) -> bool:
        """Read a boolean; "yes", "true" and "1" are true, anything else false."""
        value = self.lookup(key)
        if value is None:
            return default
        return value in ("yes", "true", "1")

    def get_numeric(self, key: str, default: int) -> int:
        """Read an integer in decimal, octal (0...) or hex (0x...) notation."""
        value = self.lookup(key)
        if value is None:
            return default
        return _strtol(value)

    def store(self, filename) -> None:
        """Write every entry as a `"key" = "value"` line."""
        with open(filename, "w", encoding=_ENCODING, errors=_ERRORS, newline="") as out:
            for key, value in self.items():
                out.write(f"{_escape(key)} = {_escape(value)}\n")

    def restore(self, filename) -> None:
        """Merge entries read from filename; an unreadable file adds nothing.

        Entries with an empty value are skipped. Raises ValueError on a
        malformed file; entries read before the error are kept.
        """
        try:
            with open(filename, "r", encoding=_ENCODING, errors=_ERRORS, newline="") as src:
                text = src.read()
        except OSError:
            return

        reader = _CharReader(text)
        while not reader.at_end:
            key = _read_string(reader, "=")
            if key and not reader.skip_past("="):
                raise ValueError(f"missing '=' after key {key!r}")
            value = _read_string(reader, "\n")
            if value:
                self.put(key, value)

    @classmethod
    def load(cls, filename) -> "KeyValueStore":
        """Create a store from filename; missing files give an empty store."""
        store = cls()
        store.restore(filename)
        return store

    def merge(self, other: "KeyValueStore") -> None:
        """Copy every entry of other into this store, replacing duplicates."""
        for key, value in other.items():
            self.put(key, value)