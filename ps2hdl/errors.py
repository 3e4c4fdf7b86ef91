"""Exceptions raised for APA partition and disc database failures."""


class HdlError(Exception):
    """Base class for every error reported by this package."""


class NotApaError(HdlError):
    """The device does not carry an APA partition table."""


class BadApaError(HdlError):
    """The APA partition table is damaged or inconsistent."""


class Cross128GBError(HdlError):
    """Partition data lies beyond the 128 GB mark of a two-slice disk."""


class NoSpaceError(HdlError):
    """Not enough free space to allocate the requested partition."""


class PartitionExistsError(HdlError):
    """A partition with the requested name already exists."""


class PartitionNotFoundError(HdlError, LookupError):
    """No partition with the requested name exists."""


class NotAllowedError(HdlError):
    """The operation is not allowed, e.g. deleting a system partition."""


class NoDiscDatabaseError(HdlError):
    """The disc compatibility database is not available."""


class NoDdbEntryError(HdlError, LookupError):
    """The disc compatibility database has no entry for a startup file."""


class DdbIncompatibleError(HdlError):
    """The disc compatibility database marks a game as incompatible."""