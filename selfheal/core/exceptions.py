class HealingError(RuntimeError):
    """Raised when selector healing fails."""


class EncodeError(HealingError):
    """Raised when a node path cannot be written to the wire format."""


class DecodeError(HealingError):
    """Raised when persisted content cannot be read back as a node path."""


class StorageError(HealingError):
    """Raised when the path store cannot be read or the report cannot be written."""


class LocatorFormatError(HealingError):
    """Raised when a locator string has no '<type>: <value>' separator."""


class SelectorBuildError(HealingError):
    """Raised when no selector can be built for a node."""
