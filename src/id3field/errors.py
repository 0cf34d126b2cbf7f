"""Exception types raised by the field engine."""


class FieldError(Exception):
    """Base class for all field engine errors."""


class WrongFieldKind(FieldError, TypeError):
    """An operation was invoked on a field kind that does not support it."""

    def __init__(self, operation: str, kind, expected=()):
        self.operation = operation
        self.kind = kind
        self.expected = tuple(expected)
        names = ", ".join(k.name for k in self.expected)
        message = f"{operation}: not supported by {kind.name} fields"
        if names:
            message += f" (requires {names})"
        super().__init__(message)


class IndexOutOfRange(FieldError, IndexError):
    """A text item index is beyond the end of the item list."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Text item {index} out of range: field holds {count} item(s)")


class IoError(FieldError, OSError):
    """A file, reader or writer operation failed."""


class MalformedInput(FieldError, ValueError):
    """Parsed data does not match the field's kind or encoding."""


class LossyConversion(UserWarning):
    """A wide to narrow conversion replaced characters it could not map."""


class TooManyItems(FieldError, ValueError):
    """A second text item was given to a field whose wire form holds one."""
