"""Exceptions raised by the console layer."""


class TermpalError(Exception):
    """Base class for all termpal errors."""


class PlatformNotSupportedError(TermpalError, NotImplementedError):
    """The operation cannot be expressed on this terminal or platform."""

    def __init__(self, operation: str):
        super().__init__(f"{operation} is not supported on this platform")
        self.operation = operation


class InvalidColorError(TermpalError, ValueError):
    """A color value outside the 16 console colors."""

    def __init__(self, value: object):
        super().__init__(f"Invalid console color: {value!r}")
        self.value = value


class InvalidOperationError(TermpalError, RuntimeError):
    """The operation is not valid in the console's current state."""
