"""
Exception types raised by the save codec and session.
"""


class SaveEditorError(Exception):
    """Base class for all save editor errors."""


class InvalidExtension(SaveEditorError):
    """Raised when a file is offered whose name does not end in '.dat'."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"Please select a .dat file (got '{filename}')")
        self.filename = filename


class UnknownField(SaveEditorError, KeyError):
    """Raised when a field name is not part of the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown field: {name}")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class PatchFailure(SaveEditorError):
    """Raised when field values could not be written back into a buffer."""


class InvalidHex(SaveEditorError, ValueError):
    """Raised when hex text cannot be parsed back into bytes."""
