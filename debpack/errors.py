"""Errors raised while assembling a package."""

from typing import Optional


class DebPackError(Exception):
    """Base exception for all packaging errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self):
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class MissingInputError(DebPackError):
    """A control directory, data directory or control file is absent."""

    def __init__(self, path, what: str = "input"):
        self.path = path
        super().__init__(f"Missing {what}: {path}")


class MalformedControlError(DebPackError):
    """A mandatory control field is absent."""

    def __init__(self, field: str, source):
        self.field = field
        self.source = source
        super().__init__(
            f"Missing field '{field}' in {source}",
            f"Add a '{field}: ...' line to the control file",
        )


class ArchiveFormatError(DebPackError):
    pass


class ControlEncodingError(DebPackError):
    """The control file is not valid UTF-8."""

    def __init__(self, source, reason: str):
        self.source = source
        super().__init__(
            f"Cannot decode {source}: {reason}",
            "Save the control file as UTF-8",
        )
