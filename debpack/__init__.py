"""Pure-Python .deb builder."""

from .builder import build_deb
from .config import BuildConfig
from .control import ControlSet
from .errors import ArchiveFormatError, DebPackError, MalformedControlError, MissingInputError

__version__ = "1.0.0"

__all__ = [
    "ArchiveFormatError",
    "BuildConfig",
    "ControlSet",
    "DebPackError",
    "MalformedControlError",
    "MissingInputError",
    "build_deb",
]
