"""
Control metadata: parsing, validation and serialization of the `control` file.

A ControlSet keeps fields in insertion order. A repeated field name overwrites
the earlier value but keeps the earlier position.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Optional

from .errors import ControlEncodingError, MalformedControlError

logger = logging.getLogger(__name__)

MANDATORY_FIELDS = ("Package", "Version", "Architecture", "Maintainer", "Description")
INSTALLED_SIZE = "Installed-Size"

_CONTINUATION = re.compile(r"\r?\n[ \t]+")
_DELIMITER = re.compile(r"\s*:\s*")


class ControlSet:
    """Ordered, read-only mapping of control field names to values."""

    def __init__(self, fields: Optional[Dict[str, str]] = None, source=None):
        self._fields: Dict[str, str] = dict(fields or {})
        self.source = source

    @classmethod
    def parse(cls, path) -> "ControlSet":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ControlEncodingError(path, str(e)) from None
        return cls.parse_text(text, source=path)

    @classmethod
    def parse_text(cls, text: str, source=None) -> "ControlSet":
        fields: Dict[str, str] = {}
        folded = _CONTINUATION.sub(" ", text)
        for lineno, line in enumerate(folded.splitlines(), 1):
            if not line.strip():
                fields[""] = ""
                continue
            parts = _DELIMITER.split(line, maxsplit=1)
            if len(parts) != 2:
                logger.warning(f"{source or '<control>'}:{lineno}: ignoring line without ':' delimiter: {line!r}")
                continue
            name, value = parts
            fields[name.strip()] = value.rstrip()
        return cls(fields, source=source)

    def validate(self) -> "ControlSet":
        """Raise MalformedControlError for the first missing mandatory field."""
        for name in MANDATORY_FIELDS:
            if name not in self._fields:
                raise MalformedControlError(name, self.source)
        return self

    def with_installed_size(self, total_bytes: int) -> "ControlSet":
        """Return a new ControlSet carrying Installed-Size in KiB (floored)."""
        fields = dict(self._fields)
        fields[INSTALLED_SIZE] = str(total_bytes // 1024)
        return ControlSet(fields, source=self.source)

    def serialize(self) -> str:
        return "".join(f"{name}: {value}\n" for name, value in self._fields.items() if name)

    def __getitem__(self, name: str) -> str:
        return self._fields[name]

    def __contains__(self, name) -> bool:
        return name in self._fields

    def __iter__(self):
        return iter(self._fields)

    def __repr__(self):
        return f"ControlSet({self._fields!r}, source={self.source!r})"
