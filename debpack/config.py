"""
Build configuration.

Only the two input directories come from the command line; everything else
is read from the environment:

    DEBPACK_OUTPUT_DIR          directory the .deb is written into (default: cwd)
    DEBPACK_DATA_COMPRESSION    gzip | xz | lzma (default: gzip)
    DEBPACK_COMPRESSION_LEVEL   gzip level 1-9 or xz/lzma preset 0-9
    DEBPACK_PAD_FINAL_MEMBER    1/true to pad an odd-sized last ar member
    SOURCE_DATE_EPOCH           fixed timestamp for ar headers and gzip headers
"""

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .errors import DebPackError

DATA_COMPRESSIONS = ("gzip", "xz", "lzma")
TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class BuildConfig:
    output_dir: Path = field(default_factory=Path)
    data_compression: str = "gzip"
    compression_level: Optional[int] = None
    mtime: Optional[int] = None
    pad_final_member: bool = False

    def __post_init__(self):
        self.output_dir = Path(self.output_dir)
        if self.data_compression not in DATA_COMPRESSIONS:
            raise DebPackError(
                f"Unsupported data compression '{self.data_compression}'",
                f"Use one of: {', '.join(DATA_COMPRESSIONS)}",
            )
        if self.compression_level is not None and not 0 <= self.compression_level <= 9:
            raise DebPackError(f"Compression level out of range: {self.compression_level}")

    def build_time(self) -> int:
        """Timestamp written into ar headers and gzip headers."""
        if self.mtime is not None:
            return self.mtime
        return int(time.time())

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BuildConfig":
        env = os.environ if environ is None else environ
        kwargs = {}
        if env.get("DEBPACK_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(env["DEBPACK_OUTPUT_DIR"])
        if env.get("DEBPACK_DATA_COMPRESSION"):
            kwargs["data_compression"] = env["DEBPACK_DATA_COMPRESSION"].strip().lower()
        if env.get("DEBPACK_COMPRESSION_LEVEL"):
            kwargs["compression_level"] = _parse_int("DEBPACK_COMPRESSION_LEVEL", env["DEBPACK_COMPRESSION_LEVEL"])
        if env.get("SOURCE_DATE_EPOCH"):
            kwargs["mtime"] = _parse_int("SOURCE_DATE_EPOCH", env["SOURCE_DATE_EPOCH"])
        if env.get("DEBPACK_PAD_FINAL_MEMBER"):
            kwargs["pad_final_member"] = env["DEBPACK_PAD_FINAL_MEMBER"].strip().lower() in TRUE_VALUES
        return cls(**kwargs)


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise DebPackError(f"{name} must be an integer, got '{value}'") from None
