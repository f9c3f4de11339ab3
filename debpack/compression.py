import gzip
import lzma
from typing import Optional, Tuple

GZIP_DEFAULT_LEVEL = 9
LZMA_DEFAULT_PRESET = 6

SUFFIXES = {
    "gzip": ".gz",
    "xz": ".xz",
    "lzma": ".lzma",
}


def compress(raw: bytes, method: str = "gzip", level: Optional[int] = None, mtime: int = 0) -> Tuple[bytes, str]:
    """Compress a raw tar stream; returns (compressed bytes, file suffix)."""
    if method == "gzip":
        comp = gzip.compress(raw, compresslevel=GZIP_DEFAULT_LEVEL if level is None else level, mtime=mtime)
    elif method == "xz":
        comp = lzma.compress(raw, format=lzma.FORMAT_XZ, preset=LZMA_DEFAULT_PRESET if level is None else level)
    elif method == "lzma":
        # LZMA-alone, for dpkg builds without xz support
        comp = lzma.compress(raw, format=lzma.FORMAT_ALONE, preset=LZMA_DEFAULT_PRESET if level is None else level)
    else:
        raise ValueError(f"Unknown compression method: {method}")
    return comp, SUFFIXES[method]


def decompress(data: bytes, suffix: str) -> bytes:
    if suffix == ".gz":
        return gzip.decompress(data)
    if suffix == ".xz":
        return lzma.decompress(data, format=lzma.FORMAT_XZ)
    if suffix == ".lzma":
        return lzma.decompress(data, format=lzma.FORMAT_ALONE)
    if suffix == "":
        return data
    raise ValueError(f"Unknown compression suffix: {suffix}")
