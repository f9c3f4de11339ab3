"""
Payload scanning and the data bundle (data.tar.*).

Both the tar stream and the checksum scan walk the tree in the same order:
sorted entries per directory, subdirectory entries before files, parents
before children.
"""

import hashlib
import io
import logging
import os
import stat
import tarfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .compression import compress
from .config import BuildConfig

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class PayloadEntry:
    path: str       # relative to the data directory, '/' separated
    size: int
    md5: str


@dataclass
class PayloadScan:
    entries: List[PayloadEntry] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(e.size for e in self.entries)

    def md5sums(self) -> str:
        return "".join(f"{e.md5}  {e.path}\n" for e in self.entries)


def _raise(error: OSError):
    raise error


def walk_tree(root: Path) -> Iterator[Tuple[Path, str]]:
    """
    Yield (absolute path, relative arcname) for everything under root.

    A directory that cannot be listed raises instead of being skipped.
    """
    for dirpath, dirs, files in os.walk(root, onerror=_raise):
        dirs.sort()
        files.sort()
        for name in dirs + files:
            full = os.path.join(dirpath, name)
            yield Path(full), os.path.relpath(full, root).replace('\\', '/')


def _is_regular(path: Path) -> bool:
    return stat.S_ISREG(os.lstat(path).st_mode)


def file_md5(path: Path) -> str:
    h = hashlib.md5()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
            h.update(chunk)
    return h.hexdigest()


def scan_payload(data_dir: Path) -> PayloadScan:
    """Checksum and size every regular file under data_dir."""
    scan = PayloadScan()
    for path, arcname in walk_tree(Path(data_dir)):
        if not _is_regular(path):
            continue
        entry = PayloadEntry(arcname, os.lstat(path).st_size, file_md5(path))
        logger.debug(f"{entry.md5}  {entry.path} ({entry.size} bytes)")
        scan.entries.append(entry)
    logger.info(f"Scanned {len(scan.entries)} payload files, {scan.total_size} bytes")
    return scan


def _normalize(tarinfo: tarfile.TarInfo) -> tarfile.TarInfo:
    tarinfo.pax_headers = {}
    tarinfo.uid = 0
    tarinfo.gid = 0
    tarinfo.uname = "root"
    tarinfo.gname = "root"
    return tarinfo


def tar_directory(src_dir: Path, mtime: Optional[int] = None) -> bytes:
    """
    Build an uncompressed GNU tar of src_dir with paths relative to it.

    When mtime is given every entry is stamped with it instead of its own.
    """
    def _filter(tarinfo):
        tarinfo = _normalize(tarinfo)
        if mtime is not None:
            tarinfo.mtime = mtime
        return tarinfo

    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode='w', format=tarfile.GNU_FORMAT) as tar:
        for path, arcname in walk_tree(Path(src_dir)):
            tar.add(str(path), arcname=arcname, recursive=False, filter=_filter)
    return buf.getvalue()


def build_data_tar(data_dir: Path, config: BuildConfig) -> Tuple[bytes, str]:
    """Returns (compressed data bundle, ar member name)."""
    raw = tar_directory(data_dir)
    comp, suffix = compress(raw, config.data_compression, config.compression_level, config.build_time())
    name = "data.tar" + suffix
    logger.debug(f"{name}: {len(raw)} bytes raw, {len(comp)} bytes compressed")
    return comp, name
