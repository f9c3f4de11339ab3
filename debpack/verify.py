#!/usr/bin/env python3
"""Reads a .deb back and checks its container layout."""

import io
import logging
import sys
import tarfile
import zlib
from pathlib import Path
from typing import Dict, List, Tuple

from .ar import AR_HEADER_SIZE, AR_MAGIC, DEBIAN_BINARY
from .compression import decompress
from .errors import ArchiveFormatError

logger = logging.getLogger(__name__)

# leading bytes of each data bundle encoding
SIGNATURES = {
    ".gz": b"\x1f\x8b",
    ".xz": b"\xfd7zXZ\x00",
    ".lzma": b"\x5d\x00\x00",
}

_UNREADABLE = (OSError, EOFError, ValueError, zlib.error, tarfile.TarError)


def _header_field(hdr: bytes, start: int, end: int, offset: int) -> str:
    try:
        return hdr[start:end].decode('ascii').strip()
    except UnicodeDecodeError:
        raise ArchiveFormatError(f"Non-ASCII header field at offset {offset + start}") from None


def read_members(f) -> List[Tuple[str, bytes]]:
    """
    Parse an ar stream into (name, content) pairs.

    Odd-sized members must be followed by a '\\n' pad byte, except at end of
    file where the pad may be missing.
    """
    if f.read(len(AR_MAGIC)) != AR_MAGIC:
        raise ArchiveFormatError("Missing ar global header")
    offset = len(AR_MAGIC)
    members = []
    while True:
        hdr = f.read(AR_HEADER_SIZE)
        if not hdr:
            break
        if len(hdr) < AR_HEADER_SIZE:
            raise ArchiveFormatError(f"Truncated member header at offset {offset}")
        if hdr[58:60] != b"`\n":
            raise ArchiveFormatError(f"Bad header terminator at offset {offset}")
        name = _header_field(hdr, 0, 16, offset).rstrip('/')
        size_txt = _header_field(hdr, 48, 58, offset)
        if not size_txt.isdigit():
            raise ArchiveFormatError(f"Bad size {size_txt!r} for member '{name}'")
        size = int(size_txt)
        data = f.read(size)
        if len(data) != size:
            raise ArchiveFormatError(f"Truncated member '{name}'")
        offset += AR_HEADER_SIZE + size
        if size % 2 == 1:
            pad = f.read(1)
            if pad not in (b"", b"\n"):
                raise ArchiveFormatError(f"Bad pad byte {pad!r} after member '{name}'")
            offset += len(pad)
        members.append((name, data))
    return members


def _tar_files(data: bytes) -> Dict[str, bytes]:
    """Regular files in an uncompressed tar, name -> content."""
    files = {}
    with tarfile.open(fileobj=io.BytesIO(data), mode='r:') as t:
        for info in t.getmembers():
            if info.isfile():
                files[info.name] = t.extractfile(info).read()
    return files


def verify_deb(path) -> List[str]:
    """Return a list of problems; empty means the package looks valid."""
    with open(path, 'rb') as f:
        try:
            members = read_members(f)
        except ArchiveFormatError as e:
            return [str(e)]

    problems = []
    order = [n for n, _ in members]
    logger.debug(f"Order: {order}")
    if len(members) != 3:
        problems.append(f"expected 3 members, found {len(members)}")
    if order[:1] != ['debian-binary']:
        problems.append("debian-binary not first")
    elif members[0][1] != DEBIAN_BINARY:
        problems.append("wrong debian-binary contents")

    control_files = None
    if order[1:2] != ['control.tar.gz']:
        problems.append("control.tar.gz not second")
    else:
        try:
            control_files = _tar_files(decompress(members[1][1], ".gz"))
        except _UNREADABLE as e:
            problems.append(f"cannot read control.tar.gz: {e}")
        else:
            if "control" not in control_files:
                problems.append("control missing inside control.tar.gz")

    payload_files = None
    if len(members) < 3 or not members[2][0].startswith('data.tar'):
        problems.append("missing data.tar.*")
    else:
        data_name, data_bytes = members[2]
        suffix = data_name[len('data.tar'):]
        sig = SIGNATURES.get(suffix)
        if sig is None:
            problems.append(f"unsupported data member: {data_name}")
        elif not data_bytes.startswith(sig):
            problems.append(f"{data_name} signature mismatch: {data_bytes[:6]!r}")
        else:
            try:
                payload_files = _tar_files(decompress(data_bytes, suffix))
            except _UNREADABLE as e:
                problems.append(f"cannot read {data_name}: {e}")

    if control_files is not None and payload_files is not None:
        md5sums = control_files.get("md5sums")
        if md5sums is None:
            if payload_files:
                problems.append("md5sums missing inside control.tar.gz")
        elif len(md5sums.splitlines()) != len(payload_files):
            problems.append(f"md5sums lists {len(md5sums.splitlines())} files, "
                            f"data bundle has {len(payload_files)}")
    return problems


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: debpack-verify path/to/file.deb")
        return 2
    path = Path(argv[0])
    if not path.is_file():
        print(f"Error: {path} not found")
        return 2
    problems = verify_deb(path)
    for p in problems:
        print("FAIL:", p)
    if problems:
        return 1
    print("PASS")
    return 0


if __name__ == "__main__":
    sys.exit(main())
