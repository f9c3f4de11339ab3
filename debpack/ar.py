"""Writes the outer ar container of a .deb."""

import logging
from pathlib import Path

from .control import ControlSet
from .errors import ArchiveFormatError

logger = logging.getLogger(__name__)

AR_MAGIC = b"!<arch>\n"
AR_HEADER_SIZE = 60
DEBIAN_BINARY = b"2.0\n"


def add_ar_member(ar_file, name: str, content: bytes, mtime: int = 0, pad: bool = True):
    if len(name) > 16:
        raise ArchiveFormatError(f"Name '{name}' too long for simple ar (16 char max).")
    header = (
        name.ljust(16) +
        str(mtime).ljust(12) +
        "0".ljust(6) +
        "0".ljust(6) +
        "100644".ljust(8) +
        str(len(content)).ljust(10) +
        "`\n"
    ).encode("ascii")
    if len(header) != AR_HEADER_SIZE:
        raise ArchiveFormatError("Ar header not 60 bytes.")
    ar_file.write(header)
    ar_file.write(content)
    if pad and len(content) % 2 == 1:
        ar_file.write(b"\n")


def write_ar(ar_file, members, mtime: int = 0, pad_final_member: bool = False):
    """
    Write magic plus (name, content) members in order.

    An odd-sized last member gets no pad byte unless pad_final_member is set.
    """
    ar_file.write(AR_MAGIC)
    last = len(members) - 1
    for i, (name, content) in enumerate(members):
        add_ar_member(ar_file, name, content, mtime, pad=pad_final_member or i != last)


def write_deb(output_deb: Path, control_tgz: bytes, data_tar: bytes, data_name: str = "data.tar.gz",
              mtime: int = 0, pad_final_member: bool = False):
    members = [
        ("debian-binary", DEBIAN_BINARY),
        ("control.tar.gz", control_tgz),
        (data_name, data_tar),
    ]
    with Path(output_deb).open("wb") as ar:
        write_ar(ar, members, mtime, pad_final_member)
    for name, content in members:
        logger.debug(f"ar member {name}: {len(content)} bytes")


def package_filename(control: ControlSet) -> str:
    return f"{control['Package']}_{control['Version']}-{control['Architecture']}.deb"
