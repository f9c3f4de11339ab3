"""Builds control.tar.gz: maintainer scripts, md5sums and the control file."""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Tuple

from .compression import compress
from .config import BuildConfig
from .control import ControlSet
from .payload import PayloadScan, tar_directory

logger = logging.getLogger(__name__)

CONTROL_MEMBER = "control.tar.gz"

# name -> mode inside the control bundle
MAINTAINER_SCRIPTS = {
    "conffiles": 0o644,
    "postinst": 0o755,
    "postrm": 0o755,
    "preinst": 0o755,
    "prerm": 0o755,
}


def copy_maintainer_scripts(control_dir: Path, staging: Path):
    for name in sorted(MAINTAINER_SCRIPTS):
        src = control_dir / name
        if not src.is_file():
            continue
        dst = staging / name
        shutil.copyfile(src, dst)
        os.chmod(dst, MAINTAINER_SCRIPTS[name])
        logger.debug(f"Copied {name} (mode {MAINTAINER_SCRIPTS[name]:o})")


def _write(path: Path, text: str):
    path.write_bytes(text.encode("utf-8"))
    os.chmod(path, 0o644)


def build_control_tar(control_dir: Path, scan: PayloadScan, control: ControlSet,
                      config: BuildConfig) -> Tuple[bytes, ControlSet]:
    """
    Stage and compress the control bundle.

    Returns the gzip'd tar and the final ControlSet (with Installed-Size),
    which is what ends up in the `control` file.
    """
    control_dir = Path(control_dir)
    final = control.with_installed_size(scan.total_size)
    logger.info(f"Installed-Size: {final['Installed-Size']}")

    with tempfile.TemporaryDirectory(prefix="debpack-control-") as tmp:
        staging = Path(tmp)
        copy_maintainer_scripts(control_dir, staging)
        _write(staging / "md5sums", scan.md5sums())
        _write(staging / "control", final.serialize())
        raw = tar_directory(staging, mtime=config.build_time())

    comp, _ = compress(raw, "gzip", mtime=config.build_time())
    logger.debug(f"{CONTROL_MEMBER}: {len(raw)} bytes raw, {len(comp)} bytes compressed")
    return comp, final
