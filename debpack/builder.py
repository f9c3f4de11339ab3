"""The packaging pipeline: control dir + data dir -> <Package>_<Version>-<Architecture>.deb"""

import dataclasses
import logging
import time
from pathlib import Path
from typing import Optional

from .ar import package_filename, write_deb
from .config import BuildConfig
from .control import ControlSet
from .control_bundle import build_control_tar
from .errors import MissingInputError
from .payload import build_data_tar, scan_payload

logger = logging.getLogger(__name__)


def check_inputs(control_dir: Path, data_dir: Path):
    if not control_dir.is_dir():
        raise MissingInputError(control_dir, "control directory")
    if not data_dir.is_dir():
        raise MissingInputError(data_dir, "data directory")
    if not (control_dir / "control").is_file():
        raise MissingInputError(control_dir / "control", "control file")


def build_deb(control_dir, data_dir, config: Optional[BuildConfig] = None) -> Path:
    """Build the package and return the path of the written .deb."""
    control_dir = Path(control_dir)
    data_dir = Path(data_dir)
    config = config or BuildConfig()
    if config.mtime is None:
        # one timestamp for every header written by this run
        config = dataclasses.replace(config, mtime=int(time.time()))

    check_inputs(control_dir, data_dir)

    control = ControlSet.parse(control_dir / "control").validate()
    scan = scan_payload(data_dir)
    data_tar, data_name = build_data_tar(data_dir, config)
    control_tgz, final = build_control_tar(control_dir, scan, control, config)

    output_deb = config.output_dir / package_filename(final)
    write_deb(output_deb, control_tgz, data_tar, data_name, config.mtime, config.pad_final_member)
    logger.info(f"Built {output_deb}")
    return output_deb
