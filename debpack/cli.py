#!/usr/bin/env python3
"""
Build a .deb from a control directory and a data directory.

Usage:
    debpack CONTROL_DIR DATA_DIR [--debug] [--log-file PATH]

Exit codes: 0 success, 1 usage or build error, 2 missing input.
"""

import argparse
import logging
import sys

from .builder import build_deb
from .config import BuildConfig
from .errors import DebPackError, MissingInputError
from .log import setup_logging

logger = logging.getLogger(__name__)

EXIT_USAGE = 1
EXIT_MISSING_INPUT = 2


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def parse_args(argv=None):
    p = _ArgumentParser(prog="debpack", description="Package a data directory into a .deb")
    p.add_argument("control_dir", help="Directory holding 'control' and optional maintainer scripts")
    p.add_argument("data_dir", help="Directory tree to install")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    p.add_argument("--log-file", help="Also write the log to this file")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.debug, args.log_file)
    try:
        config = BuildConfig.from_env()
        build_deb(args.control_dir, args.data_dir, config)
    except MissingInputError as e:
        logger.error(str(e))
        return EXIT_MISSING_INPUT
    except (DebPackError, OSError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
