import argparse
import sys

from imformats.config import get_config, update_config
from imformats.imcommon.model import setup_logging, initLogger
from imformats.writers import FormatException, ImageWriter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imformats",
        description="Convert an image file to the format implied by the output path")
    parser.add_argument("input", nargs="?", help="Image file to read")
    parser.add_argument("output", nargs="?", help="Target file; its suffix selects the writer")
    parser.add_argument("--writers", help="Writer list file (default: packaged writers.txt)")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", action="store_true", help="Also log to a file in the config folder")
    parser.add_argument("--list-formats", action="store_true",
                        help="List the loaded writers and their suffixes")
    return parser


def main(argv=None) -> int:
    """Command-line interface for ImageWriter."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.list_formats and (args.input is None or args.output is None):
        parser.error("input and output are required unless --list-formats is given")

    if args.writers:
        update_config(writer_list=args.writers)
    if args.log_level:
        update_config(log_level=args.log_level)
    if args.log_file:
        update_config(log_to_file=True)

    config = get_config()
    setup_logging(log_level=config.log_level, log_to_file=config.log_to_file,
                  config_folder=config.config_folder)
    logger = initLogger('imformats')

    try:
        writer = ImageWriter()
    except OSError as e:
        logger.error(f"Cannot read writer list: {e}")
        return 1

    if args.list_formats:
        for key, w in zip(writer.get_keys(), writer.get_writers()):
            print(f"{key:<10} {w.get_format():<36} {' '.join(w.get_suffixes())}")
        return 0

    try:
        with writer:
            writer.convert(args.input, args.output)
    except FormatException as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())


# Copyright (C) 2020-2024 ImFormats developers
# This file is part of ImFormats.
#
# ImFormats is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# ImFormats is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
