"""
ImageWriter - master writer for all registered formats.

Loads the writers named in the writer list, advertises the union of
their suffixes and forwards each call to the writer that owns the
target id.
"""

from typing import Iterable, Optional, Tuple

import numpy as np

from imformats.config import get_config
from imformats.imcommon.model import initLogger
from .base import FormatException, FormatWriter
from .dispatcher import WriterDispatcher
from .registry import WriterRegistry, load_writers, read_writer_list


def build_suffix_catalog(writers: Iterable[FormatWriter]) -> Tuple[str, ...]:
    """Sorted, deduplicated union of the suffixes of all writers."""
    suffix_set = set()
    for writer in writers:
        suffix_set.update(writer.get_suffixes())
    return tuple(sorted(suffix_set))


class ImageWriter(FormatWriter):
    """
    Master file format writer for all supported formats.

    The writer list is read once at construction. By default it comes
    from the configured writer_list path, falling back to the packaged
    writers.txt.

    Example:
        >>> writer = ImageWriter()
        >>> writer.get_format("stack.ome.tif")
        'OME-TIFF'
        >>> writer.save("stack.ome.tif", plane, last=False)
    """

    def __init__(self, text: Optional[str] = None, path: Optional[str] = None,
                 registry=WriterRegistry):
        """
        Args:
            text: Writer list contents; read from path/config if None
            path: Writer list file; overrides the configured path
            registry: Registry used to resolve writer keys
        """
        self.__logger = initLogger(self)
        if text is None:
            text = read_writer_list(path or get_config().writer_list)

        result = load_writers(text, registry)
        self._entries = tuple(result.entries)
        self.invalid_entries = tuple(result.invalid)
        self._dispatcher = WriterDispatcher([entry.writer for entry in self._entries])

        super().__init__("any image", build_suffix_catalog(self.get_writers()))
        self.__logger.debug(f"Writers: {', '.join(self.get_keys()) or 'none'}")

    @property
    def dispatcher(self) -> WriterDispatcher:
        return self._dispatcher

    def get_writers(self) -> Tuple[FormatWriter, ...]:
        """All loaded writers in registration order."""
        return tuple(entry.writer for entry in self._entries)

    def get_keys(self) -> Tuple[str, ...]:
        return tuple(entry.key for entry in self._entries)

    def is_this_type(self, target_id: str) -> bool:
        """
        Check whether any loaded writer claims target_id.

        Asks each writer directly and leaves the cached binding untouched.
        """
        return any(writer.is_this_type(target_id) for writer in self.get_writers())

    def get_format(self, target_id: Optional[str] = None) -> str:
        """
        Get the name of the file format used for the given target.

        Without a target, returns this writer's own label ("any image").

        Raises:
            UnknownFormatError: If no writer claims the target
        """
        if target_id is None:
            return super().get_format()
        return self._dispatcher.writer_for(target_id).get_format()

    def get_writer(self, target_id: str) -> FormatWriter:
        """
        Get the writer used to save the given target.

        Raises:
            UnknownFormatError: If no writer claims the target
        """
        return self._dispatcher.writer_for(target_id)

    def get_writer_by_key(self, key: str) -> Optional[FormatWriter]:
        """Get the loaded writer registered under key, or None. Never calls is_this_type."""
        key = key.upper()
        for entry in self._entries:
            if entry.key == key:
                return entry.writer
        return None

    def save(self, target_id: str, image: np.ndarray, last: bool) -> None:
        """
        Save the given image to the specified (possibly already open) target.
        If this image is the last one in the target, last must be True.

        Raises:
            UnknownFormatError: If no writer claims the target
        """
        self._dispatcher.writer_for(target_id).save(target_id, image, last)

    def can_do_stacks(self, target_id: str) -> bool:
        """
        Report whether the writer for target_id can save multiple images.

        Unlike the other accessors, a target no writer claims gives False
        instead of raising.
        """
        try:
            writer = self._dispatcher.writer_for(target_id)
        except (FormatException, OSError):
            return False
        return writer.can_do_stacks(target_id)

    def convert(self, input_path: str, output_path: str) -> int:
        """Print the detected output format, then convert input_path into output_path."""
        print(f"Checking file format [{self.get_format(output_path)}]")
        return super().convert(input_path, output_path)

    def close(self) -> None:
        """
        Close every loaded writer.

        A writer that fails to close does not stop the others; the first
        error is re-raised once all writers have been closed.
        """
        first_error = None
        for writer in self.get_writers():
            try:
                writer.close()
            except Exception as e:
                self.__logger.error(f"Failed to close {writer.get_format()} writer: {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error


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
