"""
Target-to-writer resolution with a single-slot cache.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging

from .base import FormatWriter, UnknownFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Binding:
    """Result of resolving a target: the id and the index of the owning writer."""
    target_id: str
    index: int


class WriterDispatcher:
    """
    Resolves target ids to writers by probing them in registration order.

    Only the most recent resolution is cached. Asking for any other id
    discards it and asks all writers again, even if the new id would
    resolve to the same writer. Not safe for concurrent use with
    different ids.
    """

    def __init__(self, writers: Sequence[FormatWriter]):
        self._writers = tuple(writers)
        self._binding: Optional[Binding] = None

    @property
    def writers(self):
        return self._writers

    @property
    def binding(self) -> Optional[Binding]:
        """The current binding, or None while unbound."""
        return self._binding

    def resolve(self, target_id: str) -> Binding:
        """
        Find the writer that owns target_id.

        The first writer whose is_this_type() returns True wins.

        Raises:
            UnknownFormatError: If no writer claims the target
        """
        if self._binding is not None and self._binding.target_id == target_id:
            return self._binding

        self._binding = None
        for index, writer in enumerate(self._writers):
            if writer.is_this_type(target_id):
                self._binding = Binding(target_id, index)
                logger.debug(f"Resolved {target_id} to {writer.get_format()} (index {index})")
                return self._binding

        raise UnknownFormatError(target_id)

    def writer_for(self, target_id: str) -> FormatWriter:
        """Resolve target_id and return the bound writer."""
        return self._writers[self.resolve(target_id).index]


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
