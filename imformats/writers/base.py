"""
Base writer interface and format exceptions.

Provides the common interface that every format writer implements so
that ImageWriter can query, select and delegate to it.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Tuple

import numpy as np


class FormatException(Exception):
    """Raised when a target cannot be handled in the requested format."""


class UnknownFormatError(FormatException):
    """Raised when no registered writer claims a target id."""

    def __init__(self, target_id: str):
        super().__init__(f"Unknown file format: {target_id}")
        self.target_id = target_id


class FormatWriter(ABC):
    """
    Base interface for all file format writers.

    A writer declares a human-readable format name and the output
    suffixes it recognizes. ImageWriter asks each writer whether it owns
    a target (is_this_type) and forwards save/can_do_stacks calls to the
    first one that does.

    Lifecycle:
        1. __init__() - no-argument construction by the registry
        2. save(id, image, last) - called once per image; last=True ends a sequence
        3. close() - release any target still held open
    """

    def __init__(self, format_name: str, suffixes: Iterable[str]):
        """
        Initialize writer with its format description.

        Args:
            format_name: Human-readable format label
            suffixes: Output suffixes including the leading dot (e.g. '.tif')
        """
        self.format_name = format_name
        self.suffixes: Tuple[str, ...] = tuple(s.lower() for s in suffixes)

    def get_format(self) -> str:
        """Return the human-readable format name."""
        return self.format_name

    def get_suffixes(self) -> Tuple[str, ...]:
        """Return the output suffixes this writer recognizes."""
        return self.suffixes

    def check_suffix(self, target_id: str) -> bool:
        """Case-insensitive check of target_id against the declared suffixes."""
        name = str(target_id).lower()
        return any(name.endswith(suffix) for suffix in self.suffixes)

    def is_this_type(self, target_id: str) -> bool:
        """
        Check whether this writer handles the given target.

        Must not modify the target. The default implementation only looks
        at the suffix.
        """
        return self.check_suffix(target_id)

    @abstractmethod
    def save(self, target_id: str, image: np.ndarray, last: bool) -> None:
        """
        Save an image to the target.

        Args:
            target_id: Output target (file path)
            image: Image data (2D grayscale or YXS colour array)
            last: True if this is the final image of a multi-image sequence
        """
        pass

    def can_do_stacks(self, target_id: str) -> bool:
        """Report whether multiple images can be saved to one target."""
        return False

    def close(self) -> None:
        """Close any open target. Safe to call multiple times."""
        pass

    def convert(self, input_path: str, output_path: str) -> int:
        """
        Read every plane of input_path and save it to output_path.

        Returns:
            Number of planes written
        """
        from .convert import convert_file
        return convert_file(self, input_path, output_path)

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager support."""
        self.close()
        return False

    def __repr__(self):
        return f"{self.__class__.__name__}({self.format_name!r})"


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
