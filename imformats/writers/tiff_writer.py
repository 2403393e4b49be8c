"""
Multi-page TIFF writer.

Appends each saved image as a separate page of one TIFF file. The file
stays open between saves for the same target and is closed when the
last image arrives.
"""

import os
from typing import Optional

import numpy as np
import tifffile

from imformats.imcommon.model import initLogger
from .base import FormatWriter
from .registry import register_writer


def photometric_for(image: np.ndarray) -> str:
    """Photometric interpretation for a 2D grayscale or YXS colour array."""
    if image.ndim == 3 and image.shape[-1] in (3, 4):
        return 'rgb'
    if image.ndim != 2:
        raise ValueError(f"Expected 2D or YXS image, got shape {image.shape}")
    return 'minisblack'


def ensure_parent_dir(target_id: str) -> None:
    output_dir = os.path.dirname(target_id)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)


@register_writer('TIFF')
class TiffWriter(FormatWriter):
    """
    Tagged Image File Format writer.

    Example:
        >>> writer = TiffWriter()
        >>> writer.save("/path/to/stack.tif", plane0, last=False)
        >>> writer.save("/path/to/stack.tif", plane1, last=True)
    """

    def __init__(self, format_name: str = "Tagged Image File Format",
                 suffixes=('.tif', '.tiff'), bigtiff: bool = False):
        """
        Args:
            bigtiff: Use BigTIFF format for large files
        """
        super().__init__(format_name, suffixes)
        self._logger = initLogger(self)
        self.bigtiff = bigtiff
        self.current_id: Optional[str] = None
        self.image_count = 0
        self._tiff_writer: Optional[tifffile.TiffWriter] = None

    def can_do_stacks(self, target_id: str) -> bool:
        return True

    def save(self, target_id: str, image: np.ndarray, last: bool) -> None:
        image = np.asarray(image)
        photometric = photometric_for(image)

        if target_id != self.current_id:
            self.close()
            ensure_parent_dir(target_id)
            # Creates a new file, replacing any existing one
            self._tiff_writer = tifffile.TiffWriter(target_id, bigtiff=self.bigtiff)
            self.current_id = target_id
            self._logger.debug(f"Opened {target_id}")

        self._tiff_writer.write(image, photometric=photometric)
        self.image_count += 1

        if last:
            self.close()

    def close(self) -> None:
        """Close the current TIFF file, if any."""
        if self._tiff_writer is None:
            return
        try:
            self._tiff_writer.close()
        finally:
            self._tiff_writer = None
            self._logger.debug(f"Closed {self.current_id} ({self.image_count} image(s))")
            self.current_id = None
            self.image_count = 0


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
