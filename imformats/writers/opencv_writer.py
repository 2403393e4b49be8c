"""
Single-image writers backed by OpenCV (PNG, JPEG).

These formats hold one image per file, so every save writes a complete
file and the last flag is ignored.
"""

import numpy as np
import cv2

from imformats.imcommon.model import initLogger
from .base import FormatWriter
from .registry import register_writer
from .tiff_writer import ensure_parent_dir, photometric_for


class OpenCVWriter(FormatWriter):
    """Base class for formats written with cv2.imwrite."""

    def __init__(self, format_name, suffixes, params=()):
        super().__init__(format_name, suffixes)
        self._logger = initLogger(self)
        self.params = list(params)

    def prepare(self, image: np.ndarray) -> np.ndarray:
        """Convert to a dtype and channel order cv2.imwrite accepts."""
        img = np.asarray(image)
        photometric_for(img)
        if img.dtype in (np.float32, np.float64):
            img = cv2.convertScaleAbs(img)
        elif img.dtype == bool:
            img = img.astype(np.uint8) * 255
        if img.ndim == 3:
            code = cv2.COLOR_RGBA2BGRA if img.shape[-1] == 4 else cv2.COLOR_RGB2BGR
            img = cv2.cvtColor(img, code)
        return img

    def save(self, target_id: str, image: np.ndarray, last: bool) -> None:
        img = self.prepare(image)
        ensure_parent_dir(target_id)
        if not cv2.imwrite(target_id, img, self.params):
            raise OSError(f"Failed to write {self.format_name} image: {target_id}")
        self._logger.debug(f"Wrote {target_id}")


@register_writer('PNG')
class PngWriter(OpenCVWriter):
    def __init__(self):
        super().__init__("Portable Network Graphics", ('.png',))


@register_writer('JPEG')
class JpegWriter(OpenCVWriter):
    """JPEG writer; images are scaled to 8 bit before encoding."""

    def __init__(self, quality: int = 95):
        super().__init__("Joint Photographic Experts Group", ('.jpg', '.jpeg'),
                         params=(cv2.IMWRITE_JPEG_QUALITY, quality))

    def prepare(self, image: np.ndarray) -> np.ndarray:
        img = super().prepare(image)
        if img.ndim == 3 and img.shape[-1] == 4:
            img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
        if img.dtype != np.uint8:
            img = cv2.normalize(img, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
        return img


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
