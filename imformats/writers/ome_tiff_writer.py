"""
OME-TIFF writer.

Collects the planes of a sequence and writes them as a single OME-TIFF
series with OME-XML metadata once the last plane is saved.
"""

import os
from typing import List, Optional

import numpy as np
import tifffile

from imformats.imcommon.model import initLogger
from .base import FormatWriter
from .registry import register_writer
from .tiff_writer import ensure_parent_dir, photometric_for


@register_writer('OME_TIFF')
class OMETiffWriter(FormatWriter):
    """
    OME-TIFF writer with OME-XML metadata.

    Planes are buffered in memory until last=True, then written as one
    ZYX (or ZYXS for colour) series so OME readers see a single stack.
    """

    def __init__(self, bigtiff: bool = True, pixel_size_um: Optional[float] = None):
        """
        Args:
            bigtiff: Use BigTIFF format for large files
            pixel_size_um: Physical pixel size written to the OME metadata
        """
        super().__init__("OME-TIFF", ('.ome.tif', '.ome.tiff'))
        self._logger = initLogger(self)
        self.bigtiff = bigtiff
        self.pixel_size_um = pixel_size_um
        self.current_id: Optional[str] = None
        self._planes: List[np.ndarray] = []

    def can_do_stacks(self, target_id: str) -> bool:
        return True

    def save(self, target_id: str, image: np.ndarray, last: bool) -> None:
        image = np.asarray(image)
        photometric_for(image)

        if target_id != self.current_id:
            self.close()
            self.current_id = target_id

        if self._planes and image.shape != self._planes[0].shape:
            raise ValueError(
                f"Plane shape {image.shape} does not match stack shape {self._planes[0].shape}")
        self._planes.append(image)

        if last:
            self._flush()

    def _build_metadata(self, stack: np.ndarray) -> dict:
        metadata = {
            'axes': 'ZYXS' if stack.ndim == 4 else 'ZYX',
            'Name': os.path.basename(self.current_id),
        }
        if self.pixel_size_um is not None:
            metadata.update({
                'PhysicalSizeX': float(self.pixel_size_um),
                'PhysicalSizeXUnit': 'µm',
                'PhysicalSizeY': float(self.pixel_size_um),
                'PhysicalSizeYUnit': 'µm',
            })
        return metadata

    def _flush(self) -> None:
        if not self._planes:
            return
        stack = np.stack(self._planes)
        ensure_parent_dir(self.current_id)
        tifffile.imwrite(
            self.current_id,
            stack,
            bigtiff=self.bigtiff,
            ome=True,
            photometric=photometric_for(self._planes[0]),
            metadata=self._build_metadata(stack),
        )
        self._logger.info(f"Wrote {len(self._planes)} plane(s) to {self.current_id}")
        self._planes = []
        self.current_id = None

    def close(self) -> None:
        """Write any buffered planes of an unfinished sequence."""
        self._flush()
        self.current_id = None


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
