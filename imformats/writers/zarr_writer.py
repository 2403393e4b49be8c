"""
Zarr writer.

Stores a sequence of planes as one chunked array with the plane index as
the first axis, one chunk per plane.
"""

from typing import Optional

import numpy as np
import zarr

from imformats.imcommon.model import initLogger
from .base import FormatWriter
from .registry import register_writer
from .tiff_writer import photometric_for


@register_writer('ZARR')
class ZarrWriter(FormatWriter):

    def __init__(self):
        super().__init__("Zarr", ('.zarr',))
        self._logger = initLogger(self)
        self.current_id: Optional[str] = None
        self._array = None

    def can_do_stacks(self, target_id: str) -> bool:
        return True

    def save(self, target_id: str, image: np.ndarray, last: bool) -> None:
        image = np.asarray(image)
        photometric_for(image)

        if target_id != self.current_id or self._array is None:
            self.close()
            self._array = zarr.open_array(
                store=target_id,
                mode='w',
                shape=(1,) + image.shape,
                chunks=(1,) + image.shape,
                dtype=image.dtype,
            )
            self._array[0] = image
            self.current_id = target_id
            self._logger.debug(f"Created {target_id}")
        else:
            if image.shape != self._array.shape[1:]:
                raise ValueError(
                    f"Plane shape {image.shape} does not match array shape {self._array.shape[1:]}")
            self._array.append(image[np.newaxis, ...], axis=0)

        if last:
            self.close()

    def close(self) -> None:
        if self._array is not None:
            self._logger.debug(f"Closed {self.current_id} ({self._array.shape[0]} plane(s))")
        self._array = None
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
