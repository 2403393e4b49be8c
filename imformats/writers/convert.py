"""
Generic file conversion: read planes from an input image and save them
one by one through a FormatWriter.
"""

import os
import time
from typing import List
import logging

import cv2
import numpy as np
import tifffile
import zarr

logger = logging.getLogger(__name__)

TIFF_SUFFIXES = ('.tif', '.tiff')
ZARR_SUFFIXES = ('.zarr',)


def _split_planes(data: np.ndarray) -> List[np.ndarray]:
    """Split an array into 2D (or YXS colour) planes."""
    if data.ndim == 2:
        return [data]
    if data.ndim == 3 and data.shape[-1] in (3, 4):
        return [data]
    if data.ndim >= 3 and data.shape[-1] in (3, 4):
        return list(data.reshape(-1, *data.shape[-3:]))
    return list(data.reshape(-1, *data.shape[-2:]))


def read_planes(path: str) -> List[np.ndarray]:
    """
    Read all image planes from a file.

    TIFF files are read with tifffile, Zarr stores with zarr, anything
    else with OpenCV.

    Raises:
        OSError: If the file does not exist or cannot be decoded
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"No such file: {path}")

    name = path.lower()
    if name.endswith(TIFF_SUFFIXES):
        planes = []
        with tifffile.TiffFile(path) as tif:
            for page in tif.pages:
                planes.extend(_split_planes(page.asarray()))
        return planes
    elif name.endswith(ZARR_SUFFIXES):
        data = np.asarray(zarr.open_array(path, mode='r')[...])
    else:
        data = cv2.imread(path, cv2.IMREAD_UNCHANGED)
        if data is None:
            raise OSError(f"Cannot decode image: {path}")
        if data.ndim == 3:
            # OpenCV decodes colour as BGR(A)
            code = cv2.COLOR_BGRA2RGBA if data.shape[-1] == 4 else cv2.COLOR_BGR2RGB
            data = cv2.cvtColor(data, code)

    return _split_planes(np.asarray(data))


def convert_file(writer, input_path: str, output_path: str) -> int:
    """
    Convert input_path to output_path using writer.

    The last plane is saved with last=True so stack writers finalize the
    output.

    Returns:
        Number of planes written
    """
    start = time.time()
    planes = read_planes(input_path)
    num = len(planes)
    logger.info(f"Converting {input_path} -> {output_path} ({num} plane(s))")

    for i, plane in enumerate(planes):
        writer.save(output_path, plane, i == num - 1)

    elapsed = time.time() - start
    print(f"[done] {num} plane(s) written to {output_path} in {elapsed:.3f}s")
    return num


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
