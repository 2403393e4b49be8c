"""
Writers package for ImFormats - format-dispatching image output.

Every concrete writer implements the FormatWriter interface and registers
itself under a key in WriterRegistry when its module is imported.
ImageWriter loads the writers named in writers.txt and forwards each
call to the one that owns the target.
"""

from .base import FormatWriter, FormatException, UnknownFormatError
from .registry import (WriterRegistry, WriterEntry, InvalidEntry, LoadResult, register_writer,
                       parse_writer_list, read_writer_list, load_writers)
from .dispatcher import Binding, WriterDispatcher
from .ome_tiff_writer import OMETiffWriter
from .tiff_writer import TiffWriter
from .opencv_writer import PngWriter, JpegWriter
from .zarr_writer import ZarrWriter
from .image_writer import ImageWriter, build_suffix_catalog

__all__ = [
    'FormatWriter',
    'FormatException',
    'UnknownFormatError',
    'WriterRegistry',
    'WriterEntry',
    'InvalidEntry',
    'LoadResult',
    'register_writer',
    'parse_writer_list',
    'read_writer_list',
    'load_writers',
    'Binding',
    'WriterDispatcher',
    'OMETiffWriter',
    'TiffWriter',
    'PngWriter',
    'JpegWriter',
    'ZarrWriter',
    'ImageWriter',
    'build_suffix_catalog',
]
