__version__ = "0.1.0"

from .writers import ImageWriter, FormatWriter, FormatException, UnknownFormatError, register_writer
