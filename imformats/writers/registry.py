"""
Writer registry and writer-list loader.

Writers register a zero-argument constructor under a stable key. The
ordered writer list (writers.txt) names the keys to instantiate; the
loader skips entries that are unknown, fail to construct, or do not
produce a FormatWriter, and keeps going.
"""

from dataclasses import dataclass, field
from importlib import resources
from typing import Callable, Dict, List, Optional, Tuple
import logging

from .base import FormatWriter

logger = logging.getLogger(__name__)

DEFAULT_WRITER_LIST = 'writers.txt'


class WriterRegistry:
    """
    Registry for file format writers.

    Maps format keys (e.g. 'TIFF', 'PNG') to the callables that construct
    the corresponding writer.
    """

    _writers: Dict[str, Callable[[], object]] = {}

    @classmethod
    def register(cls, key: str, factory: Callable[[], object]):
        """
        Register a writer constructor for a key.

        Args:
            key: Format key (e.g., 'OME_TIFF', 'TIFF', 'PNG')
            factory: Zero-argument callable returning a FormatWriter
        """
        if not callable(factory):
            raise TypeError(f"{factory!r} is not callable")

        cls._writers[key.upper()] = factory
        logger.debug(f"Registered writer {getattr(factory, '__name__', factory)} for key {key}")

    @classmethod
    def get(cls, key: str) -> Optional[Callable[[], object]]:
        """
        Get the constructor registered for a key.

        Returns:
            The constructor or None if not found
        """
        return cls._writers.get(key.upper())

    @classmethod
    def list_keys(cls) -> list:
        """List all registered keys."""
        return list(cls._writers.keys())

    @classmethod
    def unregister(cls, key: str):
        cls._writers.pop(key.upper(), None)


def register_writer(key: str):
    """
    Decorator to register a writer class.

    Usage:
        @register_writer('TIFF')
        class TiffWriter(FormatWriter):
            ...
    """
    def decorator(writer_class):
        WriterRegistry.register(key, writer_class)
        return writer_class
    return decorator


@dataclass(frozen=True)
class WriterEntry:
    """A loaded writer together with the registry key it was built from."""
    key: str
    writer: FormatWriter


@dataclass(frozen=True)
class InvalidEntry:
    """A writer-list line that was rejected during loading."""
    line_number: int
    identifier: str
    reason: str


@dataclass
class LoadResult:
    entries: List[WriterEntry] = field(default_factory=list)
    invalid: List[InvalidEntry] = field(default_factory=list)


def parse_writer_list(text: str) -> List[Tuple[int, str]]:
    """
    Parse a writer list into (line_number, key) pairs.

    Everything after '#' on a line is a comment; blank lines are skipped.
    """
    items = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        ndx = line.find('#')
        if ndx >= 0:
            line = line[:ndx]
        line = line.strip()
        if not line:
            continue
        items.append((line_number, line))
    return items


def read_writer_list(path: Optional[str] = None) -> str:
    """
    Read the writer list from a file, or the packaged default list.

    Raises:
        OSError: If an explicit path cannot be read
    """
    if path is None:
        return resources.files(__package__).joinpath(DEFAULT_WRITER_LIST).read_text(encoding='utf-8')
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def load_writers(text: str, registry=WriterRegistry) -> LoadResult:
    """
    Instantiate the writers named in a writer list, in list order.

    Invalid entries are logged and recorded in LoadResult.invalid but
    never abort the load.

    Args:
        text: Writer list contents
        registry: Registry to resolve keys against

    Returns:
        LoadResult with the retained entries and the rejected lines
    """
    result = LoadResult()
    seen = set()

    def reject(line_number, identifier, reason):
        logger.warning(f"Error: \"{identifier}\" is not a valid format writer ({reason})")
        result.invalid.append(InvalidEntry(line_number, identifier, reason))

    for line_number, identifier in parse_writer_list(text):
        key = identifier.upper()
        if key in seen:
            reject(line_number, identifier, "duplicate entry")
            continue

        factory = registry.get(key)
        if factory is None:
            reject(line_number, identifier, "unknown writer")
            continue

        try:
            writer = factory()
        except Exception as e:
            reject(line_number, identifier, f"cannot be instantiated: {e}")
            continue

        if not isinstance(writer, FormatWriter):
            reject(line_number, identifier, f"{type(writer).__name__} is not a FormatWriter")
            continue

        seen.add(key)
        result.entries.append(WriterEntry(key, writer))

    logger.debug(f"Loaded {len(result.entries)} writer(s), rejected {len(result.invalid)}")
    return result


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
