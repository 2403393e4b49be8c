import inspect
import logging
import weakref
import os
from datetime import datetime
from typing import Optional

import coloredlogs


baseLogger = logging.getLogger('imformats')
_file_handler = None
objLoggers = weakref.WeakKeyDictionary()


def setup_logging(log_level: str = "INFO", log_to_file: bool = False,
                  log_folder: Optional[str] = None, config_folder: Optional[str] = None):
    """
    Set up the logging system with configurable log level and file output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to file
        log_folder: Path to log folder (if None, uses config_folder/logs)
        config_folder: Path to config folder (used as fallback for log_folder)
    """
    global _file_handler

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    baseLogger.setLevel(numeric_level)

    coloredlogs.install(level=numeric_level, logger=baseLogger,
                        fmt='%(asctime)s %(levelname)s %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    if log_to_file:
        if log_folder is None:
            log_folder = get_log_folder(config_folder)

        os.makedirs(log_folder, exist_ok=True)

        timestamp = datetime.now().strftime('%Y-%m-%d_%H-%M-%S')
        log_filename = os.path.join(log_folder, f'imformats_{timestamp}.log')

        # Remove old file handler if it exists
        if _file_handler is not None:
            baseLogger.removeHandler(_file_handler)
            _file_handler.close()

        _file_handler = logging.FileHandler(log_filename, encoding='utf-8')
        _file_handler.setLevel(numeric_level)
        file_formatter = logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        _file_handler.setFormatter(file_formatter)
        baseLogger.addHandler(_file_handler)

        baseLogger.info(f"Logging to file: {log_filename}")

    return baseLogger


def get_log_folder(config_folder: Optional[str] = None) -> str:
    """Get the log folder path."""
    if config_folder is None:
        from imformats.config import get_config
        config_folder = get_config().config_folder
    return os.path.join(config_folder, 'logs')


class LoggerAdapter(logging.LoggerAdapter):
    def __init__(self, logger, prefixes):
        super().__init__(logger, {})
        self.prefixes = prefixes

    def process(self, msg, kwargs):
        processedMsg = f'[{" -> ".join(self.prefixes)}] {msg}'
        return processedMsg, kwargs


def initLogger(obj, *, instanceName=None, tryInheritParent=False):
    """
    Initializes a logger for the specified object.

    Args:
        obj: Class, object or string to create logger for
        instanceName: Optional instance name for the logger prefix
        tryInheritParent: Try to inherit logger from parent in call stack
    """

    logger = None

    if tryInheritParent:
        # Use logger from first parent in stack that has one
        for frameInfo in inspect.stack():
            frameLocals = frameInfo[0].f_locals
            if 'self' not in frameLocals:
                continue

            parent = frameLocals['self']
            try:
                logger = objLoggers.get(parent)
            except TypeError:
                # not weak-referenceable or unhashable
                continue
            if logger is not None:
                break

    if logger is None:
        if inspect.isclass(obj):
            objName = obj.__name__
        elif isinstance(obj, str):
            objName = obj
        else:
            objName = obj.__class__.__name__

        prefixes = [objName]
        if instanceName:
            prefixes.append(instanceName)

        logger = LoggerAdapter(baseLogger, prefixes)

        # Save logger so it can be used by tryInheritParent requesters later.
        # Entries disappear together with the object they belong to.
        if not isinstance(obj, str):
            try:
                objLoggers[obj] = logger
            except TypeError:
                pass

    return logger


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
