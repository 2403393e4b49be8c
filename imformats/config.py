"""
Process-wide configuration for ImFormats.

Values come from environment variables at first access and can be
overridden at runtime (CLI arguments, tests) via update_config().
"""

import os
from dataclasses import dataclass, field, fields
from typing import Optional


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class ImFormatsConfig:
    """Runtime settings shared by the writer registry, logging and the CLI."""
    writer_list: Optional[str] = field(
        default_factory=lambda: os.environ.get('IMFORMATS_WRITERS') or None)
    log_level: str = field(
        default_factory=lambda: os.environ.get('IMFORMATS_LOG_LEVEL', 'INFO'))
    log_to_file: bool = field(
        default_factory=lambda: _env_flag('IMFORMATS_LOG_TO_FILE'))
    config_folder: str = field(
        default_factory=lambda: os.environ.get(
            'IMFORMATS_CONFIG_FOLDER',
            os.path.join(os.path.expanduser('~'), 'ImFormatsConfig')))


_config: Optional[ImFormatsConfig] = None


def get_config() -> ImFormatsConfig:
    """Return the global configuration, creating it from the environment on first use."""
    global _config
    if _config is None:
        _config = ImFormatsConfig()
    return _config


def update_config(**kwargs) -> ImFormatsConfig:
    """
    Override configuration values.

    Args:
        **kwargs: Field names of ImFormatsConfig and their new values

    Raises:
        AttributeError: If a key is not a known configuration field
    """
    config = get_config()
    known = {f.name for f in fields(config)}
    for key, value in kwargs.items():
        if key not in known:
            raise AttributeError(f"Unknown configuration key: {key}")
        setattr(config, key, value)
    return config


def reset_config() -> None:
    """Drop overrides so the next get_config() re-reads the environment."""
    global _config
    _config = None


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
