"""
Pytest configuration for ImFormats tests.

This file provides fixtures and configuration that apply to all tests.
"""
import pytest


def pytest_configure(config):
    """Configure pytest before test collection."""
    # Register custom markers
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Tests that write real image files")
    config.addinivalue_line("markers", "slow: Slow-running tests")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless explicitly enabled."""
    skip_slow = pytest.mark.skip(reason="Slow tests need --run-slow flag")

    for item in items:
        if "slow" in item.keywords:
            if not config.getoption("--run-slow", default=False):
                item.add_marker(skip_slow)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow-running tests"
    )


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Give every test a configuration built from a clean environment."""
    from imformats.config import reset_config

    for name in ("IMFORMATS_WRITERS", "IMFORMATS_LOG_LEVEL",
                 "IMFORMATS_LOG_TO_FILE", "IMFORMATS_CONFIG_FOLDER"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


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
