"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and
from wall-clock time.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from speedread_cli.models.reader.scheduler import ManualClock, RunLoop


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> ManualClock:
    """A clock that only moves when a test advances it."""
    return ManualClock()


@pytest.fixture()
def loop(clock) -> RunLoop:
    """Run loop driven by the manual clock."""
    return RunLoop(clock=clock)


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from speedread_cli.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("speedread_cli.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("speedread_cli.services.config_service.user_data_dir", return_value=tmpdir):
            from speedread_cli.services.config_service import ConfigService

            svc = ConfigService()
            yield svc
    get_config_service.cache_clear()


@pytest.fixture()
def patch_config_service(tmp_config):
    """Make get_config_service() return the temporary service everywhere."""
    targets = [
        "speedread_cli.commands.config.get_config_service",
        "speedread_cli.commands.keys.get_config_service",
        "speedread_cli.commands.stats.get_config_service",
        "speedread_cli.commands.read.get_config_service",
    ]
    patchers = [patch(target, return_value=tmp_config) for target in targets]
    for patcher in patchers:
        patcher.start()
    yield tmp_config
    for patcher in patchers:
        patcher.stop()


@pytest.fixture(autouse=True)
def isolate_log_dir(tmp_path):
    """Keep the application log file out of the user's log directory.

    The singleton and any handlers left on the app logger are dropped on
    both sides of each test, so every test starts with a fresh log file.
    """
    import speedread_cli.utils.logger as logger_mod

    def drop_handlers():
        app_logger = logging.getLogger("speedread_cli")
        for handler in list(app_logger.handlers):
            app_logger.removeHandler(handler)
            handler.close()
        logger_mod._logger = None

    drop_handlers()
    with patch("speedread_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield
    drop_handlers()
