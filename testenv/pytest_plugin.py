"""
pytest driver for the environment guard.

Enable with ``-p testenv.pytest_plugin --reset-environment`` (or
``reset_environment = true`` in the ini file). One guard is built when the
session is configured; every test starts from its baseline.
"""

import logging
from typing import Optional

import pytest

from testenv.config_sdk import get_config_manager
from testenv.guard import EnvironmentGuard
from testenv.hooks.process import ProcessLogging, process_hooks

logger = logging.getLogger(__name__)

guard_key = pytest.StashKey[Optional[EnvironmentGuard]]()


def pytest_addoption(parser):
    group = parser.getgroup("testenv")
    group.addoption(
        "--reset-environment",
        action="store_true",
        default=False,
        help="Restore environment variables, locale, preferences, network hooks "
             "and logging to their startup state before each test.",
    )
    parser.addini("reset_environment", type="bool", default=False,
                  help="Same as --reset-environment.")


def _is_pytest_handler(handler: logging.Handler) -> bool:
    return type(handler).__module__.startswith("_pytest")


def pytest_configure(config):
    guard = None
    if config.getoption("reset_environment") or config.getini("reset_environment"):
        hooks = process_hooks()
        # pytest's capture handlers belong to the run, not to the test
        hooks.logging = ProcessLogging(keep=_is_pytest_handler)
        guard = EnvironmentGuard(hooks, settings=get_config_manager().load())
        logger.debug(f"Environment guard active with {len(guard.baseline)} baseline properties")
    config.stash[guard_key] = guard


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_protocol(item, nextitem):
    # Runs before any setup phase, so fixtures and caplog see the restored state
    guard = item.config.stash.get(guard_key, None)
    if guard is not None:
        guard.reset()
    yield


@pytest.fixture
def environment_guard(request) -> EnvironmentGuard:
    """The session's guard; skips the test when resetting is disabled."""
    guard = request.config.stash.get(guard_key, None)
    if guard is None:
        pytest.skip("environment reset is not enabled")
    return guard
