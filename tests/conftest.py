import os
import time
import locale
import logging
import pytest

ISOLATED_VARS = ["HOME", "TESTENV_CONFIG_DIR", "TESTENV_RUNTIME_HOME"]

@pytest.fixture(scope="session", autouse=True)
def isolate_dirs(tmp_path_factory):
    """
    Points HOME, the settings dir and the runtime home at temporary
    directories for the whole session, so no test touches the real
    ~/.userPrefs, ~/.config/testenv or <sys.prefix>/.systemPrefs.
    """
    root = tmp_path_factory.mktemp("testenv_session")
    saved = {name: os.environ.get(name) for name in ISOLATED_VARS}
    os.environ["HOME"] = str(root / "home")
    os.environ["TESTENV_CONFIG_DIR"] = str(root / "config")
    os.environ["TESTENV_RUNTIME_HOME"] = str(root / "runtime")
    (root / "home").mkdir()
    (root / "runtime").mkdir()
    yield root
    for name, value in saved.items():
        if value is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = value

@pytest.fixture
def restore_logging():
    """Saves and restores the whole logging registry around a test."""
    def capture(item):
        return (list(item.handlers), list(item.filters), item.level, item.propagate, item.disabled)

    loggers = [logging.root] + [
        item for item in logging.root.manager.loggerDict.values() if isinstance(item, logging.Logger)
    ]
    saved = {id(item): (item, capture(item)) for item in loggers}
    disabled_level = logging.root.manager.disable
    yield
    for item, (handlers, filters, level, propagate, disabled) in saved.values():
        # pytest swaps its capture handlers per phase; keep whichever are live now
        live_capture = [h for h in item.handlers if type(h).__module__.startswith("_pytest")]
        item.handlers[:] = [h for h in handlers if not type(h).__module__.startswith("_pytest")] + live_capture
        item.filters[:] = filters
        item.setLevel(level)
        item.propagate = propagate
        item.disabled = disabled
    logging.disable(disabled_level)

@pytest.fixture
def restore_environ():
    """Saves and restores os.environ (and the C-level timezone)."""
    saved = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(saved)
    if hasattr(time, "tzset"):
        time.tzset()

@pytest.fixture
def restore_locale():
    saved = locale.setlocale(locale.LC_ALL)
    yield
    locale.setlocale(locale.LC_ALL, saved)
