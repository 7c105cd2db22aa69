import pytest
from testenv.config_sdk import ConfigManager, set_config_manager
from testenv.hooks.factory import set_hooks
from testenv.hooks.mock import mock_hooks
from testenv.profile import RuntimeProfile

@pytest.fixture
def temp_dir(tmp_path):
    path = tmp_path / "tmp"
    path.mkdir()
    return path

@pytest.fixture
def hooks(tmp_path, temp_dir):
    """
    Fresh in-memory hooks for each test, installed as the process default.
    """
    home = tmp_path / "home"
    home.mkdir()
    mock = mock_hooks(
        str(temp_dir), str(home), str(tmp_path),
        properties={"PATH": "/usr/bin:/bin", "LANG": "C", "HOME": str(home)},
    )
    set_hooks(mock)
    yield mock
    set_hooks(None)

@pytest.fixture
def profile():
    return RuntimeProfile(runtime_home_writable=True)

@pytest.fixture
def config_manager(tmp_path):
    manager = ConfigManager(tmp_path / "config")
    set_config_manager(manager)
    yield manager
    set_config_manager(None)
