from testenv import prefs
from testenv.hooks.factory import get_hooks, set_hooks
from testenv.hooks.mock import mock_hooks

def test_set_hooks_installs_the_default(tmp_path):
    mock = mock_hooks(str(tmp_path), str(tmp_path), str(tmp_path))
    set_hooks(mock)
    try:
        assert get_hooks() is mock
    finally:
        set_hooks(None)

def test_set_hooks_drops_cached_preference_roots(tmp_path):
    cached = prefs.open_root(tmp_path / "store")

    set_hooks(None)

    assert prefs.open_root(tmp_path / "store") is not cached
