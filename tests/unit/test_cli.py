import json
import pytest
from click.testing import CliRunner
from testenv.app import cli
from testenv.hooks.mock import MockPaths
from testenv.hooks.process import FilePreferenceRoots

@pytest.fixture
def file_prefs(hooks, tmp_path):
    """Swap the in-memory preference roots for file-backed ones."""
    roots = FilePreferenceRoots(system_dir=tmp_path / "system", user_dir=tmp_path / "user")
    hooks.preferences = roots
    return roots

def test_snapshot_json_lists_baseline(hooks, config_manager):
    result = CliRunner().invoke(cli, ["snapshot", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["PATH"] == "/usr/bin:/bin"
    assert data["LANG"] == "C"

def test_snapshot_table(hooks, config_manager):
    result = CliRunner().invoke(cli, ["snapshot"])
    assert result.exit_code == 0
    assert "Baseline (3 properties)" in result.output
    assert "LANG" in result.output

def test_check_reports_paths(hooks, config_manager, temp_dir):
    result = CliRunner().invoke(cli, ["check"])
    assert result.exit_code == 0
    assert "ENVIRONMENT CHECK" in result.output
    assert "Runtime home is writable" in result.output

def test_check_reports_created_substitute_home(hooks, config_manager, temp_dir):
    hooks.paths = MockPaths(str(temp_dir), "", "/work")
    result = CliRunner().invoke(cli, ["check"])
    assert result.exit_code == 0
    assert "Created" in result.output
    assert (temp_dir / "user.home").is_dir()

def test_missing_paths_exit_with_error(hooks, config_manager):
    hooks.paths = MockPaths(None, None, "/work")
    result = CliRunner().invoke(cli, ["check"])
    assert result.exit_code == 1
    assert "Missing required paths" in result.output

def test_reset_purges_preferences(hooks, config_manager, file_prefs):
    file_prefs.user_root().node("app").put("k", "v")
    file_prefs.user_root().flush()
    hooks.locale.set_timezone("UTC")

    result = CliRunner().invoke(cli, ["reset", "--yes"])

    assert result.exit_code == 0
    assert "Environment reset to baseline" in result.output
    assert file_prefs.user_root().children_names() == []
    assert hooks.locale.get_timezone() == "America/Los_Angeles"

def test_reset_uses_saved_settings(hooks, config_manager):
    config_manager.set("pinned_timezone", "UTC")
    result = CliRunner().invoke(cli, ["reset", "--yes"])
    assert result.exit_code == 0
    assert hooks.locale.get_timezone() == "UTC"

def test_reset_reports_backing_store_failure(hooks, config_manager):
    hooks.preferences.system.fail_on = "flush"
    result = CliRunner().invoke(cli, ["reset", "--yes"])
    assert result.exit_code == 1
    assert "Preference store reset failed" in result.output

def test_reset_requires_confirmation(hooks, config_manager):
    result = CliRunner().invoke(cli, ["reset"], input="n\n")
    assert result.exit_code != 0
    assert hooks.logging.resets == 0

def test_prefs_put_get_show_clear(hooks, file_prefs):
    runner = CliRunner()

    result = runner.invoke(cli, ["prefs", "put", "app/window", "width", "300"])
    assert result.exit_code == 0
    assert "Set app/window:width" in result.output

    result = runner.invoke(cli, ["prefs", "get", "app/window", "width"])
    assert "width = 300" in result.output

    result = runner.invoke(cli, ["prefs", "show"])
    assert "window/" in result.output
    assert "width" in result.output

    result = runner.invoke(cli, ["prefs", "clear", "--yes"])
    assert result.exit_code == 0
    assert file_prefs.user_root().children_names() == []

def test_prefs_system_scope(hooks, file_prefs):
    result = CliRunner().invoke(cli, ["prefs", "put", "--scope", "system", "net", "proxy", "none"])
    assert result.exit_code == 0
    assert file_prefs.system_root().node("net").get("proxy") == "none"
    assert file_prefs.user_root().children_names() == []

def test_prefs_invalid_path(hooks, file_prefs):
    result = CliRunner().invoke(cli, ["prefs", "get", "a//b", "k"])
    assert result.exit_code == 1
    assert "Malformed node path" in result.output

def test_config_set_get_reset(config_manager):
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "set", "pinned_locale", "fr_FR"])
    assert result.exit_code == 0
    assert "Set pinned_locale = fr_FR" in result.output

    result = runner.invoke(cli, ["config", "get", "pinned_locale"])
    assert "pinned_locale = fr_FR" in result.output

    result = runner.invoke(cli, ["config", "get"])
    assert "pinned_timezone = America/Los_Angeles" in result.output

    result = runner.invoke(cli, ["config", "reset"])
    assert result.exit_code == 0
    assert config_manager.get("pinned_locale") == "en_US"

def test_config_unknown_key(config_manager):
    result = CliRunner().invoke(cli, ["config", "set", "bogus", "1"])
    assert result.exit_code == 1
    assert "Unknown setting" in result.output
    assert "pinned_locale" in result.output
