import os
import ssl
import logging
import urllib.request
from testenv import net, prefs
from testenv.config_sdk import GuardSettings
from testenv.guard import EnvironmentGuard
from testenv.hooks.process import process_hooks
from testenv.profile import RuntimeProfile

def build_guard():
    return EnvironmentGuard(process_hooks(), RuntimeProfile.detect(), GuardSettings())

def test_reset_restores_real_process_state(process_state):
    os.environ["TESTENV_BASELINE_MARKER"] = "kept"
    guard = build_guard()

    # Mutations a careless test might leave behind
    os.environ["TESTENV_LEAKED"] = "1"
    del os.environ["TESTENV_BASELINE_MARKER"]
    os.environ["TZ"] = "UTC"
    prefs.user_root().node("app/window").put("width", "300")
    prefs.user_root().flush()
    prefs.system_root().node("shared").put("proxy", "direct")
    prefs.system_root().flush()
    net.set_default_authenticator(urllib.request.HTTPBasicAuthHandler())
    net.set_default_cookie_handler(urllib.request.HTTPCookieProcessor())
    verifier = net.get_default_hostname_verifier()
    ssl._create_default_https_context = ssl._create_unverified_context
    chatty = logging.getLogger("testenv.tests.chatty")
    chatty.addHandler(logging.NullHandler())
    chatty.setLevel(logging.DEBUG)

    guard.reset()

    assert "TESTENV_LEAKED" not in os.environ
    assert os.environ["TESTENV_BASELINE_MARKER"] == "kept"
    assert dict(os.environ) == dict(guard.baseline)
    assert os.environ["TZ"] == "America/Los_Angeles"

    for root in (prefs.user_root(), prefs.system_root()):
        assert root.children_names() == []
        assert root.keys() == []

    assert net.get_default_authenticator() is None
    assert net.get_default_cookie_handler() is None
    assert urllib.request._opener is None
    assert ssl._create_default_https_context is verifier

    assert chatty.handlers == [] and chatty.level == logging.NOTSET
    assert len(logging.root.handlers) == 1
    assert isinstance(logging.root.handlers[0], logging.StreamHandler)

def test_repeated_real_resets_are_stable(process_state):
    guard = build_guard()
    guard.reset()
    first = dict(os.environ)

    guard.reset()

    assert dict(os.environ) == first
    assert len(logging.root.handlers) == 1

def test_corrupt_user_preferences_are_purged_quietly(process_state, capsys, caplog):
    guard = build_guard()
    node_dir = prefs.get_user_prefs_dir() / "corrupt"
    node_dir.mkdir(parents=True, exist_ok=True)
    (node_dir / "prefs.json").write_text("not json at all")
    (prefs.get_user_prefs_dir() / "odd%2Fname").mkdir()

    guard.reset()

    assert not node_dir.exists()
    assert not (prefs.get_user_prefs_dir() / "odd%2Fname").exists()
    assert "Unusual preference node" not in capsys.readouterr().err
    assert "Unusual preference node" not in caplog.text
