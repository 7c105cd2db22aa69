import os
import sys
from pathlib import Path

def get_config_dir() -> Path:
    """
    Returns the directory holding testenv settings.json.
    Default: ~/.config/testenv
    Override: TESTENV_CONFIG_DIR env var
    """
    config_home = os.environ.get("TESTENV_CONFIG_DIR")
    if config_home:
        return Path(config_home)
    return Path.home() / ".config" / "testenv"

def get_runtime_home() -> Path:
    """
    Returns the runtime home, where system-scope persisted data lives.
    Default: sys.prefix (the active interpreter or virtualenv)
    Override: TESTENV_RUNTIME_HOME env var
    """
    runtime_home = os.environ.get("TESTENV_RUNTIME_HOME")
    if runtime_home:
        return Path(runtime_home)
    return Path(sys.prefix)

def get_system_prefs_dir() -> Path:
    """
    Returns the backing directory of the system preference root.
    Path: <RUNTIME_HOME>/.systemPrefs
    """
    return get_runtime_home() / ".systemPrefs"

def get_user_prefs_dir() -> Path:
    """
    Returns the backing directory of the user preference root.
    Path: ~/.userPrefs
    """
    return Path.home() / ".userPrefs"
