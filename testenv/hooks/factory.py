"""
Process-wide default hooks.

Hooks are the capabilities the environment guard acts through: the property
store, path probe, locale settings, preference roots, network defaults and
logging registry (see `Hooks` in base.py). Production code gets the bindings
to the real interpreter from process.py; tests install in-memory ones from
mock.py with set_hooks().
"""

from typing import Optional
from testenv.prefs import clear_roots
from .base import Hooks

_hooks: Optional[Hooks] = None

def get_hooks() -> Hooks:
    """
    Returns the installed hooks, building the real process bindings on first
    use when none have been installed.
    """
    global _hooks
    if _hooks is None:
        from .process import process_hooks
        _hooks = process_hooks()
    return _hooks

def set_hooks(hooks: Optional[Hooks]) -> None:
    """
    Installs `hooks` as the process default; None restores lazy building of
    the real bindings. Cached preference roots are dropped either way, so no
    node opened under the previous hooks outlives them.
    """
    global _hooks
    clear_roots()
    _hooks = hooks
