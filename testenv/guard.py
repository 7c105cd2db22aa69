"""
Resets the interpreter to a relatively pristine state between tests.

Defends against tests that mutate environment variables, the locale, the
preference store, network default hooks or logging configuration.
"""

import os
import gc
import logging
from pathlib import Path
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional

from testenv.config_sdk import GuardSettings
from testenv.hooks.base import Hooks, PreferenceNodeLike
from testenv.hooks.factory import get_hooks
from testenv.logs import muted
from testenv.profile import RuntimeProfile

logger = logging.getLogger(__name__)


class GuardError(Exception):
    pass


class MissingPathError(GuardError):
    def __init__(self, missing: List[str], message: str):
        super().__init__(message)
        self.missing = missing


class DirectoryError(GuardError):
    def __init__(self, path: Path, message: str):
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class RequiredPaths:
    temp_dir: str
    user_home: str
    working_dir: str


def make_directory(path: Path) -> bool:
    """
    Ensures `path` is a writable directory.

    Creates it (with parents) when absent and replaces a non-directory in
    its place. Returns True when something was created.
    """
    try:
        if not path.exists() and not path.is_symlink():
            path.mkdir(parents=True)
            created = True
        elif not path.is_dir():
            path.unlink()
            path.mkdir(parents=True)
            created = True
        else:
            created = False
    except OSError as e:
        raise DirectoryError(path, f"Failed to make directory {path}: {e}") from e

    if not os.access(path, os.W_OK):
        raise DirectoryError(path, f"Directory {path} is not writable")
    return created


class EnvironmentGuard:
    """
    Captures a baseline of the process globals and restores it on reset().

    Construct once per process (or per test worker), then call reset()
    before each test.
    """

    def __init__(self, hooks: Optional[Hooks] = None, profile: Optional[RuntimeProfile] = None,
                 settings: Optional[GuardSettings] = None):
        self.hooks = hooks if hooks is not None else get_hooks()
        self.profile = profile if profile is not None else RuntimeProfile.detect()
        self.settings = settings if settings is not None else GuardSettings()
        self.created_dirs: List[Path] = []
        self.resetting = False

        snapshot = dict(self.hooks.properties.read_all())

        probe = self.hooks.paths
        tmp_dir = probe.temp_dir(snapshot)
        user_home = probe.user_home(snapshot)
        working_dir = probe.working_dir(snapshot)
        missing = [name for name, value in (("temp_dir", tmp_dir), ("user_home", user_home),
                                            ("working_dir", working_dir)) if value is None]
        if missing:
            raise MissingPathError(
                missing,
                f"Missing required paths {', '.join(missing)}: temp_dir={tmp_dir}, "
                f"user_home={user_home}, working_dir={working_dir}")

        # The system preference root lives under the runtime home
        if not self.profile.runtime_home_writable:
            runtime_home = Path(tmp_dir) / "runtime.home"
            self._make_directory(runtime_home)
            snapshot[self.profile.runtime_home_key] = str(runtime_home)

        if user_home == "":
            user_home = str(Path(tmp_dir) / "user.home")
            self._make_directory(Path(user_home))
            snapshot[self.profile.home_key] = user_home

        # Pinning the timezone writes a property, so the baseline carries the pinned value
        timezone_key = self.hooks.locale.timezone_key()
        if timezone_key:
            snapshot[timezone_key] = self.settings.pinned_timezone

        self.paths = RequiredPaths(temp_dir=tmp_dir, user_home=user_home, working_dir=working_dir)
        self._snapshot = snapshot
        self._baseline = MappingProxyType(snapshot)

        network = self.hooks.network
        self.default_hostname_verifier = network.get_hostname_verifier()
        self.default_socket_factory = network.get_socket_factory()
        logger.debug(f"Captured baseline of {len(snapshot)} properties")

    @property
    def baseline(self) -> Mapping[str, str]:
        return self._baseline

    def _make_directory(self, path: Path) -> None:
        if make_directory(path):
            logger.debug(f"Created directory {path}")
            self.created_dirs.append(path)

    def reset(self) -> None:
        """
        Restores the baseline. Raises BackingStoreError (without running the
        remaining steps) when the preference store cannot be purged.
        """
        self.resetting = True
        try:
            self._reset()
        finally:
            self.resetting = False

    def _reset(self) -> None:
        hooks = self.hooks

        hooks.properties.replace_all(dict(self._snapshot))

        hooks.locale.set_locale(self.settings.pinned_locale)
        hooks.locale.set_timezone(self.settings.pinned_timezone)

        # The store logs a warning for every odd node it purges
        with muted(logging.getLogger(self.settings.noisy_logger)):
            reset_preferences(hooks.preferences.system_root())
            reset_preferences(hooks.preferences.user_root())

        network = hooks.network
        network.set_authenticator(None)
        network.set_cookie_handler(None)
        network.set_response_cache(None)
        network.set_hostname_verifier(self.default_hostname_verifier)
        network.set_socket_factory(self.default_socket_factory)

        hooks.logging.reset()
        hooks.logging.install_console_handler()

        if self.settings.collect_garbage:
            gc.collect()


def reset_preferences(root: PreferenceNodeLike) -> None:
    for child in root.children_names():
        root.node(child).remove_node()
    root.clear()
    root.flush()
