"""Production bindings over the real process globals."""

import os
import time
import locale
import logging
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from testenv import logs, net, prefs
from testenv.profile import HOME_KEY
from .base import (
    Hooks,
    LocaleSettings,
    LoggingRegistry,
    NetworkHooks,
    PathProbe,
    PreferenceRoots,
    PropertyStore,
)

logger = logging.getLogger(__name__)

# Tried in order when the requested locale is not installed
FALLBACK_LOCALES = ["C.UTF-8", "C"]


class EnvironProperties(PropertyStore):
    """os.environ as the global property set."""

    def read_all(self) -> Dict[str, str]:
        return dict(os.environ)

    def replace_all(self, properties: Mapping[str, str]) -> None:
        snapshot = dict(properties)
        os.environ.clear()
        os.environ.update(snapshot)


class ProcessPaths(PathProbe):
    def temp_dir(self, properties: Mapping[str, str]) -> Optional[str]:
        return properties.get("TMPDIR") or tempfile.gettempdir()

    def user_home(self, properties: Mapping[str, str]) -> Optional[str]:
        return properties.get(HOME_KEY)

    def working_dir(self, properties: Mapping[str, str]) -> Optional[str]:
        try:
            return os.getcwd()
        except FileNotFoundError:
            logger.debug("Current working directory no longer exists")
            return None


def _locale_candidates(name: str) -> List[str]:
    if "." in name:
        return [name]
    return [f"{name}.UTF-8", f"{name}.utf8", name]


class ProcessLocale(LocaleSettings):
    """LC_ALL through locale.setlocale, the timezone through TZ and time.tzset."""

    def get_locale(self) -> Optional[str]:
        return locale.setlocale(locale.LC_ALL)

    def set_locale(self, name: str) -> None:
        for candidate in _locale_candidates(name):
            try:
                locale.setlocale(locale.LC_ALL, candidate)
                logger.debug(f"Locale set to {candidate}")
                return
            except locale.Error:
                logger.debug(f"Locale {candidate} not available")

        for candidate in FALLBACK_LOCALES:
            try:
                locale.setlocale(locale.LC_ALL, candidate)
            except locale.Error:
                continue
            logger.warning(f"Locale {name} is not installed; using {candidate}")
            return
        raise locale.Error(f"Neither {name} nor any of {FALLBACK_LOCALES} is available")

    def get_timezone(self) -> Optional[str]:
        return os.environ.get("TZ")

    def set_timezone(self, name: str) -> None:
        os.environ["TZ"] = name
        if hasattr(time, "tzset"):
            time.tzset()

    def timezone_key(self) -> Optional[str]:
        return "TZ"


class FilePreferenceRoots(PreferenceRoots):
    """
    The file-backed preference store.

    With no explicit directories the roots are resolved from the environment
    on every call, so a reset that restored HOME also moves the user root.
    """

    def __init__(self, system_dir: Optional[Path] = None, user_dir: Optional[Path] = None):
        self.system_dir = system_dir
        self.user_dir = user_dir

    def system_root(self) -> prefs.PreferenceNode:
        if self.system_dir is not None:
            return prefs.open_root(self.system_dir)
        return prefs.system_root()

    def user_root(self) -> prefs.PreferenceNode:
        if self.user_dir is not None:
            return prefs.open_root(self.user_dir)
        return prefs.user_root()


class ProcessNetworkHooks(NetworkHooks):
    def get_authenticator(self) -> Any:
        return net.get_default_authenticator()

    def set_authenticator(self, handler: Any) -> None:
        net.set_default_authenticator(handler)

    def get_cookie_handler(self) -> Any:
        return net.get_default_cookie_handler()

    def set_cookie_handler(self, handler: Any) -> None:
        net.set_default_cookie_handler(handler)

    def get_response_cache(self) -> Any:
        return net.get_default_response_cache()

    def set_response_cache(self, handler: Any) -> None:
        net.set_default_response_cache(handler)

    def get_hostname_verifier(self) -> Any:
        return net.get_default_hostname_verifier()

    def set_hostname_verifier(self, verifier: Any) -> None:
        net.set_default_hostname_verifier(verifier)

    def get_socket_factory(self) -> Any:
        return net.get_default_socket_factory()

    def set_socket_factory(self, factory: Any) -> None:
        net.set_default_socket_factory(factory)


class ProcessLogging(LoggingRegistry):
    def __init__(self, keep: Optional[Callable[[logging.Handler], bool]] = None):
        self.keep = keep

    def reset(self) -> None:
        logs.reset_logging(self.keep)

    def install_console_handler(self) -> None:
        logs.install_console_handler()


def process_hooks() -> Hooks:
    return Hooks(
        properties=EnvironProperties(),
        paths=ProcessPaths(),
        locale=ProcessLocale(),
        preferences=FilePreferenceRoots(),
        network=ProcessNetworkHooks(),
        logging=ProcessLogging(),
    )
