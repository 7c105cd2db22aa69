from typing import Any, Dict, List, Mapping, Optional

from testenv.prefs import BackingStoreError
from .base import (
    Hooks,
    LocaleSettings,
    LoggingRegistry,
    NetworkHooks,
    PathProbe,
    PreferenceNodeLike,
    PreferenceRoots,
    PropertyStore,
)


class MockProperties(PropertyStore):
    """
    In-memory property set for testing.
    """
    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})
        self.replacements = 0

    def read_all(self) -> Dict[str, str]:
        return dict(self.values)

    def replace_all(self, properties: Mapping[str, str]) -> None:
        self.values = dict(properties)
        self.replacements += 1


class MockPaths(PathProbe):
    def __init__(self, temp_dir: Optional[str], user_home: Optional[str], working_dir: Optional[str]):
        self.temp = temp_dir
        self.home = user_home
        self.cwd = working_dir

    def temp_dir(self, properties: Mapping[str, str]) -> Optional[str]:
        return self.temp

    def user_home(self, properties: Mapping[str, str]) -> Optional[str]:
        return self.home

    def working_dir(self, properties: Mapping[str, str]) -> Optional[str]:
        return self.cwd


class MockLocale(LocaleSettings):
    def __init__(self, locale_name: Optional[str] = None, timezone: Optional[str] = None,
                 timezone_key: Optional[str] = None):
        self.locale_name = locale_name
        self.timezone = timezone
        self.key = timezone_key

    def get_locale(self) -> Optional[str]:
        return self.locale_name

    def set_locale(self, name: str) -> None:
        self.locale_name = name

    def get_timezone(self) -> Optional[str]:
        return self.timezone

    def set_timezone(self, name: str) -> None:
        self.timezone = name

    def timezone_key(self) -> Optional[str]:
        return self.key


class MockPreferenceNode(PreferenceNodeLike):
    """
    In-memory preference node. Set `fail_on` to an operation name
    ("flush", "clear", "remove_node", "children_names") to make it raise
    BackingStoreError.
    """
    def __init__(self, name: str = "", parent: Optional["MockPreferenceNode"] = None):
        self.name = name
        self.parent = parent
        self.entries: Dict[str, str] = {}
        self.children: Dict[str, "MockPreferenceNode"] = {}
        self.flushes = 0
        self.fail_on: Optional[str] = None

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation:
            raise BackingStoreError(f"Simulated {operation} failure on '{self.name or '/'}'")

    def children_names(self) -> List[str]:
        self._maybe_fail("children_names")
        return sorted(self.children)

    def node(self, path: str) -> "MockPreferenceNode":
        node = self
        for part in filter(None, path.split("/")):
            node = node.children.setdefault(part, MockPreferenceNode(part, node))
        return node

    def keys(self) -> List[str]:
        return sorted(self.entries)

    def put(self, key: str, value: str) -> None:
        self.entries[key] = value

    def remove_node(self) -> None:
        self._maybe_fail("remove_node")
        if self.parent is not None:
            self.parent.children.pop(self.name, None)

    def clear(self) -> None:
        self._maybe_fail("clear")
        self.entries.clear()

    def flush(self) -> None:
        self._maybe_fail("flush")
        self.flushes += 1


class MockPreferenceRoots(PreferenceRoots):
    def __init__(self):
        self.system = MockPreferenceNode()
        self.user = MockPreferenceNode()

    def system_root(self) -> MockPreferenceNode:
        return self.system

    def user_root(self) -> MockPreferenceNode:
        return self.user


class MockNetworkHooks(NetworkHooks):
    def __init__(self, hostname_verifier: Any = None, socket_factory: Any = None):
        self.authenticator: Any = None
        self.cookie_handler: Any = None
        self.response_cache: Any = None
        self.hostname_verifier = hostname_verifier if hostname_verifier is not None else object()
        self.socket_factory = socket_factory if socket_factory is not None else object()

    def get_authenticator(self) -> Any: return self.authenticator
    def set_authenticator(self, handler: Any) -> None: self.authenticator = handler
    def get_cookie_handler(self) -> Any: return self.cookie_handler
    def set_cookie_handler(self, handler: Any) -> None: self.cookie_handler = handler
    def get_response_cache(self) -> Any: return self.response_cache
    def set_response_cache(self, handler: Any) -> None: self.response_cache = handler
    def get_hostname_verifier(self) -> Any: return self.hostname_verifier
    def set_hostname_verifier(self, verifier: Any) -> None: self.hostname_verifier = verifier
    def get_socket_factory(self) -> Any: return self.socket_factory
    def set_socket_factory(self, factory: Any) -> None: self.socket_factory = factory


class MockLogging(LoggingRegistry):
    def __init__(self):
        self.handlers: List[str] = []
        self.resets = 0

    def reset(self) -> None:
        self.handlers = []
        self.resets += 1

    def install_console_handler(self) -> None:
        self.handlers.append("console")


def mock_hooks(temp_dir: Optional[str], user_home: Optional[str], working_dir: Optional[str],
               properties: Optional[Mapping[str, str]] = None) -> Hooks:
    return Hooks(
        properties=MockProperties(properties),
        paths=MockPaths(temp_dir, user_home, working_dir),
        locale=MockLocale(),
        preferences=MockPreferenceRoots(),
        network=MockNetworkHooks(),
        logging=MockLogging(),
    )
