from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional


class PropertyStore(ABC):
    """
    The process's global configuration properties.
    """

    @abstractmethod
    def read_all(self) -> Dict[str, str]:
        """Return an independent copy of every property."""
        pass

    @abstractmethod
    def replace_all(self, properties: Mapping[str, str]) -> None:
        """Make the live set exactly `properties`."""
        pass


class PathProbe(ABC):
    """
    Resolves the required path-like values from a property snapshot.
    None means the value is absent.
    """

    @abstractmethod
    def temp_dir(self, properties: Mapping[str, str]) -> Optional[str]:
        pass

    @abstractmethod
    def user_home(self, properties: Mapping[str, str]) -> Optional[str]:
        pass

    @abstractmethod
    def working_dir(self, properties: Mapping[str, str]) -> Optional[str]:
        pass


class LocaleSettings(ABC):
    @abstractmethod
    def get_locale(self) -> Optional[str]:
        pass

    @abstractmethod
    def set_locale(self, name: str) -> None:
        pass

    @abstractmethod
    def get_timezone(self) -> Optional[str]:
        pass

    @abstractmethod
    def set_timezone(self, name: str) -> None:
        pass

    def timezone_key(self) -> Optional[str]:
        """The property set_timezone() writes, if it writes one."""
        return None


class PreferenceNodeLike(ABC):
    """The subset of a preference node the guard relies on."""

    @abstractmethod
    def children_names(self) -> List[str]:
        pass

    @abstractmethod
    def node(self, path: str) -> "PreferenceNodeLike":
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        pass

    @abstractmethod
    def remove_node(self) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def flush(self) -> None:
        pass


class PreferenceRoots(ABC):
    """Access to the two roots of the hierarchical preference store."""

    @abstractmethod
    def system_root(self) -> PreferenceNodeLike:
        pass

    @abstractmethod
    def user_root(self) -> PreferenceNodeLike:
        pass


class NetworkHooks(ABC):
    """
    Process-wide network default hooks.
    """

    @abstractmethod
    def get_authenticator(self) -> Any:
        pass

    @abstractmethod
    def set_authenticator(self, handler: Any) -> None:
        pass

    @abstractmethod
    def get_cookie_handler(self) -> Any:
        pass

    @abstractmethod
    def set_cookie_handler(self, handler: Any) -> None:
        pass

    @abstractmethod
    def get_response_cache(self) -> Any:
        pass

    @abstractmethod
    def set_response_cache(self, handler: Any) -> None:
        pass

    @abstractmethod
    def get_hostname_verifier(self) -> Any:
        pass

    @abstractmethod
    def set_hostname_verifier(self, verifier: Any) -> None:
        pass

    @abstractmethod
    def get_socket_factory(self) -> Any:
        pass

    @abstractmethod
    def set_socket_factory(self, factory: Any) -> None:
        pass


class LoggingRegistry(ABC):
    @abstractmethod
    def reset(self) -> None:
        """Discard every handler, level and filter."""
        pass

    @abstractmethod
    def install_console_handler(self) -> None:
        """Attach one console handler to the root logger."""
        pass


@dataclass
class Hooks:
    """The set of process globals a guard manages."""
    properties: PropertyStore
    paths: PathProbe
    locale: LocaleSettings
    preferences: PreferenceRoots
    network: NetworkHooks
    logging: LoggingRegistry
