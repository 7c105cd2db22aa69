"""
Process-wide network default hooks.

The authenticator, cookie handler and response cache are urllib handlers
composed into the globally installed urllib.request opener; setting any of
them rebuilds and installs that opener (or uninstalls it when none is set).
The hostname verification policy is ssl._create_default_https_context, the
factory http.client and urllib use to build default HTTPS contexts. The
secure socket factory is ssl.SSLContext.sslsocket_class, the class
SSLContext.wrap_socket() instantiates.
"""

import ssl
import logging
import urllib.request
from typing import Any, Callable, Optional, Type

logger = logging.getLogger(__name__)

_authenticator: Optional[urllib.request.BaseHandler] = None
_cookie_handler: Optional[urllib.request.BaseHandler] = None
_response_cache: Optional[urllib.request.BaseHandler] = None


def _install_opener() -> None:
    handlers = [h for h in (_authenticator, _cookie_handler, _response_cache) if h is not None]
    if handlers:
        logger.debug(f"Installing urllib opener with {len(handlers)} default handler(s)")
        urllib.request.install_opener(urllib.request.build_opener(*handlers))
    else:
        urllib.request.install_opener(None)


def get_default_authenticator() -> Optional[urllib.request.BaseHandler]:
    return _authenticator


def set_default_authenticator(handler: Optional[urllib.request.BaseHandler]) -> None:
    global _authenticator
    _authenticator = handler
    _install_opener()


def get_default_cookie_handler() -> Optional[urllib.request.BaseHandler]:
    return _cookie_handler


def set_default_cookie_handler(handler: Optional[urllib.request.BaseHandler]) -> None:
    global _cookie_handler
    _cookie_handler = handler
    _install_opener()


def get_default_response_cache() -> Optional[urllib.request.BaseHandler]:
    return _response_cache


def set_default_response_cache(handler: Optional[urllib.request.BaseHandler]) -> None:
    global _response_cache
    _response_cache = handler
    _install_opener()


def get_default_hostname_verifier() -> Callable[..., ssl.SSLContext]:
    return ssl._create_default_https_context


def set_default_hostname_verifier(factory: Callable[..., ssl.SSLContext]) -> None:
    ssl._create_default_https_context = factory


def get_default_socket_factory() -> Type[Any]:
    return ssl.SSLContext.sslsocket_class


def set_default_socket_factory(socket_class: Type[Any]) -> None:
    ssl.SSLContext.sslsocket_class = socket_class
