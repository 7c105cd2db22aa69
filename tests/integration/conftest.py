import pytest
from testenv import net

@pytest.fixture
def restore_network():
    verifier = net.get_default_hostname_verifier()
    factory = net.get_default_socket_factory()
    yield
    net.set_default_authenticator(None)
    net.set_default_cookie_handler(None)
    net.set_default_response_cache(None)
    net.set_default_hostname_verifier(verifier)
    net.set_default_socket_factory(factory)

@pytest.fixture
def process_state(restore_environ, restore_locale, restore_logging, restore_network):
    """Everything a real reset touches, put back after the test."""
    yield
