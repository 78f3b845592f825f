"""Basic unit tests for the mcp-relay package."""

from mcp_relay import (
    GENERATE_IMAGE,
    SEND_EMAIL,
    AuthError,
    ConfigurationError,
    ErrorKind,
    Gateway,
    ProviderError,
    RelayError,
    SessionError,
    __version__,
)


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert Gateway is not None
    assert SEND_EMAIL == "sendEmail"
    assert GENERATE_IMAGE == "generateImage"


def test_error_hierarchy():
    assert issubclass(AuthError, RelayError)
    assert issubclass(ConfigurationError, RelayError)
    assert issubclass(ProviderError, RelayError)
    assert issubclass(SessionError, RelayError)


def test_error_attributes():
    err = RelayError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    err_with_details = SessionError("bad session", details={"id": "123"})
    assert err_with_details.code == "session_error"
    assert err_with_details.details == {"id": "123"}

    provider = ProviderError("rate limited", status=429)
    assert provider.code == ErrorKind.PROVIDER_ERROR.value
    assert provider.status == 429


def test_auth_error_is_unauthorized():
    assert AuthError().code == "unauthorized"
    assert AuthError().message == "Unauthorized"
