import pytest

from portfolio_client.services.auth import AuthSession, AuthTokenManager


def test_attach_without_session_leaves_headers_alone():
    manager = AuthTokenManager()
    headers = {"X-Platform": "web"}

    assert manager.attach_auth_header(headers) == {"X-Platform": "web"}
    assert not manager.is_authenticated


def test_set_tokens_attaches_bearer_to_a_copy():
    manager = AuthTokenManager()
    manager.set_tokens("access-1", "refresh-1")
    headers = {"X-Platform": "web"}

    result = manager.attach_auth_header(headers)

    assert result["Authorization"] == "Bearer access-1"
    assert "Authorization" not in headers
    assert manager.session == AuthSession("access-1", "refresh-1")


def test_new_pair_replaces_old_pair_entirely():
    manager = AuthTokenManager()
    manager.set_tokens("access-1", "refresh-1")
    manager.set_tokens("access-2")

    assert manager.access_token == "access-2"
    assert manager.refresh_token is None


def test_clear_tokens():
    manager = AuthTokenManager()
    manager.set_tokens("access-1", "refresh-1")
    manager.clear_tokens()

    assert manager.session is None
    assert "Authorization" not in manager.attach_auth_header({})


def test_empty_access_token_rejected():
    manager = AuthTokenManager()
    with pytest.raises(ValueError):
        manager.set_tokens("")
