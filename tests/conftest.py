import pytest
from unittest.mock import patch, MagicMock, AsyncMock

from wechat_auth.auth.oauth_factory import OAuthProviderFactory
from wechat_auth.config import WechatSettings, get_wechat_settings

TEST_APPID = "wx_test_appid"
TEST_SECRET = "wx_test_secret"
TEST_REDIRECT_URI = "https://example.com/auth/wechat/callback"


@pytest.fixture
def wechat_settings():
    """WeChat settings independent of the process environment."""
    return WechatSettings(
        WECHAT_APPID=TEST_APPID,
        WECHAT_SECRET=TEST_SECRET,
        WECHAT_REDIRECT_URI=TEST_REDIRECT_URI,
        WECHAT_DEFAULT_SCOPE="snsapi_userinfo",
        WECHAT_UID_FIELD="openid",
        WECHAT_HTTP_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def wechat_env(monkeypatch):
    """Configure WeChat credentials through environment variables."""
    monkeypatch.setenv("WECHAT_APPID", TEST_APPID)
    monkeypatch.setenv("WECHAT_SECRET", TEST_SECRET)
    monkeypatch.setenv("WECHAT_REDIRECT_URI", TEST_REDIRECT_URI)
    monkeypatch.setenv("WECHAT_UID_FIELD", "openid")
    monkeypatch.setenv("WECHAT_DEFAULT_SCOPE", "snsapi_userinfo")
    get_wechat_settings.cache_clear()
    OAuthProviderFactory.clear_instances()

    yield

    get_wechat_settings.cache_clear()
    OAuthProviderFactory.clear_instances()


@pytest.fixture
def mock_http_client():
    """Mock aiohttp ClientSession for testing OAuth HTTP requests."""
    mock_response = MagicMock()
    mock_response.status = 200
    mock_response.json = AsyncMock(return_value={})
    mock_response.text = AsyncMock(return_value="")
    mock_response.__aenter__.return_value = mock_response
    mock_response.__aexit__.return_value = False

    mock_session = MagicMock()
    mock_session.__aenter__.return_value = mock_session
    mock_session.__aexit__.return_value = False
    mock_session.post = MagicMock(return_value=mock_response)
    mock_session.get = MagicMock(return_value=mock_response)

    with patch("wechat_auth.auth.wechat_oauth.aiohttp.ClientSession", return_value=mock_session) as session_class:
        yield {
            "session_class": session_class,
            "session": mock_session,
            "response": mock_response
        }
