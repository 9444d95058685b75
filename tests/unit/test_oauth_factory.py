import pytest

from wechat_auth.auth.oauth_base import OAuthProvider
from wechat_auth.auth.oauth_factory import (
    OAuthProviderFactory,
    ProviderConfigurationError,
    ProviderNotRegisteredError,
)
from wechat_auth.auth.strategy import WechatStrategy
from wechat_auth.auth.token import AccessToken
from wechat_auth.config import get_wechat_settings


class MockOAuthProvider(OAuthProvider):
    @property
    def provider_name(self):
        return "mock"

    def handle_request(self, redirect_uri=None, scope=None, state=None, qrcode=False):
        return "https://mock.auth/url"

    async def handle_callback(self, code, redirect_uri=None):
        return None

    async def refresh(self, refresh_token):
        return AccessToken(access_token="new_mock_token")


class TestOAuthFactory:
    """Test OAuth provider factory implementation."""

    @pytest.mark.usefixtures("wechat_env")
    def test_get_available_providers(self):
        providers = OAuthProviderFactory.get_available_providers()

        assert providers["wechat"] == "WeChat"

    @pytest.mark.usefixtures("wechat_env")
    def test_get_provider(self):
        provider = OAuthProviderFactory.get_provider("wechat")

        assert isinstance(provider, WechatStrategy)
        assert OAuthProviderFactory.get_provider("wechat") is provider

    @pytest.mark.usefixtures("wechat_env")
    def test_get_invalid_provider(self):
        with pytest.raises(ProviderNotRegisteredError):
            OAuthProviderFactory.get_provider("invalid_provider")

        assert not OAuthProviderFactory.is_registered("invalid_provider")

    @pytest.mark.usefixtures("wechat_env")
    def test_register_provider(self):
        OAuthProviderFactory.register_provider("mock", MockOAuthProvider)
        try:
            mock_provider = OAuthProviderFactory.get_provider("mock")

            assert isinstance(mock_provider, MockOAuthProvider)
            assert mock_provider.provider_name == "mock"
            assert OAuthProviderFactory.get_available_providers()["mock"] == "Mock"

            with pytest.raises(ValueError):
                OAuthProviderFactory.register_provider("mock", MockOAuthProvider)
        finally:
            OAuthProviderFactory.unregister_provider("mock")

        assert "mock" not in OAuthProviderFactory.get_available_providers()

    @pytest.mark.usefixtures("wechat_env")
    def test_provider_creation_failure(self):
        class BrokenProvider(MockOAuthProvider):
            def __init__(self):
                raise RuntimeError("boom")

        OAuthProviderFactory.register_provider("broken", BrokenProvider, display_name="Broken")
        try:
            with pytest.raises(ProviderConfigurationError) as exc_info:
                OAuthProviderFactory.get_provider("broken")

            assert "boom" in str(exc_info.value)
            assert isinstance(exc_info.value.__cause__, RuntimeError)
            assert "broken" not in OAuthProviderFactory._instances
        finally:
            OAuthProviderFactory.unregister_provider("broken")

    def test_invalid_settings_raise_configuration_error(self, wechat_env, monkeypatch):
        monkeypatch.setenv("WECHAT_UID_FIELD", "nickname")
        get_wechat_settings.cache_clear()

        with pytest.raises(ProviderConfigurationError):
            OAuthProviderFactory.get_provider("wechat")

        assert OAuthProviderFactory.is_registered("wechat")
