"""
WeChat OAuth2 strategy components.
"""

from wechat_auth.auth.client import OAuthClient, build_client, DEFAULTS
from wechat_auth.auth.errors import OAuthError
from wechat_auth.auth.models import AuthResult, Credentials, Info, Extra
from wechat_auth.auth.oauth_base import OAuthProvider
from wechat_auth.auth.oauth_factory import (
    OAuthProviderFactory,
    ProviderConfigurationError,
    ProviderNotRegisteredError,
)
from wechat_auth.auth.strategy import WechatStrategy
from wechat_auth.auth.token import AccessToken, parse_access_token
from wechat_auth.auth.wechat_oauth import WechatOAuth

__all__ = [
    "OAuthClient",
    "build_client",
    "DEFAULTS",
    "OAuthError",
    "AuthResult",
    "Credentials",
    "Info",
    "Extra",
    "OAuthProvider",
    "OAuthProviderFactory",
    "ProviderConfigurationError",
    "ProviderNotRegisteredError",
    "WechatStrategy",
    "AccessToken",
    "parse_access_token",
    "WechatOAuth",
]
