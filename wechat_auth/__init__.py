"""
WeChat OAuth2 strategy package.

Provides authorize URL building, code exchange, token refresh and response
normalization for authenticating users through WeChat.
"""

from wechat_auth.auth import (
    AccessToken,
    AuthResult,
    OAuthError,
    OAuthProviderFactory,
    WechatOAuth,
    WechatStrategy,
)

__version__ = '1.0.0'

__all__ = [
    'AccessToken',
    'AuthResult',
    'OAuthError',
    'OAuthProviderFactory',
    'WechatOAuth',
    'WechatStrategy',
]
