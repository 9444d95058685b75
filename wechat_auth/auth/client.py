"""
OAuth Client Configuration Record

Holds everything needed to talk to the WeChat OAuth endpoints: the
endpoint URLs, the application credentials and the request parameters
and headers accumulated while a request is being prepared.

Design Considerations:
- Defaults merged with configured credentials and caller overrides
- Records are never mutated; every change returns a new client
- Unknown configuration keys are rejected early
"""

import logging
from typing import Dict, Any, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator

from wechat_auth.auth.token import AccessToken
from wechat_auth.config import WechatSettings, get_wechat_settings

logger = logging.getLogger(__name__)

# WeChat OAuth endpoints
DEFAULTS: Dict[str, Any] = {
    "site": "https://api.weixin.qq.com",
    "authorize_url": "https://open.weixin.qq.com/connect/oauth2/authorize",
    "qrcode_authorize_url": "https://open.weixin.qq.com/connect/qrconnect",
    "token_url": "https://api.weixin.qq.com/sns/oauth2/access_token",
    "refresh_token_url": "https://api.weixin.qq.com/sns/oauth2/refresh_token",
    "userinfo_url": "https://api.weixin.qq.com/sns/userinfo",
    "token_method": "post",
}


class OAuthClient(BaseModel):
    """
    Immutable OAuth2 client for WeChat requests.

    ``client_id`` and ``client_secret`` correspond to WeChat's ``appid`` and
    ``secret`` request parameters.
    """
    client_id: Optional[str] = None
    client_secret: Optional[SecretStr] = None
    redirect_uri: Optional[str] = None

    site: str
    authorize_url: str
    qrcode_authorize_url: str
    token_url: str
    refresh_token_url: str
    userinfo_url: str
    token_method: str = "post"

    params: Dict[str, Any] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    token: Optional[AccessToken] = None
    timeout: float = 10.0

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @field_validator("token_method")
    @classmethod
    def validate_token_method(cls, value: str) -> str:
        """Only GET and POST are accepted by the WeChat token endpoint."""
        value = value.lower()
        if value not in ("get", "post"):
            raise ValueError("token_method must be 'get' or 'post'")
        return value

    def put_param(self, key: str, value: Any) -> "OAuthClient":
        """Return a copy of the client with a request parameter set."""
        return self.model_copy(update={"params": {**self.params, key: value}})

    def merge_params(self, params: Optional[Dict[str, Any]]) -> "OAuthClient":
        """Return a copy of the client with several request parameters set."""
        if not params:
            return self
        return self.model_copy(update={"params": {**self.params, **params}})

    def put_header(self, key: str, value: str) -> "OAuthClient":
        """Return a copy of the client with a request header set."""
        return self.model_copy(update={"headers": {**self.headers, key: value}})

    def put_headers(self, headers: Optional[Dict[str, str]]) -> "OAuthClient":
        if not headers:
            return self
        return self.model_copy(update={"headers": {**self.headers, **headers}})

    def with_token(self, token: AccessToken) -> "OAuthClient":
        return self.model_copy(update={"token": token})

    @property
    def secret(self) -> Optional[str]:
        """Plain-text client secret, for request building only."""
        if self.client_secret is None:
            return None
        return self.client_secret.get_secret_value()

    def request_params(self) -> Dict[str, Any]:
        """Accumulated parameters with unset values dropped."""
        return {key: value for key, value in self.params.items() if value is not None}


def build_client(
    config: Optional[Dict[str, Any]] = None,
    settings: Optional[WechatSettings] = None
) -> OAuthClient:
    """
    Construct a client for requests to WeChat.

    Defaults are overlaid with the configured credentials and then with
    ``config``; later sources win.

    Args:
        config: Optional overrides for any OAuthClient field
        settings: WeChat settings, loaded from the environment when omitted

    Returns:
        Configured OAuthClient

    Raises:
        ValidationError: If config contains unknown keys or invalid values
    """
    settings = settings or get_wechat_settings()

    merged: Dict[str, Any] = dict(DEFAULTS)
    configured = {
        "client_id": settings.WECHAT_APPID,
        "client_secret": settings.WECHAT_SECRET,
        "redirect_uri": settings.WECHAT_REDIRECT_URI,
        "timeout": settings.WECHAT_HTTP_TIMEOUT_SECONDS,
    }
    merged.update({key: value for key, value in configured.items() if value is not None})
    merged.update(config or {})

    if not merged.get("client_id"):
        logger.warning("WeChat client built without an appid; set WECHAT_APPID")

    return OAuthClient(**merged)
