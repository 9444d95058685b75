"""
WeChat Provider Configuration

Loads WeChat application credentials and strategy options from the
environment (or a local .env file) with validation.

Design Considerations:
- Credentials never appear in logs or reprs
- Environment-driven configuration for deployment
- Safe defaults for non-secret options
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field, SecretStr, field_validator


class WechatSettings(BaseSettings):
    """
    WeChat OAuth settings.

    ``WECHAT_APPID`` and ``WECHAT_SECRET`` are the application credentials
    issued by the WeChat Open Platform; they map onto the OAuth2 client id
    and client secret.
    """
    WECHAT_APPID: Optional[str] = Field(
        default=None,
        description="WeChat application id (OAuth2 client id)"
    )
    WECHAT_SECRET: Optional[SecretStr] = Field(
        default=None,
        description="WeChat application secret (OAuth2 client secret)"
    )
    WECHAT_REDIRECT_URI: Optional[str] = Field(
        default=None,
        description="Default callback URL registered with WeChat"
    )
    WECHAT_DEFAULT_SCOPE: str = Field(
        default="snsapi_userinfo",
        description="Scope requested by the in-app authorize flow"
    )
    WECHAT_UID_FIELD: str = Field(
        default="openid",
        description="User identifier used as uid: openid or unionid"
    )
    WECHAT_HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Total timeout for calls to the WeChat API"
    )

    @field_validator("WECHAT_UID_FIELD")
    @classmethod
    def validate_uid_field(cls, value: str) -> str:
        """Restrict the uid field to identifiers WeChat returns."""
        if value not in ("openid", "unionid"):
            raise ValueError("WECHAT_UID_FIELD must be 'openid' or 'unionid'")
        return value

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }


@lru_cache()
def get_wechat_settings() -> WechatSettings:
    """Return the process-wide WeChat settings."""
    return WechatSettings()
