"""
Authentication Result Models

Provider-agnostic shapes handed to the authentication pipeline once a
callback has been processed.
"""

from datetime import datetime
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Token material obtained from the provider."""
    token: str = Field(
        ...,
        description="Access token"
    )
    refresh_token: Optional[str] = Field(
        default=None,
        description="Refresh token"
    )
    token_type: str = Field(
        default="Bearer",
        description="Token type"
    )
    expires: bool = Field(
        default=False,
        description="Whether the access token expires"
    )
    expires_at: Optional[datetime] = Field(
        default=None,
        description="Access token expiry"
    )
    scopes: List[str] = Field(
        default=[],
        description="Granted scopes"
    )


class Info(BaseModel):
    """User profile information normalized from the provider."""
    name: Optional[str] = None
    nickname: Optional[str] = None
    image: Optional[str] = None
    location: Optional[str] = None


class Extra(BaseModel):
    raw_info: Dict[str, Any] = Field(
        default_factory=dict,
        description="Unprocessed token parameters and user payload"
    )


class AuthResult(BaseModel):
    """
    Outcome of a successful callback phase.

    ``uid`` is the WeChat openid or unionid depending on configuration.
    """
    provider: str = Field(
        ...,
        description="Strategy name"
    )
    uid: str = Field(
        ...,
        description="Stable user identifier"
    )
    credentials: Credentials
    info: Info = Field(default_factory=Info)
    extra: Extra = Field(default_factory=Extra)
