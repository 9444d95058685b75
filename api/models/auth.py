"""
Authentication API Models

Request and response bodies for the provider login endpoints.
"""

from datetime import datetime
from typing import Dict, Optional, Any

from pydantic import BaseModel, Field

from wechat_auth.auth.token import AccessToken


class AvailableProvidersResponse(BaseModel):
    """Registered providers keyed by name."""
    providers: Dict[str, str] = Field(
        ...,
        description="Provider names mapped to display names"
    )


class RefreshTokenRequest(BaseModel):
    """Body of the token refresh endpoint."""
    refresh_token: str = Field(
        ...,
        min_length=1,
        description="Refresh token issued with the access token"
    )


class TokenResponse(BaseModel):
    """
    Normalized access token returned to API clients.
    """
    access_token: str = Field(
        ...,
        description="Provider access token"
    )
    refresh_token: Optional[str] = Field(
        default=None,
        description="Provider refresh token"
    )
    token_type: str = Field(
        default="Bearer",
        description="Token type"
    )
    expires_at: Optional[datetime] = Field(
        default=None,
        description="Access token expiry"
    )
    other_params: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific fields"
    )

    @classmethod
    def from_token(cls, token: AccessToken) -> "TokenResponse":
        return cls(
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            token_type=token.token_type,
            expires_at=token.expires_at,
            other_params=token.other_params,
        )
