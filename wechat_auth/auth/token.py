"""
Access Token Model and Normalization

Maps WeChat's token endpoint payloads onto a provider-agnostic access
token record consumed by the authentication pipeline.

WeChat reports failures inside a normal JSON body using ``errcode`` and
``errmsg`` instead of the OAuth2 ``error`` fields, and names the user
identifier ``openid``. Both quirks are absorbed here.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

from pydantic import BaseModel, Field

from wechat_auth.auth.errors import OAuthError

logger = logging.getLogger(__name__)


class AccessToken(BaseModel):
    """
    Normalized OAuth2 access token.

    Error payloads are represented as a token without ``access_token`` whose
    ``other_params`` carry ``error`` and ``error_description``.
    """
    access_token: Optional[str] = Field(
        default=None,
        description="Credential for calls made on behalf of the user"
    )
    refresh_token: Optional[str] = Field(
        default=None,
        description="Credential used to obtain a new access token"
    )
    expires_at: Optional[datetime] = Field(
        default=None,
        description="UTC instant after which the access token is invalid"
    )
    token_type: str = Field(
        default="Bearer",
        description="Token type"
    )
    other_params: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific fields (scope, open_id, unionid, error)"
    )

    @property
    def is_error(self) -> bool:
        """Return True if this token represents a provider error."""
        return "error_description" in self.other_params

    @property
    def open_id(self) -> Optional[str]:
        return self.other_params.get("open_id")

    @property
    def unionid(self) -> Optional[str]:
        return self.other_params.get("unionid")

    @property
    def expired(self) -> bool:
        """Return True if the token has an expiry that is in the past."""
        if self.expires_at is None:
            return False
        return self.expires_at <= datetime.now(timezone.utc)


def parse_access_token(body: Dict[str, Any]) -> AccessToken:
    """
    Normalize a decoded WeChat token response.

    Args:
        body: JSON body returned by the access_token or refresh_token endpoint

    Returns:
        AccessToken describing either the issued token or the provider error

    Raises:
        OAuthError: If the body is not a JSON object or expires_in is not a number
    """
    if not isinstance(body, dict):
        raise OAuthError(f"Unexpected token response: expected a JSON object, got {type(body).__name__}")

    if "errcode" in body and "errmsg" in body:
        logger.warning(f"WeChat returned error {body['errcode']}: {body['errmsg']}")
        return AccessToken(
            other_params={
                "error": f"error_{body['errcode']}",
                "error_description": body["errmsg"],
            }
        )

    expires_at = None
    if body.get("expires_in") is not None:
        try:
            expires_in = int(body["expires_in"])
        except (TypeError, ValueError) as e:
            raise OAuthError(f"Invalid expires_in in token response: {body['expires_in']!r}") from e
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)

    return AccessToken(
        access_token=body.get("access_token"),
        refresh_token=body.get("refresh_token"),
        expires_at=expires_at,
        token_type="Bearer",
        other_params={
            "scope": body.get("scope"),
            "open_id": body.get("openid"),
            "unionid": body.get("unionid"),
        },
    )
