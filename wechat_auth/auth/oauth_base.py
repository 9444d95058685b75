"""
Base OAuth Strategy

Defines the abstract interface every provider strategy exposes to the
authentication pipeline: a request phase that sends the user to the
provider, a callback phase that turns the returned code into an
authentication result, and token refresh.
"""

from abc import ABC, abstractmethod
from typing import Optional

from wechat_auth.auth.models import AuthResult
from wechat_auth.auth.token import AccessToken


class OAuthProvider(ABC):
    """
    Abstract base class for provider strategies.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this OAuth provider."""
        pass

    @abstractmethod
    def handle_request(
        self,
        redirect_uri: Optional[str] = None,
        scope: Optional[str] = None,
        state: Optional[str] = None,
        qrcode: bool = False
    ) -> str:
        """
        Build the URL the user is redirected to for authorization.

        Args:
            redirect_uri: Callback URL; the configured one when omitted
            scope: Requested scope; the strategy default when omitted
            state: Opaque value echoed back on the callback
            qrcode: Use the provider's QR-code login page when supported

        Returns:
            Authorization URL
        """
        pass

    @abstractmethod
    async def handle_callback(self, code: Optional[str], redirect_uri: Optional[str] = None) -> AuthResult:
        """
        Exchange the callback code and collect the user's identity.

        Args:
            code: Authorization code from the provider, None when the user declined
            redirect_uri: Redirect URI used in the authorization request

        Returns:
            Authentication result

        Raises:
            OAuthError: If the provider rejects the code or a call fails
        """
        pass

    @abstractmethod
    async def refresh(self, refresh_token: str) -> AccessToken:
        """
        Refresh an expired access token.

        Args:
            refresh_token: Refresh token to use

        Returns:
            New access token
        """
        pass
