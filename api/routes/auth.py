"""
Authentication API Routes

Exposes registered provider strategies as login endpoints:
the request phase redirects the user to the provider, the callback phase
exchanges the returned code, and a refresh endpoint renews tokens.

Provider failures surface as OAuthError and are rendered as 400 responses
by the global exception handlers.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from api.models.auth import AvailableProvidersResponse, RefreshTokenRequest, TokenResponse
from wechat_auth.auth.models import AuthResult
from wechat_auth.auth.oauth_base import OAuthProvider
from wechat_auth.auth.oauth_factory import OAuthProviderFactory, ProviderNotRegisteredError

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_oauth_provider(provider: str) -> OAuthProvider:
    """
    Resolve the strategy named in the request path.

    Strategy creation failures are left to the general exception handler,
    which answers 500 without exposing configuration details.

    Raises:
        HTTPException: 404 if no strategy is registered under that name
    """
    try:
        return OAuthProviderFactory.get_provider(provider)
    except ProviderNotRegisteredError as e:
        logger.warning(f"Unknown OAuth provider requested: {provider}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get(
    "/providers",
    response_model=AvailableProvidersResponse,
    summary="Get available OAuth providers"
)
async def get_available_providers():
    """
    List registered OAuth providers with their display names.
    """
    providers = OAuthProviderFactory.get_available_providers()
    return AvailableProvidersResponse(providers=providers)


@router.get(
    "/{provider}",
    summary="Start OAuth login",
    response_class=RedirectResponse
)
async def request_phase(
    redirect_uri: Optional[str] = Query(default=None, description="Callback URL override"),
    scope: Optional[str] = Query(default=None, description="Requested scope"),
    state: Optional[str] = Query(default=None, description="Opaque value echoed on callback"),
    qrcode: bool = Query(default=False, description="Use the QR-code login page"),
    oauth_provider: OAuthProvider = Depends(get_oauth_provider)
):
    """
    Redirect the user to the provider's authorization page.

    Returns:
        Redirect to the authorization URL
    """
    authorization_url = oauth_provider.handle_request(
        redirect_uri=redirect_uri,
        scope=scope,
        state=state,
        qrcode=qrcode
    )

    logger.info(f"Redirecting to {oauth_provider.provider_name} authorization (qrcode={qrcode})")
    return RedirectResponse(url=authorization_url)


@router.get(
    "/{provider}/callback",
    response_model=AuthResult,
    summary="Handle OAuth callback"
)
async def callback_phase(
    code: Optional[str] = Query(default=None, description="Authorization code"),
    redirect_uri: Optional[str] = Query(default=None, description="Redirect URI used in the request phase"),
    oauth_provider: OAuthProvider = Depends(get_oauth_provider)
):
    """
    Exchange the authorization code and return the authenticated identity.

    WeChat omits ``code`` when the user declines authorization.

    Returns:
        Authentication result with uid, credentials and profile info
    """
    result = await oauth_provider.handle_callback(code, redirect_uri)

    logger.info(f"Successfully processed {oauth_provider.provider_name} callback for uid: {result.uid}")
    return result


@router.post(
    "/{provider}/refresh",
    response_model=TokenResponse,
    summary="Refresh an access token"
)
async def refresh_token(
    request: RefreshTokenRequest,
    oauth_provider: OAuthProvider = Depends(get_oauth_provider)
):
    """
    Obtain a new access token using a refresh token.

    Returns:
        Normalized access token
    """
    token = await oauth_provider.refresh(request.refresh_token)

    logger.info(f"Refreshed {oauth_provider.provider_name} access token")
    return TokenResponse.from_token(token)
