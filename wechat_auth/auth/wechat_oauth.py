"""
WeChat OAuth2 Implementation

Implements the WeChat variant of the OAuth2 authorization-code flow:
authorize URL construction, code exchange, token refresh and
authenticated API calls.

WeChat deviates from plain OAuth2 in a few places:
- ``appid`` / ``secret`` instead of ``client_id`` / ``client_secret``
- authorize URLs must end with the ``#wechat_redirect`` fragment
- errors come back as HTTP 200 with ``errcode`` / ``errmsg`` in the body
- JSON is served as ``text/plain``

Credentials are read from WECHAT_APPID and WECHAT_SECRET.
"""

import asyncio
import logging
from typing import Dict, Any, Optional
from urllib.parse import urlencode

import aiohttp

from wechat_auth.auth.client import OAuthClient, build_client
from wechat_auth.auth.errors import OAuthError
from wechat_auth.auth.token import AccessToken, parse_access_token
from wechat_auth.config import WechatSettings, get_wechat_settings

logger = logging.getLogger(__name__)

WECHAT_REDIRECT_FRAGMENT = "#wechat_redirect"

# Caller parameters may not replace these in authorize URLs
RESERVED_AUTHORIZE_PARAMS = ("appid", "response_type")


class WechatOAuth:
    """
    OAuth2 client operations for WeChat.

    Every operation accepts an optional ``config`` dictionary that is merged
    over the default endpoints and configured credentials, see
    :func:`wechat_auth.auth.client.build_client`.
    """

    def __init__(self, settings: Optional[WechatSettings] = None):
        self.settings = settings or get_wechat_settings()

    def client(self, config: Optional[Dict[str, Any]] = None) -> OAuthClient:
        """
        Construct a client for requests to WeChat.

        Args:
            config: Optional overrides, e.g. ``{"redirect_uri": "..."}``

        Returns:
            Configured OAuthClient
        """
        return build_client(config, self.settings)

    def authorize_url(
        self,
        params: Optional[Dict[str, Any]] = None,
        config: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Build the authorize URL for in-app (official account) login.

        Args:
            params: Extra query parameters such as scope and state
            config: Client overrides

        Returns:
            Authorize URL ending in ``#wechat_redirect``
        """
        client = self.client(config)
        return self._build_authorize_url(client.authorize_url, client, params)

    def qrcode_authorize_url(
        self,
        params: Optional[Dict[str, Any]] = None,
        config: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Build the authorize URL for website QR-code login.

        Same query as :meth:`authorize_url`, against the qrconnect endpoint.
        """
        client = self.client(config)
        return self._build_authorize_url(client.qrcode_authorize_url, client, params)

    def _build_authorize_url(
        self,
        base_url: str,
        client: OAuthClient,
        params: Optional[Dict[str, Any]]
    ) -> str:
        # WeChat rejects requests whose leading parameters are out of order
        client = (
            client
            .put_param("appid", client.client_id)
            .put_param("redirect_uri", client.redirect_uri)
            .put_param("response_type", "code")
        )
        extra = {
            key: value for key, value in (params or {}).items()
            if key not in RESERVED_AUTHORIZE_PARAMS
        }
        client = client.merge_params(extra)

        url = f"{base_url}?{urlencode(client.request_params())}{WECHAT_REDIRECT_FRAGMENT}"
        logger.debug(f"Generated WeChat authorize URL for appid: {client.client_id}")
        return url

    async def get_token(
        self,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        config: Optional[Dict[str, Any]] = None
    ) -> AccessToken:
        """
        Exchange an authorization code for an access token.

        Args:
            params: Must contain ``code`` unless one was put on the client
                through ``config["params"]``; remaining entries are sent
                along with the request
            headers: Extra request headers
            config: Client overrides

        Returns:
            Normalized AccessToken; WeChat errors are returned as an error
            token, not raised

        Raises:
            OAuthError: If the code is missing, the request fails or the
                response is malformed
        """
        params = dict(params or {})
        client = self.client(config)

        code = params.pop("code", None) or client.params.get("code")
        if not code:
            raise OAuthError(f"Missing required key `code` for `{type(self).__name__}`")

        client = (
            client
            .put_param("appid", client.client_id)
            .put_param("secret", client.secret)
            .put_param("code", code)
            .put_param("grant_type", "authorization_code")
            .put_param("redirect_uri", client.redirect_uri)
            .merge_params(params)
            .put_header("Accept", "application/json")
            .put_headers(headers)
        )

        body = await self._request_token(client)
        token = parse_access_token(body)

        if not token.is_error:
            logger.info(f"Exchanged authorization code for WeChat user: {token.open_id}")
        return token

    async def _request_token(self, client: OAuthClient) -> Dict[str, Any]:
        payload = client.request_params()
        timeout = aiohttp.ClientTimeout(total=client.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                if client.token_method == "get":
                    request = session.get(client.token_url, params=payload, headers=client.headers)
                else:
                    request = session.post(client.token_url, data=payload, headers=client.headers)

                async with request as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Failed to exchange code: HTTP {response.status} {error_text}")
                        raise OAuthError(f"Failed to exchange code: HTTP {response.status}")

                    # WeChat serves JSON as text/plain
                    body = await response.json(content_type=None)

        except OAuthError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Error exchanging code for token: {str(e)}")
            raise OAuthError(f"Failed to exchange code: {str(e)}") from e

        if not isinstance(body, dict):
            logger.error(f"Unexpected token response type: {type(body).__name__}")
            raise OAuthError("Failed to exchange code: unexpected response body")
        return body

    async def refresh_token(
        self,
        refresh_token: str,
        headers: Optional[Dict[str, str]] = None,
        config: Optional[Dict[str, Any]] = None
    ) -> AccessToken:
        """
        Refresh an access token.

        See https://mp.weixin.qq.com/wiki?t=resource/res_main&id=mp1421140842

        Args:
            refresh_token: Refresh token issued with the original access token
            headers: Extra request headers
            config: Client overrides

        Returns:
            Normalized AccessToken

        Raises:
            OAuthError: "Request Fail" on transport failure, non-200 status or a
                body that is not a JSON object
        """
        client = self.client(config)
        query = {
            "appid": client.client_id,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        url = f"{client.refresh_token_url}?{urlencode(query)}"
        timeout = aiohttp.ClientTimeout(total=client.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, headers=headers or {}) as response:
                    if response.status != 200:
                        logger.error(f"Failed to refresh token: HTTP {response.status}")
                        raise OAuthError("Request Fail")

                    body = await response.json(content_type=None)

        except OAuthError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Error refreshing access token: {str(e)}")
            raise OAuthError("Request Fail") from e

        if not isinstance(body, dict):
            logger.error(f"Unexpected refresh response type: {type(body).__name__}")
            raise OAuthError("Request Fail")

        token = parse_access_token(body)
        if not token.is_error:
            logger.info("Successfully refreshed WeChat access token")
        return token

    async def get(
        self,
        token: AccessToken,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        config: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Call a WeChat API endpoint on behalf of the token's user.

        ``access_token`` and ``openid`` are appended to the query string.

        Args:
            token: Token returned by get_token or refresh_token
            url: Endpoint URL
            headers: Extra request headers
            config: Client overrides

        Returns:
            Decoded JSON body

        Raises:
            OAuthError: If the token is an error token or malformed, or the
                call fails
        """
        if not isinstance(token, AccessToken):
            raise OAuthError("access token params error")
        if token.is_error:
            raise OAuthError(
                token.other_params["error_description"],
                token.other_params.get("error")
            )
        if not token.access_token:
            raise OAuthError("access token params error")

        client = (
            self.client(config)
            .with_token(token)
            .put_header("Authorization", f"Bearer {token.access_token}")
            .put_headers(headers)
        )

        query = {"access_token": token.access_token, "openid": token.open_id}
        query = {key: value for key, value in query.items() if value is not None}
        separator = "&" if "?" in url else "?"
        request_url = f"{url}{separator}{urlencode(query)}"
        timeout = aiohttp.ClientTimeout(total=client.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(request_url, headers=client.headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"WeChat API call failed: HTTP {response.status} {error_text}")
                        raise OAuthError(f"Request to {url} failed with status {response.status}")

                    body = await response.json(content_type=None)

        except OAuthError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Error calling WeChat API: {str(e)}")
            raise OAuthError(f"Request to {url} failed: {str(e)}") from e

        if not isinstance(body, dict):
            logger.error(f"Unexpected response type from {url}: {type(body).__name__}")
            raise OAuthError(f"Request to {url} returned an unexpected response body")

        errcode = body.get("errcode")
        if errcode not in (None, 0):
            logger.error(f"WeChat API returned error {errcode}: {body.get('errmsg')}")
            raise OAuthError(body.get("errmsg", "Unknown WeChat error"), f"error_{errcode}")

        return body

    async def get_user_info(
        self,
        token: AccessToken,
        lang: str = "zh_CN",
        config: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Fetch the user's profile from the sns/userinfo endpoint.

        Requires a token granted with the snsapi_userinfo or snsapi_login
        scope.
        """
        userinfo_url = self.client(config).userinfo_url
        user_info = await self.get(token, f"{userinfo_url}?{urlencode({'lang': lang})}", config=config)
        logger.debug(f"Retrieved WeChat user info for: {user_info.get('openid')}")
        return user_info
