"""
WeChat Authentication Strategy

Connects the WeChat OAuth operations to the authentication pipeline:
builds the request-phase redirect and turns a callback code into an
AuthResult carrying credentials and normalized profile information.

Design Considerations:
- All provider I/O delegated to WechatOAuth
- Profile lookup skipped for snsapi_base grants, which WeChat refuses
- uid taken from openid or unionid per configuration
"""

import logging
from typing import Dict, Any, Optional

from wechat_auth.auth.errors import OAuthError
from wechat_auth.auth.models import AuthResult, Credentials, Info, Extra
from wechat_auth.auth.oauth_base import OAuthProvider
from wechat_auth.auth.token import AccessToken
from wechat_auth.auth.wechat_oauth import WechatOAuth
from wechat_auth.config import WechatSettings, get_wechat_settings

logger = logging.getLogger(__name__)

QRCODE_SCOPE = "snsapi_login"
BASE_SCOPE = "snsapi_base"


class WechatStrategy(OAuthProvider):
    """
    WeChat provider strategy.

    Uses the official-account authorize page inside the WeChat client and
    the qrconnect page for website logins.
    """

    def __init__(
        self,
        oauth: Optional[WechatOAuth] = None,
        settings: Optional[WechatSettings] = None
    ):
        self.settings = settings or get_wechat_settings()
        self.oauth = oauth or WechatOAuth(self.settings)
        self.uid_field = self.settings.WECHAT_UID_FIELD

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "wechat"

    def handle_request(
        self,
        redirect_uri: Optional[str] = None,
        scope: Optional[str] = None,
        state: Optional[str] = None,
        qrcode: bool = False
    ) -> str:
        if not scope:
            scope = QRCODE_SCOPE if qrcode else self.settings.WECHAT_DEFAULT_SCOPE

        config = {"redirect_uri": redirect_uri} if redirect_uri else None
        params = {"scope": scope, "state": state}

        if qrcode:
            return self.oauth.qrcode_authorize_url(params, config)
        return self.oauth.authorize_url(params, config)

    async def handle_callback(self, code: Optional[str], redirect_uri: Optional[str] = None) -> AuthResult:
        if not code:
            raise OAuthError("No code received", "missing_code")

        config = {"redirect_uri": redirect_uri} if redirect_uri else None
        token = await self.oauth.get_token({"code": code}, config=config)

        if token.is_error:
            raise OAuthError(
                token.other_params["error_description"],
                token.other_params.get("error")
            )
        if not token.access_token:
            raise OAuthError("access token params error")

        scopes = self._scopes(token)
        user_info: Dict[str, Any] = {}
        if scopes and all(scope == BASE_SCOPE for scope in scopes):
            logger.debug("Token granted with snsapi_base only; skipping user info")
        else:
            user_info = await self.oauth.get_user_info(token, config=config)

        uid = self._uid(token, user_info)
        if not uid:
            raise OAuthError(f"WeChat response did not include {self.uid_field}", "missing_uid")

        logger.info(f"WeChat callback processed for uid: {uid}")
        return AuthResult(
            provider=self.provider_name,
            uid=uid,
            credentials=self._credentials(token, scopes),
            info=self._info(user_info),
            extra=Extra(raw_info={"token": token.other_params, "user": user_info}),
        )

    async def refresh(self, refresh_token: str) -> AccessToken:
        token = await self.oauth.refresh_token(refresh_token)
        if token.is_error:
            raise OAuthError(
                token.other_params["error_description"],
                token.other_params.get("error")
            )
        if not token.access_token:
            raise OAuthError("access token params error")
        return token

    def _uid(self, token: AccessToken, user_info: Dict[str, Any]) -> Optional[str]:
        if self.uid_field == "unionid":
            return user_info.get("unionid") or token.unionid
        return token.open_id or user_info.get("openid")

    @staticmethod
    def _scopes(token: AccessToken) -> list:
        scope = token.other_params.get("scope") or ""
        return [item.strip() for item in scope.split(",") if item.strip()]

    @staticmethod
    def _credentials(token: AccessToken, scopes: list) -> Credentials:
        return Credentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_type=token.token_type,
            expires=token.expires_at is not None,
            expires_at=token.expires_at,
            scopes=scopes,
        )

    @staticmethod
    def _info(user_info: Dict[str, Any]) -> Info:
        location_parts = [
            user_info.get(key) for key in ("country", "province", "city")
            if user_info.get(key)
        ]
        return Info(
            name=user_info.get("nickname"),
            nickname=user_info.get("nickname"),
            image=user_info.get("headimgurl") or None,
            location=", ".join(location_parts) or None,
        )
