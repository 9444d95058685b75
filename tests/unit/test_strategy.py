import pytest
from unittest.mock import AsyncMock

from wechat_auth.auth.errors import OAuthError
from wechat_auth.auth.strategy import WechatStrategy
from wechat_auth.auth.token import AccessToken, parse_access_token
from wechat_auth.auth.wechat_oauth import WechatOAuth
from wechat_auth.config import WechatSettings

from tests.conftest import TEST_APPID, TEST_SECRET

TOKEN_BODY = {
    "access_token": "ACCESS_TOKEN",
    "expires_in": 7200,
    "refresh_token": "REFRESH_TOKEN",
    "openid": "OPENID",
    "scope": "snsapi_userinfo",
    "unionid": "UNIONID"
}

USER_BODY = {
    "openid": "OPENID",
    "nickname": "Tester",
    "sex": 1,
    "province": "Guangdong",
    "city": "Shenzhen",
    "country": "CN",
    "headimgurl": "https://thirdwx.qlogo.cn/mmopen/avatar/132",
    "privilege": [],
    "unionid": "UNIONID"
}


@pytest.fixture
def mock_oauth(wechat_settings):
    oauth = WechatOAuth(wechat_settings)
    oauth.get_token = AsyncMock(return_value=parse_access_token(TOKEN_BODY))
    oauth.get_user_info = AsyncMock(return_value=dict(USER_BODY))
    oauth.refresh_token = AsyncMock()
    return oauth


@pytest.fixture
def strategy(mock_oauth, wechat_settings):
    return WechatStrategy(oauth=mock_oauth, settings=wechat_settings)


class TestRequestPhase:
    """Test the request phase redirect URL."""

    def test_default_scope(self, wechat_settings):
        strategy = WechatStrategy(settings=wechat_settings)

        url = strategy.handle_request(state="abc")

        assert url.startswith("https://open.weixin.qq.com/connect/oauth2/authorize?")
        assert "scope=snsapi_userinfo" in url
        assert "state=abc" in url
        assert url.endswith("#wechat_redirect")

    def test_qrcode_uses_login_scope(self, wechat_settings):
        strategy = WechatStrategy(settings=wechat_settings)

        url = strategy.handle_request(qrcode=True)

        assert url.startswith("https://open.weixin.qq.com/connect/qrconnect?")
        assert "scope=snsapi_login" in url

    def test_explicit_scope_and_redirect(self, wechat_settings):
        strategy = WechatStrategy(settings=wechat_settings)

        url = strategy.handle_request(redirect_uri="http://localhost:4000/cb", scope="snsapi_base")

        assert "redirect_uri=http%3A%2F%2Flocalhost%3A4000%2Fcb" in url
        assert "scope=snsapi_base" in url

    def test_provider_name(self, strategy):
        assert strategy.provider_name == "wechat"


class TestCallbackPhase:
    """Test turning a callback code into an AuthResult."""

    @pytest.mark.asyncio
    async def test_handle_callback(self, strategy, mock_oauth):
        result = await strategy.handle_callback("CODE")

        mock_oauth.get_token.assert_awaited_once_with({"code": "CODE"}, config=None)
        mock_oauth.get_user_info.assert_awaited_once()

        assert result.provider == "wechat"
        assert result.uid == "OPENID"
        assert result.credentials.token == "ACCESS_TOKEN"
        assert result.credentials.refresh_token == "REFRESH_TOKEN"
        assert result.credentials.expires is True
        assert result.credentials.scopes == ["snsapi_userinfo"]
        assert result.info.nickname == "Tester"
        assert result.info.name == "Tester"
        assert result.info.image == USER_BODY["headimgurl"]
        assert result.info.location == "CN, Guangdong, Shenzhen"
        assert result.extra.raw_info["user"]["unionid"] == "UNIONID"
        assert result.extra.raw_info["token"]["open_id"] == "OPENID"

    @pytest.mark.asyncio
    async def test_redirect_uri_passed_through(self, strategy, mock_oauth):
        await strategy.handle_callback("CODE", redirect_uri="http://localhost:4000/cb")

        mock_oauth.get_token.assert_awaited_once_with(
            {"code": "CODE"},
            config={"redirect_uri": "http://localhost:4000/cb"}
        )

    @pytest.mark.asyncio
    async def test_base_scope_skips_user_info(self, strategy, mock_oauth):
        mock_oauth.get_token.return_value = parse_access_token({
            "access_token": "ACCESS_TOKEN",
            "expires_in": 7200,
            "openid": "OPENID",
            "scope": "snsapi_base"
        })

        result = await strategy.handle_callback("CODE")

        mock_oauth.get_user_info.assert_not_awaited()
        assert result.uid == "OPENID"
        assert result.info.nickname is None
        assert result.info.location is None

    @pytest.mark.asyncio
    async def test_error_token_raises(self, strategy, mock_oauth):
        mock_oauth.get_token.return_value = parse_access_token({"errcode": 40163, "errmsg": "code been used"})

        with pytest.raises(OAuthError) as exc_info:
            await strategy.handle_callback("USED")

        assert exc_info.value.reason == "code been used"
        assert exc_info.value.error_code == "error_40163"
        mock_oauth.get_user_info.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_code(self, strategy, mock_oauth):
        with pytest.raises(OAuthError) as exc_info:
            await strategy.handle_callback(None)

        assert exc_info.value.error_code == "missing_code"
        mock_oauth.get_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unionid_uid(self, mock_oauth):
        settings = WechatSettings(
            WECHAT_APPID=TEST_APPID,
            WECHAT_SECRET=TEST_SECRET,
            WECHAT_UID_FIELD="unionid"
        )
        strategy = WechatStrategy(oauth=mock_oauth, settings=settings)

        result = await strategy.handle_callback("CODE")

        assert result.uid == "UNIONID"

    @pytest.mark.asyncio
    async def test_missing_uid(self, strategy, mock_oauth):
        mock_oauth.get_token.return_value = parse_access_token({
            "access_token": "ACCESS_TOKEN",
            "scope": "snsapi_userinfo"
        })
        mock_oauth.get_user_info.return_value = {"nickname": "Tester"}

        with pytest.raises(OAuthError) as exc_info:
            await strategy.handle_callback("CODE")

        assert exc_info.value.error_code == "missing_uid"


class TestRefresh:
    """Test token refresh through the strategy."""

    @pytest.mark.asyncio
    async def test_refresh(self, strategy, mock_oauth):
        mock_oauth.refresh_token.return_value = AccessToken(access_token="NEW_ACCESS_TOKEN")

        token = await strategy.refresh("REFRESH_TOKEN")

        mock_oauth.refresh_token.assert_awaited_once_with("REFRESH_TOKEN")
        assert token.access_token == "NEW_ACCESS_TOKEN"

    @pytest.mark.asyncio
    async def test_refresh_error_raises(self, strategy, mock_oauth):
        mock_oauth.refresh_token.return_value = parse_access_token(
            {"errcode": 42002, "errmsg": "refresh_token expired"}
        )

        with pytest.raises(OAuthError) as exc_info:
            await strategy.refresh("STALE")

        assert exc_info.value.reason == "refresh_token expired"


def test_invalid_uid_field_rejected():
    with pytest.raises(ValueError):
        WechatSettings(WECHAT_UID_FIELD="nickname")
