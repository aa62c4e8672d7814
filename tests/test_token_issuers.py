"""
Tests for the vendor token issuers, using httpx mock transports.
"""

import httpx
import pytest

from comment_generator.errors import CredentialFetchFailed, CredentialUnavailable
from comment_generator.repositories import BaiduTokenIssuer, WeChatTokenIssuer


def baidu(handler) -> BaiduTokenIssuer:
    return BaiduTokenIssuer(
        api_key="ak",
        secret_key="sk",
        token_url="https://aip.example.com/oauth/2.0/token",
        transport=httpx.MockTransport(handler),
    )


def wechat(handler) -> WeChatTokenIssuer:
    return WeChatTokenIssuer(
        app_id="wx-app",
        app_secret="wx-secret",
        base_url="https://wx.example.com",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_baidu_issue_success():
    """Test the Baidu issuer sends client_credentials and reads expires_in."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"access_token": "24.abc", "expires_in": 2592000})

    issued = await baidu(handler).issue()

    assert issued.token == "24.abc"
    assert issued.ttl_seconds == 2592000
    assert seen["method"] == "POST"
    assert seen["params"] == {
        "grant_type": "client_credentials",
        "client_id": "ak",
        "client_secret": "sk",
    }


@pytest.mark.asyncio
async def test_baidu_issue_error_status():
    """Test a rejected issuance carries the upstream status and body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "invalid_client"})

    with pytest.raises(CredentialFetchFailed) as exc_info:
        await baidu(handler).issue()

    assert exc_info.value.provider == "baidu"
    assert exc_info.value.status == 401
    assert "invalid_client" in exc_info.value.body


@pytest.mark.asyncio
async def test_baidu_issue_network_error():
    """Test transport failures surface as CredentialFetchFailed without a status."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CredentialFetchFailed) as exc_info:
        await baidu(handler).issue()
    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_baidu_unconfigured():
    """Test missing secrets raise CredentialUnavailable without any request."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    issuer = BaiduTokenIssuer(api_key="", secret_key="", transport=httpx.MockTransport(handler))
    with pytest.raises(CredentialUnavailable):
        await issuer.issue()


@pytest.mark.asyncio
async def test_wechat_issue_success():
    """Test the WeChat issuer calls /cgi-bin/token with app credentials."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"access_token": "wx-token", "expires_in": 7200})

    issuer = wechat(handler)
    issued = await issuer.issue()
    await issuer.close()

    assert issued.token == "wx-token"
    assert issued.ttl_seconds == 7200
    assert seen["path"] == "/cgi-bin/token"
    assert seen["params"]["appid"] == "wx-app"
    assert seen["params"]["grant_type"] == "client_credential"


@pytest.mark.asyncio
async def test_wechat_errcode_with_200_fails():
    """Test an errcode body without a token is a failed issuance."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errcode": 40013, "errmsg": "invalid appid"})

    with pytest.raises(CredentialFetchFailed) as exc_info:
        await wechat(handler).issue()

    assert exc_info.value.provider == "wechat"
    assert exc_info.value.status == 200
    assert "40013" in exc_info.value.body


@pytest.mark.asyncio
async def test_wechat_unconfigured():
    """Test missing app credentials raise CredentialUnavailable."""
    with pytest.raises(CredentialUnavailable):
        await WeChatTokenIssuer(app_id="", app_secret="").issue()
