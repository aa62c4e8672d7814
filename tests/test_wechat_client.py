"""
Tests for the WeChat platform client.
"""

import httpx
import pytest

from comment_generator.errors import InvalidRequest, PlatformError
from comment_generator.repositories import WeChatClient


class StaticCredentials:
    """Credential cache stand-in with a fixed token."""

    def __init__(self) -> None:
        self.invalidated = 0

    async def get_token(self) -> str:
        return "wx-token"

    def invalidate(self) -> None:
        self.invalidated += 1


def client_for(handler, credentials=None) -> WeChatClient:
    return WeChatClient(
        credentials=credentials or StaticCredentials(),
        base_url="https://wx.example.com",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_get_phone_number():
    """Test the code is exchanged with the cached access token."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["body"] = request.content
        return httpx.Response(
            200,
            json={
                "errcode": 0,
                "errmsg": "ok",
                "phone_info": {"phoneNumber": "13800138000", "purePhoneNumber": "13800138000"},
            },
        )

    client = client_for(handler)
    phone = await client.get_phone_number("code-123")
    await client.close()

    assert phone == "13800138000"
    assert seen["path"] == "/wxa/business/getuserphonenumber"
    assert seen["params"] == {"access_token": "wx-token"}
    assert b"code-123" in seen["body"]


@pytest.mark.asyncio
async def test_empty_code_is_rejected():
    """Test a blank code is rejected before any request."""
    with pytest.raises(InvalidRequest):
        await client_for(lambda request: httpx.Response(200)).get_phone_number("  ")


@pytest.mark.asyncio
async def test_missing_phone_info_raises():
    """Test an answer without phone_info raises PlatformError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errcode": 40029, "errmsg": "invalid code"})

    with pytest.raises(PlatformError) as exc_info:
        await client_for(handler).get_phone_number("bad")
    assert exc_info.value.detail["errcode"] == 40029


@pytest.mark.asyncio
async def test_expired_token_is_invalidated():
    """Test an expired-token errcode drops the cached token."""
    credentials = StaticCredentials()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errcode": 42001, "errmsg": "access_token expired"})

    with pytest.raises(PlatformError):
        await client_for(handler, credentials).get_phone_number("code")
    assert credentials.invalidated == 1


@pytest.mark.asyncio
async def test_non_json_response_raises():
    """Test a non-JSON answer raises PlatformError with the raw body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(PlatformError) as exc_info:
        await client_for(handler).get_phone_number("code")
    assert exc_info.value.detail["body"] == "<html>gateway</html>"


@pytest.mark.asyncio
async def test_phone_info_without_number_raises():
    """Test phone_info lacking both number fields raises PlatformError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errcode": 0, "phone_info": {"countryCode": "86"}})

    with pytest.raises(PlatformError):
        await client_for(handler).get_phone_number("code")
