"""Vendor credential endpoints.

Each issuer exchanges a vendor's static secrets for a short-lived access
token. Caching and refresh-ahead live in ``services.credentials``; issuers
are stateless apart from their HTTP client.
"""

import httpx

from comment_generator.config import settings
from comment_generator.errors import CredentialFetchFailed, CredentialUnavailable
from comment_generator.protocols import IssuedToken


class _HttpIssuer:
    """Shared HTTP client handling for issuers."""

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class BaiduTokenIssuer(_HttpIssuer):
    """OAuth client_credentials issuer for Baidu AI Cloud.

    Baidu tokens live for 30 days; the endpoint answers with
    ``{"access_token": ..., "expires_in": ...}`` or an error payload.
    """

    provider = "baidu"

    def __init__(
        self,
        api_key: str | None = None,
        secret_key: str | None = None,
        token_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the issuer.

        Args:
            api_key: Baidu API key. Defaults to settings.
            secret_key: Baidu secret key. Defaults to settings.
            token_url: OAuth token endpoint. Defaults to settings.
            transport: Optional httpx transport (for tests).
        """
        super().__init__(transport=transport)
        self._api_key = api_key if api_key is not None else settings.baidu_api_key
        self._secret_key = secret_key if secret_key is not None else settings.baidu_secret_key
        self._token_url = token_url or settings.baidu_token_url

    @classmethod
    def create(cls) -> "BaiduTokenIssuer":
        """Factory method to create BaiduTokenIssuer from settings."""
        return cls()

    async def issue(self) -> IssuedToken:
        if not self._api_key or not self._secret_key:
            raise CredentialUnavailable("BAIDU_API_KEY / BAIDU_SECRET_KEY are not configured")

        try:
            response = await self.client.post(
                self._token_url,
                params={
                    "grant_type": "client_credentials",
                    "client_id": self._api_key,
                    "client_secret": self._secret_key,
                },
            )
        except httpx.HTTPError as e:
            raise CredentialFetchFailed(self.provider, None, str(e)) from e

        if response.is_error:
            raise CredentialFetchFailed(self.provider, response.status_code, response.text)

        data = response.json()
        token = data.get("access_token")
        if not token:
            raise CredentialFetchFailed(self.provider, response.status_code, response.text)

        return IssuedToken(token=token, ttl_seconds=int(data.get("expires_in") or 2592000))


class WeChatTokenIssuer(_HttpIssuer):
    """client_credential issuer for the WeChat mini program platform.

    WeChat reports failures with HTTP 200 and an ``errcode`` body, so a
    missing ``access_token`` is treated as a failed issuance.
    """

    provider = "wechat"

    def __init__(
        self,
        app_id: str | None = None,
        app_secret: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the issuer.

        Args:
            app_id: Mini program app id. Defaults to settings.
            app_secret: Mini program app secret. Defaults to settings.
            base_url: Platform API base URL. Defaults to settings.
            transport: Optional httpx transport (for tests).
        """
        super().__init__(transport=transport)
        self._app_id = app_id if app_id is not None else settings.wechat_app_id
        self._app_secret = app_secret if app_secret is not None else settings.wechat_app_secret
        self._base_url = (base_url or settings.wechat_base_url).rstrip("/")

    @classmethod
    def create(cls) -> "WeChatTokenIssuer":
        """Factory method to create WeChatTokenIssuer from settings."""
        return cls()

    async def issue(self) -> IssuedToken:
        if not self._app_id or not self._app_secret:
            raise CredentialUnavailable("WECHAT_APP_ID / WECHAT_APP_SECRET are not configured")

        try:
            response = await self.client.get(
                f"{self._base_url}/cgi-bin/token",
                params={
                    "grant_type": "client_credential",
                    "appid": self._app_id,
                    "secret": self._app_secret,
                },
            )
        except httpx.HTTPError as e:
            raise CredentialFetchFailed(self.provider, None, str(e)) from e

        if response.is_error:
            raise CredentialFetchFailed(self.provider, response.status_code, response.text)

        data = response.json()
        token = data.get("access_token")
        if not token:
            raise CredentialFetchFailed(self.provider, response.status_code, response.text)

        return IssuedToken(token=token, ttl_seconds=int(data.get("expires_in") or 7200))
