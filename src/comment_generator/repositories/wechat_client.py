"""WeChat mini program platform client."""

import httpx

from comment_generator.config import settings
from comment_generator.errors import InvalidRequest, PlatformError
from comment_generator.log import get_logger
from comment_generator.services.credentials import CredentialCache

logger = get_logger(__name__)

# Platform error codes meaning the access token is invalid or expired
TOKEN_ERROR_CODES = {40001, 42001}


class WeChatClient:
    """Calls platform APIs that need the mini program access token."""

    def __init__(
        self,
        credentials: CredentialCache,
        base_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._base_url = (base_url or settings.wechat_base_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(cls, credentials: CredentialCache) -> "WeChatClient":
        return cls(credentials=credentials)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def get_phone_number(self, code: str) -> str:
        """Exchange a phone-number authorization code for the user's number.

        Args:
            code: The code returned by the mini program's phone button

        Returns:
            The phone number

        Raises:
            InvalidRequest: If code is empty
            CredentialUnavailable: If the app credentials are not configured
            CredentialFetchFailed: If the access token cannot be issued
            PlatformError: If the platform rejects the exchange
        """
        if not code or not code.strip():
            raise InvalidRequest("code is required")

        token = await self._credentials.get_token()
        try:
            response = await self.client.post(
                f"{self._base_url}/wxa/business/getuserphonenumber",
                params={"access_token": token},
                json={"code": code},
            )
        except httpx.HTTPError as e:
            raise PlatformError(f"Phone number request failed: {e}") from e

        if response.is_error:
            raise PlatformError(
                "Phone number request failed",
                detail={"status": response.status_code, "body": response.text},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise PlatformError(
                "Phone number response is not JSON",
                detail={"status": response.status_code, "body": response.text},
            ) from e
        if not isinstance(data, dict):
            raise PlatformError("Unexpected phone number response", detail=data)

        phone_info = data.get("phone_info")
        if not phone_info:
            if data.get("errcode") in TOKEN_ERROR_CODES:
                self._credentials.invalidate()
            logger.error("Phone number exchange failed: %s", data)
            raise PlatformError("Failed to obtain phone number", detail=data)

        phone = phone_info.get("phoneNumber") or phone_info.get("purePhoneNumber")
        if not phone:
            raise PlatformError("Phone number missing from response", detail=data)
        return str(phone)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
