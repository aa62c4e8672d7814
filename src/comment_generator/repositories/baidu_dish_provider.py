"""Baidu dish recognition provider.

Uses Baidu AI Cloud's dish classifier to name the dish on a photo. Access
tokens come from a CredentialCache; the static API key/secret pair never
leaves the token issuer.

Recognition is best-effort: every failure path is logged and returns None
so that one bad image never aborts a batch.
"""

import base64

import httpx

from comment_generator.config import settings
from comment_generator.entities import ImageRef, RecognitionResult
from comment_generator.errors import CredentialFetchFailed, CredentialUnavailable
from comment_generator.log import get_logger
from comment_generator.services.credentials import CredentialCache

logger = get_logger(__name__)

# Baidu error codes meaning the access token is invalid or expired
TOKEN_ERROR_CODES = {110, 111}


class BaiduDishProvider:
    """Baidu implementation of VisionProvider protocol.

    This class satisfies the VisionProvider protocol through structural
    typing - no explicit inheritance needed.

    The classifier is asked for the top-K candidates with a server-side
    ``filter_threshold``; only the first candidate is used, and it is
    dropped when its probability is under ``min_confidence`` or when it is
    the non-subject sentinel ("非菜").

    Example:
        ```python
        provider = BaiduDishProvider.create(credentials=baidu_credentials)
        result = await provider.recognize("https://example.com/dish.jpg")
        if result:
            print(result.label, result.confidence)
        ```
    """

    name = "baidu"

    def __init__(
        self,
        credentials: CredentialCache,
        endpoint: str | None = None,
        top_k: int | None = None,
        filter_threshold: float | None = None,
        min_confidence: float | None = None,
        non_subject_label: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Baidu dish provider.

        Args:
            credentials: Token cache for the Baidu provider.
            endpoint: Dish classification URL. Defaults to settings.
            top_k: Number of candidates requested. Defaults to settings.
            filter_threshold: Server-side confidence filter. Defaults to settings.
            min_confidence: Client-side minimum for the top candidate. Defaults to settings.
            non_subject_label: Label meaning "not a dish". Defaults to settings.
            timeout: Request timeout in seconds. Defaults to settings.
            transport: Optional httpx transport (for tests).
        """
        self._credentials = credentials
        self._endpoint = endpoint or settings.baidu_dish_url
        self._top_k = top_k or settings.vision_top_k
        self._filter_threshold = (
            filter_threshold if filter_threshold is not None else settings.vision_filter_threshold
        )
        self._min_confidence = (
            min_confidence if min_confidence is not None else settings.vision_min_confidence
        )
        self._non_subject_label = non_subject_label or settings.vision_non_subject_label
        self._timeout = timeout or settings.image_fetch_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(cls, credentials: CredentialCache) -> "BaiduDishProvider":
        """Factory method to create BaiduDishProvider with defaults.

        Args:
            credentials: Token cache for the Baidu provider.

        Returns:
            Configured BaiduDishProvider
        """
        return cls(credentials=credentials)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def recognize(self, image: ImageRef) -> RecognitionResult | None:
        """Recognize the dish on an image.

        Args:
            image: Raw image bytes or a fetchable URL

        Returns:
            RecognitionResult with the dish name, or None
        """
        try:
            if isinstance(image, str):
                data = await self._fetch(image)
                if data is None:
                    return None
            else:
                data = image
            return await self._classify(image, data)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Dish recognition failed")
            return None

    async def _fetch(self, url: str) -> bytes | None:
        """Download image bytes, returning None on any failure."""
        try:
            response = await self.client.get(url, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.error("Failed to download image %s: %s", url, e)
            return None

        if response.is_error:
            logger.error(
                "Failed to download image %s: %s %s", url, response.status_code, response.text
            )
            return None
        return response.content

    async def _classify(self, source: ImageRef, data: bytes) -> RecognitionResult | None:
        try:
            token = await self._credentials.get_token()
        except CredentialUnavailable as e:
            logger.warning("Skipping dish recognition: %s", e.message)
            return None
        except CredentialFetchFailed as e:
            logger.error("Skipping dish recognition: %s %s", e.message, e.detail)
            return None

        response = await self.client.post(
            self._endpoint,
            params={"access_token": token},
            data={
                "image": base64.b64encode(data).decode("ascii"),
                "top_num": str(self._top_k),
                "filter_threshold": str(self._filter_threshold),
            },
        )
        if response.is_error:
            logger.error(
                "Dish recognition request failed: %s %s", response.status_code, response.text
            )
            return None

        payload = response.json()
        if "error_code" in payload:
            logger.error(
                "Dish recognition error %s: %s", payload["error_code"], payload.get("error_msg")
            )
            if payload["error_code"] in TOKEN_ERROR_CODES:
                self._credentials.invalidate()
            return None

        return self._parse(source, payload)

    def _parse(self, source: ImageRef, payload: dict) -> RecognitionResult | None:
        """Turn the classifier payload into a result, applying the confidence policy."""
        candidates = payload.get("result") or []
        if not candidates:
            return None

        first = candidates[0]
        label = str(first.get("name") or "").strip()
        probability = first.get("probability")
        confidence = float(probability) if probability is not None else None

        if not label or label == self._non_subject_label:
            return None
        if confidence is not None and confidence < self._min_confidence:
            logger.debug("Dropping %s with confidence %.2f", label, confidence)
            return None

        return RecognitionResult(source=source, label=label, confidence=confidence)

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
