"""Tencent Hunyuan multimodal vision provider.

Asks a multimodal chat model to describe a food photo as strict JSON and
uses its ``dishName`` as the label. The endpoint is OpenAI-compatible and
authenticates with a static bearer key, so no credential cache is needed.
"""

import base64
import json

import httpx

from comment_generator.config import settings
from comment_generator.entities import ImageRef, RecognitionResult
from comment_generator.log import get_logger

logger = get_logger(__name__)

ANALYSIS_PROMPT = """
你是一名大众点评美食图片分析助手。我会给你一张餐饮相关的图片，请你根据图片，严格输出一段 JSON，包含以下字段：

- dishName: 图片里最主要的菜品名称（例如"西红柿炒蛋"、"宫保鸡丁"、"寿司拼盘"等，若无法判断请填 null）
- envSummary: 用一两句话概括就餐环境和氛围
- scenes: 适合的人群或场景，比如"适合朋友聚餐"、"适合一家人周末来吃"

要求：
1. 可以做合理推断，但不要凭空编造明显不存在的细节。
2. 严格输出 JSON，不要在 JSON 前后添加任何多余文字、注释或解释。
3. 字段名必须是 dishName、envSummary、scenes。
"""


class HunyuanVisionProvider:
    """Hunyuan implementation of VisionProvider protocol.

    This class satisfies the VisionProvider protocol through structural
    typing - no explicit inheritance needed.

    The model reports no confidence, so results carry ``confidence=None``.
    """

    name = "hunyuan"

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
        non_subject_label: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Hunyuan vision provider.

        Args:
            api_key: Hunyuan API key. Defaults to settings.
            model_name: Multimodal model name. Defaults to settings.
            base_url: OpenAI-compatible API base URL. Defaults to settings.
            non_subject_label: Label meaning "not a dish". Defaults to settings.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (for tests).
        """
        self._api_key = api_key if api_key is not None else settings.hunyuan_api_key
        self._model_name = model_name or settings.hunyuan_vision_model
        self._base_url = (base_url or settings.hunyuan_base_url).rstrip("/")
        self._non_subject_label = non_subject_label or settings.vision_non_subject_label
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(cls) -> "HunyuanVisionProvider":
        """Factory method to create HunyuanVisionProvider from settings."""
        return cls()

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    @staticmethod
    def _image_url(image: ImageRef) -> str:
        if isinstance(image, str):
            return image
        return "data:image/jpeg;base64," + base64.b64encode(image).decode("ascii")

    async def recognize(self, image: ImageRef) -> RecognitionResult | None:
        """Ask the model for the main dish on an image.

        Args:
            image: Raw image bytes or a fetchable URL

        Returns:
            RecognitionResult with the dish name, or None
        """
        if not self._api_key:
            logger.warning("HUNYUAN_API_KEY is not configured, skipping image analysis")
            return None

        payload = {
            "model": self._model_name,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": ANALYSIS_PROMPT},
                        {"type": "image_url", "image_url": {"url": self._image_url(image)}},
                    ],
                }
            ],
            "temperature": 0.3,
            "max_tokens": 512,
        }

        try:
            response = await self.client.post(
                f"{self._base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self._api_key}"},
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error("Hunyuan image analysis request failed: %s", e)
            return None

        if response.is_error:
            logger.error(
                "Hunyuan image analysis request failed: %s %s",
                response.status_code,
                response.text,
            )
            return None

        try:
            content = response.json()["choices"][0]["message"]["content"].strip()
        except (ValueError, KeyError, IndexError, TypeError, AttributeError):
            logger.error("Unexpected Hunyuan response: %s", response.text)
            return None

        return self._parse(image, content)

    def _parse(self, source: ImageRef, content: str) -> RecognitionResult | None:
        # Models sometimes wrap JSON in a markdown fence
        if content.startswith("```"):
            content = content.strip("`")
            content = content.removeprefix("json").strip()

        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            logger.warning("Hunyuan did not return JSON: %s", content)
            return None

        if not isinstance(data, dict):
            return None

        dish = data.get("dishName")
        label = str(dish).strip() if dish is not None else ""
        if not label or label == self._non_subject_label:
            return None

        return RecognitionResult(source=source, label=label, confidence=None)

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
