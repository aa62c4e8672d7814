"""OpenAI-compatible chat completion language model.

Defaults to DeepSeek's hosted API. The API key is static and long-lived,
so it is read from settings directly rather than through a credential cache.
"""

import httpx

from comment_generator.config import settings
from comment_generator.errors import GenerationUpstreamError


class DeepSeekLanguageModel:
    """Chat completion implementation of LanguageModel protocol.

    This class satisfies the LanguageModel protocol through structural
    typing - no explicit inheritance needed.

    The client has no timeout of its own: the caller bounds the call and
    cancels it, which aborts the in-flight request.

    Example:
        ```python
        model = DeepSeekLanguageModel.create()
        text = await model.complete("You write reviews.", "Write one.", 0.85, 300)
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the language model client.

        Args:
            api_key: Bearer API key. Defaults to settings.
            model_name: Chat model name. Defaults to settings.
            base_url: API base URL. Defaults to settings.
            transport: Optional httpx transport (for tests).
        """
        self._api_key = api_key if api_key is not None else settings.llm_api_key
        self._model_name = model_name or settings.llm_model
        self._base_url = (base_url or settings.llm_base_url).rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "DeepSeekLanguageModel":
        """Factory method to create DeepSeekLanguageModel with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            base_url: API base URL. If None, uses settings.

        Returns:
            Configured DeepSeekLanguageModel
        """
        return cls(model_name=model_name, base_url=base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=None, transport=self._transport)
        return self._client

    @property
    def model_name(self) -> str:
        return self._model_name

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Generate text for the given instructions.

        Args:
            system_prompt: The system instruction
            user_prompt: The user instruction
            temperature: Sampling temperature
            max_tokens: Output token budget

        Returns:
            The generated text as returned by the model

        Raises:
            GenerationUpstreamError: If the request fails or the response is malformed
        """
        payload = {
            "model": self._model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        try:
            response = await self.client.post(
                f"{self._base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self._api_key or ''}"},
                json=payload,
            )
        except httpx.HTTPError as e:
            raise GenerationUpstreamError(None, str(e)) from e

        if response.is_error:
            raise GenerationUpstreamError(response.status_code, response.text)

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationUpstreamError(response.status_code, response.text) from e

        return content or ""

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
