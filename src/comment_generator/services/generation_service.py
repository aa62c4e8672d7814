"""Review generation service.

This service orchestrates one generation end to end: validation, parallel
image recognition, category resolution, prompting, the time-bounded
language model call and the transactional write.
"""

import asyncio
import math
import sys
from enum import Enum
from typing import Any

from comment_generator.config import settings
from comment_generator.entities import (
    CategoryEntity,
    GeneratedCommentEntity,
    GenerationRequest,
    ImageAnalysis,
    ImageRef,
    RecognitionResult,
)
from comment_generator.errors import (
    CategoryNotFound,
    CommentGeneratorError,
    GenerationEmptyOutput,
    GenerationTimeout,
    InvalidRequest,
    NoSubjectRecognized,
)
from comment_generator.log import get_logger
from comment_generator.protocols import CommentStore, ExpiringCache, LanguageModel, VisionProvider
from comment_generator.services.prompts import SYSTEM_PROMPT, build_prompt, max_tokens_for

logger = get_logger(__name__)


class GenerationState(str, Enum):
    """Steps of a single generation."""

    VALIDATING = "validating"
    RECOGNIZING_IMAGES = "recognizing_images"
    RESOLVING_CATEGORY = "resolving_category"
    PROMPTING = "prompting"
    GENERATING = "generating"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


def clamp_target_words(
    value: float,
    minimum: int | None = None,
    maximum: int | None = None,
    default: int | None = None,
) -> int:
    """Round a target length and clamp it into [minimum, maximum].

    Non-finite values (NaN, infinity) fall back to the default.
    """
    minimum = minimum if minimum is not None else settings.min_target_words
    maximum = maximum if maximum is not None else settings.max_target_words
    default = default if default is not None else settings.default_target_words

    if not math.isfinite(value):
        return default
    return max(minimum, min(maximum, round(value)))


def _parse_target_words(value: Any) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidRequest("target_words is required and must be a number")
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            # Finite but beyond float range, clamped like any other length
            return sys.float_info.max if value > 0 else -sys.float_info.max
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    raise InvalidRequest("target_words is required and must be a number")


class GenerationService:
    """Core review generation service.

    This service depends on PROTOCOLS, not concrete implementations:
    - VisionProvider: Baidu dish recognition, Hunyuan multimodal, ...
    - LanguageModel: any OpenAI-compatible chat completion endpoint
    - CommentStore: SQL database with transactional writes
    - ExpiringCache: memoizes category lookups

    Example:
        ```python
        service = GenerationService.create(
            vision=BaiduDishProvider.create(credentials=baidu_credentials),
            language_model=DeepSeekLanguageModel.create(),
            store=SqlCommentRepository.create(),
            cache=InMemoryExpiringCache.create(),
        )
        comment = await service.generate(request)
        ```
    """

    def __init__(
        self,
        vision: VisionProvider,
        language_model: LanguageModel,
        store: CommentStore,
        cache: ExpiringCache,
        timeout: float | None = None,
        temperature: float | None = None,
        category_cache_ttl: int | None = None,
    ) -> None:
        """Initialize the generation service.

        Args:
            vision: Image recognition provider (required).
            language_model: Text generation provider (required).
            store: Comment and category storage (required).
            cache: Shared expiring cache (required).
            timeout: Seconds allowed for the language model call. Defaults to settings.
            temperature: Sampling temperature. Defaults to settings.
            category_cache_ttl: Seconds category lookups are memoized. Defaults to settings.
        """
        self._vision = vision
        self._llm = language_model
        self._store = store
        self._cache = cache
        self._timeout = timeout or settings.generation_timeout
        self._temperature = temperature if temperature is not None else settings.llm_temperature
        self._category_ttl = (
            category_cache_ttl if category_cache_ttl is not None else settings.category_cache_ttl
        )

    @classmethod
    def create(
        cls,
        vision: VisionProvider,
        language_model: LanguageModel,
        store: CommentStore,
        cache: ExpiringCache,
        timeout: float | None = None,
    ) -> "GenerationService":
        """Factory method to create GenerationService with settings defaults."""
        return cls(
            vision=vision,
            language_model=language_model,
            store=store,
            cache=cache,
            timeout=timeout,
        )

    async def generate(self, request: GenerationRequest) -> GeneratedCommentEntity:
        """Generate, persist and return one review.

        Business logic:
        1. Validate the request and clamp the target length
        2. Recognize every image concurrently (if any were supplied)
        3. Resolve the category
        4. Build the prompt
        5. Call the language model within the timeout
        6. Create the comment and bump the category counter atomically

        Args:
            request: The generation request

        Returns:
            The persisted comment

        Raises:
            CommentGeneratorError: One subclass per failure kind; nothing is
                persisted when any step fails
        """
        state = GenerationState.VALIDATING
        try:
            self._log_state(request, state)
            words = self._validate(request)

            labels: list[str] = []
            if request.images:
                state = GenerationState.RECOGNIZING_IMAGES
                self._log_state(request, state)
                labels = await self._recognize_labels(request.images)

            state = GenerationState.RESOLVING_CATEGORY
            self._log_state(request, state)
            if labels:
                category = self._resolve_food_category()
            else:
                category = self._resolve_request_category(request)

            state = GenerationState.PROMPTING
            self._log_state(request, state)
            prompt = build_prompt(
                category_name=category.name,
                words=words,
                labels=labels,
                keyword=request.keyword,
                reference=request.reference_text,
                tone=request.tone,
            )

            state = GenerationState.GENERATING
            self._log_state(request, state)
            content = await self._complete(prompt, words)

            state = GenerationState.PERSISTING
            self._log_state(request, state)
            with self._store.transaction() as uow:
                comment = uow.create_comment(
                    user_id=request.user_id,
                    category_id=category.id,
                    category_name=category.name,
                    content=content,
                    target_words=words,
                )
                uow.increment_category_usage(category.id)
        except CommentGeneratorError as e:
            logger.warning(
                "Generation for user %s failed while %s: %s %s",
                request.user_id,
                state.value,
                e.kind,
                e.message,
            )
            raise

        self._log_state(request, GenerationState.DONE)
        logger.info(
            "Generated comment %s for user %s in category %s", comment.id, request.user_id, category.id
        )
        return comment

    async def analyze_images(self, images: list[ImageRef]) -> ImageAnalysis:
        """Recognize dishes on images without generating a review.

        Args:
            images: Raw image bytes or URLs

        Returns:
            The recognized labels and the food category

        Raises:
            InvalidRequest: If no images were supplied
            NoSubjectRecognized: If no image yielded a label
            CategoryNotFound: If the food category is not configured
        """
        if not images:
            raise InvalidRequest("At least one image is required")
        labels = await self._recognize_labels(images)
        return ImageAnalysis(labels=labels, category=self._resolve_food_category())

    def _validate(self, request: GenerationRequest) -> int:
        if not request.user_id:
            raise InvalidRequest("user_id is required")

        words = _parse_target_words(request.target_words)

        has_text = bool((request.keyword or "").strip() or (request.reference_text or "").strip())
        if not request.images and not has_text:
            raise InvalidRequest("Either images or a keyword/reference text is required")

        return clamp_target_words(words)

    async def _recognize_labels(self, images: list[ImageRef]) -> list[str]:
        """Recognize all images concurrently, keeping each success independently."""
        outcomes = await asyncio.gather(
            *(self._vision.recognize(image) for image in images),
            return_exceptions=True,
        )

        labels: list[str] = []
        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                logger.error("Recognition of image %d raised: %r", index, outcome)
                continue
            if isinstance(outcome, RecognitionResult) and outcome.has_label:
                if outcome.label not in labels:
                    labels.append(outcome.label)

        logger.info("Recognized %d label(s) on %d image(s): %s", len(labels), len(images), labels)
        if not labels:
            raise NoSubjectRecognized("No dish was recognized, please upload a clearer photo")
        return labels

    def _find_category_cached(self, by: str, value: Any, **lookup: Any) -> CategoryEntity | None:
        key = f"category:{by}:{value}"
        cached = self._cache.get(key)
        if cached is not None:
            return CategoryEntity(**cached)

        category = self._store.find_category(**lookup)
        if category is not None:
            # use_count is volatile, only the identity is memoized
            self._cache.set(
                key,
                {
                    "id": category.id,
                    "name": category.name,
                    "keyword": category.keyword,
                    "parent_id": category.parent_id,
                },
                ttl=self._category_ttl,
            )
        return category

    def _resolve_food_category(self) -> CategoryEntity:
        name = settings.food_category_name
        keyword = settings.food_category_keyword
        category = self._find_category_cached(
            "food", f"{name}|{keyword}", name=name, keyword=keyword
        )
        if category is None:
            raise CategoryNotFound(f"Category {name!r} ({keyword}) is not configured")
        return category

    def _resolve_request_category(self, request: GenerationRequest) -> CategoryEntity:
        category = None
        if request.category_id is not None:
            category = self._find_category_cached(
                "id", request.category_id, category_id=request.category_id
            )
        elif request.category_name:
            category = self._find_category_cached(
                "name", request.category_name, name=request.category_name
            )
        else:
            raise InvalidRequest("category_id or category_name is required without images")

        if category is None:
            raise CategoryNotFound(
                f"Category {request.category_id or request.category_name!r} does not exist"
            )
        return category

    async def _complete(self, prompt: str, words: int) -> str:
        """Call the language model, cancelling it when the timeout fires."""
        try:
            text = await asyncio.wait_for(
                self._llm.complete(
                    system_prompt=SYSTEM_PROMPT,
                    user_prompt=prompt,
                    temperature=self._temperature,
                    max_tokens=max_tokens_for(words),
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise GenerationTimeout(
                f"Language model did not answer within {self._timeout:g}s, please retry later"
            ) from e

        content = (text or "").strip()
        if not content:
            raise GenerationEmptyOutput("Language model returned an empty review")
        return content

    @staticmethod
    def _log_state(request: GenerationRequest, state: GenerationState) -> None:
        logger.debug("Generation for user %s: %s", request.user_id, state.value)

    @property
    def vision(self) -> VisionProvider:
        """Get the underlying vision provider (for testing)."""
        return self._vision

    @property
    def store(self) -> CommentStore:
        """Get the underlying store (for testing)."""
        return self._store
