"""
Shared fixtures for the comment generator tests.
"""

import asyncio

import pytest

from comment_generator.entities import ImageRef, RecognitionResult
from comment_generator.repositories import InMemoryExpiringCache, SqlCommentRepository
from comment_generator.services import GenerationService


class FakeClock:
    """Manually advanced Unix clock."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeVision:
    """Vision provider answering from a table of image -> label.

    Images mapped to an Exception instance raise it; unmapped images
    recognize nothing.
    """

    name = "fake"

    def __init__(self, labels: dict | None = None) -> None:
        self.labels = labels or {}
        self.calls: list[ImageRef] = []

    async def recognize(self, image: ImageRef) -> RecognitionResult | None:
        self.calls.append(image)
        outcome = self.labels.get(image)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return None
        return RecognitionResult(source=image, label=outcome, confidence=0.9)


class FakeLanguageModel:
    """Language model returning a canned reply, optionally after a delay."""

    model_name = "fake-model"

    def __init__(self, reply: str = "这家店的味道非常地道，值得再来。", delay: float = 0.0) -> None:
        self.reply = reply
        self.delay = delay
        self.error: Exception | None = None
        self.calls: list[dict] = []
        self.cancelled = False

    async def complete(
        self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int
    ) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return self.reply


@pytest.fixture
def clock():
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Create an in-memory cache driven by the fake clock."""
    return InMemoryExpiringCache(clock=clock)


@pytest.fixture
def repository():
    """Create an in-memory SQLite repository with the food category (id 1)."""
    repository = SqlCommentRepository.create("sqlite://")
    repository.upsert_category(name="美食", keyword="food")
    repository.upsert_category(name="亲子", keyword="family")
    yield repository
    repository.engine.dispose()


@pytest.fixture
def vision():
    return FakeVision()


@pytest.fixture
def language_model():
    return FakeLanguageModel()


@pytest.fixture
def service(vision, language_model, repository, cache):
    """Create a generation service over fakes and the SQLite repository."""
    return GenerationService(
        vision=vision,
        language_model=language_model,
        store=repository,
        cache=cache,
        timeout=1.0,
        temperature=0.85,
        category_cache_ttl=300,
    )
