"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status

from comment_generator.config import settings
from comment_generator.handlers import CommentHandler
from comment_generator.log import get_logger
from comment_generator.protocols import ExpiringCache, VisionProvider
from comment_generator.repositories import (
    BaiduDishProvider,
    BaiduTokenIssuer,
    DeepSeekLanguageModel,
    HunyuanVisionProvider,
    InMemoryExpiringCache,
    RedisExpiringCache,
    SqlCommentRepository,
    WeChatClient,
    WeChatTokenIssuer,
)
from comment_generator.services import CategorySeeder, CredentialCache, GenerationService

logger = get_logger(__name__)


def get_handler(request: Request) -> CommentHandler:
    """Dependency injection for CommentHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CommentHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "comment_handler", None)
    if handler is None:
        raise RuntimeError("CommentHandler not initialized. Check lifespan setup.")
    return handler


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Resolve the calling user from the X-User-Id header.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"kind": "Unauthorized", "message": "X-User-Id header is required"},
        )
    return x_user_id.strip()


def build_cache() -> ExpiringCache:
    """Create the expiring cache selected by CACHE_BACKEND."""
    if settings.cache_backend == "redis":
        return RedisExpiringCache.create()
    return InMemoryExpiringCache.create()


def build_vision_provider(baidu_credentials: CredentialCache) -> VisionProvider:
    """Create the vision provider selected by VISION_PROVIDER."""
    if settings.vision_provider == "hunyuan":
        return HunyuanVisionProvider.create()
    return BaiduDishProvider.create(credentials=baidu_credentials)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Expiring cache shared by credentials and category lookups
    2. Credential caches (Baidu, WeChat) and vendor clients
    3. Repository (data access) - created explicitly
    4. Services (business logic)
    5. Handler (HTTP endpoints) - stored in app.state.comment_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Closes vendor HTTP clients and removes everything from app.state
    """
    cache = build_cache()

    baidu_issuer = BaiduTokenIssuer.create()
    wechat_issuer = WeChatTokenIssuer.create()
    baidu_credentials = CredentialCache(
        issuer=baidu_issuer, cache=cache, safety_margin=settings.baidu_token_margin
    )
    wechat_credentials = CredentialCache(
        issuer=wechat_issuer, cache=cache, safety_margin=settings.wechat_token_margin
    )

    vision = build_vision_provider(baidu_credentials)
    language_model = DeepSeekLanguageModel.create()
    repository = SqlCommentRepository.create()
    wechat = WeChatClient.create(credentials=wechat_credentials)

    generation_service = GenerationService.create(
        vision=vision,
        language_model=language_model,
        store=repository,
        cache=cache,
    )
    comment_handler = CommentHandler(
        generation_service=generation_service,
        store=repository,
        cache=cache,
        seeder=CategorySeeder(repository),
        wechat=wechat,
    )

    # Store in app.state (FastAPI pattern)
    app.state.cache = cache
    app.state.repository = repository
    app.state.generation_service = generation_service
    app.state.comment_handler = comment_handler

    logger.info("Comment generator initialized")
    logger.info("Vision provider: %s, language model: %s", vision.name, language_model.model_name)
    logger.info("Cache backend: %s, healthy: %s", settings.cache_backend, cache.health_check())
    if settings.vision_provider == "baidu" and not settings.baidu_configured:
        logger.warning("BAIDU_API_KEY / BAIDU_SECRET_KEY are not set, image recognition will fail")

    yield

    for client in (vision, language_model, wechat, baidu_issuer, wechat_issuer):
        await client.close()
    repository.engine.dispose()

    del app.state.comment_handler
    del app.state.generation_service
    del app.state.repository
    del app.state.cache
    logger.info("Comment generator shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CommentHandler, Depends(get_handler)]
UserIdDep = Annotated[str, Depends(get_user_id)]
