"""Comment Generator - review writing from dish photos and keywords.

This package provides a layered architecture for review generation:

Layers:
    - protocols: Interface contracts (ExpiringCache, VisionProvider, LanguageModel, ...)
    - repositories: Data access and vendor implementations
    - services: Business logic (generation pipeline, credentials, seeding)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from comment_generator.repositories import (
        DeepSeekLanguageModel,
        HunyuanVisionProvider,
        InMemoryExpiringCache,
        SqlCommentRepository,
    )
    from comment_generator.services import GenerationService

    service = GenerationService.create(
        vision=HunyuanVisionProvider.create(),
        language_model=DeepSeekLanguageModel.create(),
        store=SqlCommentRepository.create(),
        cache=InMemoryExpiringCache.create(),
    )
    ```

For HTTP API:
    ```python
    from comment_generator.api.app import app
    ```
"""

from comment_generator.config import get_redis_client, settings
from comment_generator.dto import GenerateCommentRequest
from comment_generator.entities import CategoryEntity, GeneratedCommentEntity, GenerationRequest
from comment_generator.errors import CommentGeneratorError
from comment_generator.handlers import CommentHandler
from comment_generator.protocols import (
    CommentStore,
    ExpiringCache,
    LanguageModel,
    TokenIssuer,
    VisionProvider,
)
from comment_generator.repositories import InMemoryExpiringCache, SqlCommentRepository
from comment_generator.services import CredentialCache, GenerationService

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Errors
    "CommentGeneratorError",
    # Protocols (interfaces)
    "CommentStore",
    "ExpiringCache",
    "LanguageModel",
    "TokenIssuer",
    "VisionProvider",
    # Services (business logic)
    "CredentialCache",
    "GenerationService",
    # Handlers (HTTP)
    "CommentHandler",
    # Repositories (data access)
    "InMemoryExpiringCache",
    "SqlCommentRepository",
    # Entities (domain models)
    "CategoryEntity",
    "GeneratedCommentEntity",
    "GenerationRequest",
    # DTOs (API contracts)
    "GenerateCommentRequest",
]
