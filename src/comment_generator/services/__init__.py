"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access / Vendors)

Usage:
    ```python
    from comment_generator.services import GenerationService

    service = GenerationService.create(
        vision=vision, language_model=model, store=store, cache=cache
    )
    comment = await service.generate(request)
    ```
"""

from .category_seeder import CategorySeeder
from .credentials import CredentialCache
from .generation_service import GenerationService, GenerationState, clamp_target_words
from .prompts import SYSTEM_PROMPT, build_prompt
from .tone import normalize_tone

__all__ = [
    "CategorySeeder",
    "CredentialCache",
    "GenerationService",
    "GenerationState",
    "SYSTEM_PROMPT",
    "build_prompt",
    "clamp_target_words",
    "normalize_tone",
]
