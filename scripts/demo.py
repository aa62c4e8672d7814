#!/usr/bin/env python3
"""
Demo script for the comment generator.

Generates reviews against the configured vendors using a throwaway
in-memory database. Needs DEEPSEEK_API_KEY, plus BAIDU_API_KEY and
BAIDU_SECRET_KEY (or VISION_PROVIDER=hunyuan and HUNYUAN_API_KEY) for the
image demo.
"""

import asyncio
import sys

from comment_generator.config import settings
from comment_generator.entities import GenerationRequest
from comment_generator.errors import CommentGeneratorError
from comment_generator.repositories import (
    BaiduDishProvider,
    BaiduTokenIssuer,
    DeepSeekLanguageModel,
    HunyuanVisionProvider,
    InMemoryExpiringCache,
    SqlCommentRepository,
)
from comment_generator.services import CredentialCache, GenerationService
from comment_generator.services.tone import TONE_DESCRIPTIONS

SAMPLE_IMAGE = "https://upload.wikimedia.org/wikipedia/commons/6/60/Sushi_platter.jpg"


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_keyword(service: GenerationService) -> None:
    """Generate the same keyword review in every tone."""
    print_section("Keyword Reviews by Tone")

    for tone in TONE_DESCRIPTIONS:
        comment = await service.generate(
            GenerationRequest(
                user_id="demo",
                target_words=80,
                category_name="美食",
                keyword="北京烤鸭",
                tone=tone,
            )
        )
        print(f"\n[{tone}] ({len(comment.content)} chars)")
        print(f"  {comment.content}")


async def demo_image(service: GenerationService, image_url: str) -> None:
    """Recognize a dish photo and review it."""
    print_section("Image Review")

    analysis = await service.analyze_images([image_url])
    print(f"\nRecognized: {', '.join(analysis.labels)} -> {analysis.category.name}")

    comment = await service.generate(
        GenerationRequest(user_id="demo", target_words=150, images=[image_url], tone="热情")
    )
    print(f"\n{comment.content}")


async def main() -> None:
    """Run all demos."""
    print("\n🚀 Comment Generator Demo")
    print("=" * 70)
    print(f"Language model: {settings.llm_model} @ {settings.llm_base_url}")
    print(f"Vision provider: {settings.vision_provider}")

    cache = InMemoryExpiringCache.create()
    baidu_issuer = BaiduTokenIssuer.create()
    if settings.vision_provider == "hunyuan":
        vision = HunyuanVisionProvider.create()
    else:
        vision = BaiduDishProvider.create(
            credentials=CredentialCache(baidu_issuer, cache, settings.baidu_token_margin)
        )
    language_model = DeepSeekLanguageModel.create()
    repository = SqlCommentRepository.create("sqlite://")
    repository.upsert_category(
        name=settings.food_category_name, keyword=settings.food_category_keyword
    )

    service = GenerationService.create(
        vision=vision, language_model=language_model, store=repository, cache=cache
    )

    try:
        await demo_keyword(service)
        await demo_image(service, sys.argv[1] if len(sys.argv) > 1 else SAMPLE_IMAGE)

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except CommentGeneratorError as e:
        print(f"\n❌ {e.kind}: {e.message}")
        print("\nCheck DEEPSEEK_API_KEY and the vision provider credentials in .env")
    finally:
        await vision.close()
        await language_model.close()
        await baidu_issuer.close()


if __name__ == "__main__":
    asyncio.run(main())
