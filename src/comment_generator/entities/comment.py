"""Comment generation domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .recognition import ImageRef


@dataclass(frozen=True)
class CategoryEntity:
    """A review category with its usage counter.

    Attributes:
        id: Primary key
        name: Unique display name (e.g. "美食")
        keyword: Stable machine keyword (e.g. "food")
        parent_id: Parent category for nested trees
        use_count: Number of successful generations in this category
    """

    id: int
    name: str
    keyword: str | None = None
    parent_id: int | None = None
    icon: str | None = None
    active_icon: str | None = None
    use_count: int = 0


@dataclass(frozen=True)
class GeneratedCommentEntity:
    """A persisted generated review."""

    id: int
    user_id: str
    category_id: int
    category_name: str
    content: str
    target_words: int
    is_template: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class GenerationRequest:
    """Caller-supplied input of a single generation.

    ``target_words`` is deliberately loose: it is validated and clamped once
    by the generation service.
    """

    user_id: str
    target_words: Any
    category_id: int | None = None
    category_name: str | None = None
    keyword: str | None = None
    reference_text: str | None = None
    tone: str | None = None
    images: list[ImageRef] = field(default_factory=list)


@dataclass(frozen=True)
class ImageAnalysis:
    """Outcome of recognizing a batch of images."""

    labels: list[str]
    category: CategoryEntity
