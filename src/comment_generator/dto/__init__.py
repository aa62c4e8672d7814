"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import AnalyzeImagesRequest, GenerateCommentRequest, PhoneNumberRequest
from .responses import (
    CategoryResponse,
    CommentListResponse,
    CommentResponse,
    DeleteCommentResponse,
    HealthCheckResponse,
    ImageAnalysisResponse,
    PhoneNumberResponse,
    SeedCategoriesResponse,
)

__all__ = [
    "AnalyzeImagesRequest",
    "GenerateCommentRequest",
    "PhoneNumberRequest",
    "CategoryResponse",
    "CommentListResponse",
    "CommentResponse",
    "DeleteCommentResponse",
    "HealthCheckResponse",
    "ImageAnalysisResponse",
    "PhoneNumberResponse",
    "SeedCategoriesResponse",
]
