"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class CommentResponse(BaseModel):
    """A generated review."""

    id: int = Field(..., description="Comment id")
    content: str = Field(..., description="The review text")
    category_id: int = Field(..., description="Category the review belongs to")
    category_name: str = Field(..., description="Category name at generation time")
    target_words: int = Field(..., description="Clamped target length", ge=50, le=800)
    is_template: bool = Field(False, description="Whether the user saved it as a template")
    created_at: datetime | None = Field(None, description="Creation time")


class CommentListResponse(BaseModel):
    """Response DTO for listing a user's reviews."""

    records: list[CommentResponse] = Field(
        default_factory=list,
        description="Reviews, newest first",
    )


class DeleteCommentResponse(BaseModel):
    """Response DTO for deleting a review."""

    success: bool = Field(..., description="Whether the review was deleted")
    id: int = Field(..., description="The deleted review id")


class ImageAnalysisResponse(BaseModel):
    """Response DTO for image analysis."""

    dishes: list[str] = Field(..., description="Recognized dish names")
    category_id: int = Field(..., description="Resolved food category id")
    category_name: str = Field(..., description="Resolved food category name")


class CategoryResponse(BaseModel):
    """A seeded category."""

    id: int
    name: str
    keyword: str | None = None
    parent_id: int | None = None
    icon: str | None = None
    active_icon: str | None = None


class SeedCategoriesResponse(BaseModel):
    """Response DTO for category seeding."""

    file: str = Field(..., description="The seeded file")
    count: int = Field(..., description="Number of categories upserted", ge=0)
    items: list[CategoryResponse] = Field(default_factory=list)


class PhoneNumberResponse(BaseModel):
    """Response DTO for the phone code exchange."""

    phone_number: str = Field(..., description="The user's phone number")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the database is reachable")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
