"""FastAPI application for the comment generator.

Routes are thin: each one delegates to CommentHandler, which maps pipeline
failures to structured ``{"detail": {"kind", "message"}}`` error bodies.
"""

from typing import Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from comment_generator.api.dependencies import HandlerDep, UserIdDep, lifespan
from comment_generator.dto import (
    AnalyzeImagesRequest,
    CommentListResponse,
    CommentResponse,
    DeleteCommentResponse,
    GenerateCommentRequest,
    HealthCheckResponse,
    ImageAnalysisResponse,
    PhoneNumberRequest,
    PhoneNumberResponse,
    SeedCategoriesResponse,
)

app = FastAPI(
    title="Comment Generator API",
    description="Review generation from dish photos and keywords",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Comment Generator API",
        "version": "0.1.0",
        "description": "Review generation from dish photos and keywords",
        "endpoints": {
            "generate": "/comments/generate",
            "analyze": "/images/analyze",
            "comments": "/comments",
            "seed": "/categories/seed",
            "phone": "/users/phone",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.post("/comments/generate", response_model=CommentResponse)
async def generate_comment(
    request: GenerateCommentRequest, user_id: UserIdDep, handler: HandlerDep
) -> CommentResponse:
    """
    Generate a review from images or a keyword and store it.

    Args:
        request: Category, target length, tone, keyword, reference text and images.

    Returns:
        The persisted review.
    """
    return await handler.generate(user_id, request)


@app.post("/images/analyze", response_model=ImageAnalysisResponse)
async def analyze_images(
    request: AnalyzeImagesRequest, user_id: UserIdDep, handler: HandlerDep
) -> ImageAnalysisResponse:
    """Recognize dishes on images without generating a review."""
    return await handler.analyze_images(request)


@app.get("/comments", response_model=CommentListResponse)
async def list_comments(
    user_id: UserIdDep,
    handler: HandlerDep,
    template: bool = Query(False, description="Only return reviews marked as templates"),
) -> CommentListResponse:
    """List the caller's reviews, newest first."""
    return await handler.list_comments(user_id, templates_only=template)


@app.put("/comments/{comment_id}/template", response_model=CommentResponse)
async def toggle_template(
    comment_id: int, user_id: UserIdDep, handler: HandlerDep
) -> CommentResponse:
    """Flip the template flag of one of the caller's reviews."""
    return await handler.toggle_template(user_id, comment_id)


@app.delete("/comments/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    comment_id: int, user_id: UserIdDep, handler: HandlerDep
) -> DeleteCommentResponse:
    """Delete one of the caller's reviews."""
    return await handler.delete_comment(user_id, comment_id)


@app.post("/categories/seed", response_model=SeedCategoriesResponse)
async def seed_categories(
    handler: HandlerDep,
    file: str = Query("category.json", description="Seed file name inside SEED_DIR"),
) -> SeedCategoriesResponse:
    """Create or update categories from a JSON seed file."""
    return await handler.seed_categories(file)


@app.post("/users/phone", response_model=PhoneNumberResponse)
async def phone_number(request: PhoneNumberRequest, handler: HandlerDep) -> PhoneNumberResponse:
    """Exchange a mini program phone code for the user's phone number."""
    return await handler.phone_number(request)


if __name__ == "__main__":
    import uvicorn

    from comment_generator.config import settings

    uvicorn.run(
        "comment_generator.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
