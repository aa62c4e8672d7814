"""HTTP handlers for comment operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

from fastapi import HTTPException, status

from comment_generator.dto import (
    AnalyzeImagesRequest,
    CategoryResponse,
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
from comment_generator.entities import GeneratedCommentEntity, GenerationRequest
from comment_generator.errors import CommentGeneratorError, NotFound
from comment_generator.log import get_logger
from comment_generator.protocols import CommentStore, ExpiringCache
from comment_generator.repositories.wechat_client import WeChatClient
from comment_generator.services import CategorySeeder, GenerationService

logger = get_logger(__name__)


def to_http_exception(error: CommentGeneratorError) -> HTTPException:
    """Translate a pipeline error into an HTTPException with a structured body."""
    return HTTPException(status_code=error.status_code, detail=error.to_dict())


def to_response(comment: GeneratedCommentEntity) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        content=comment.content,
        category_id=comment.category_id,
        category_name=comment.category_name,
        target_words=comment.target_words,
        is_template=comment.is_template,
        created_at=comment.created_at,
    )


class CommentHandler:
    """HTTP handlers for comment operations.

    This handler delegates business logic to GenerationService and the
    comment store, and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses

    Example:
        ```python
        handler = CommentHandler(
            generation_service=service,
            store=repository,
            cache=cache,
            seeder=CategorySeeder(repository),
            wechat=wechat_client,
        )

        @app.post("/comments/generate", response_model=CommentResponse)
        async def generate(request: GenerateCommentRequest, user_id: UserIdDep):
            return await handler.generate(user_id, request)
        ```
    """

    def __init__(
        self,
        generation_service: GenerationService,
        store: CommentStore,
        cache: ExpiringCache,
        seeder: CategorySeeder,
        wechat: WeChatClient,
    ) -> None:
        """Initialize the comment handler.

        Args:
            generation_service: The generation pipeline (required).
            store: Comment storage (required).
            cache: Shared expiring cache, for health checks (required).
            seeder: Category seeder (required).
            wechat: Mini program platform client (required).
        """
        self._service = generation_service
        self._store = store
        self._cache = cache
        self._seeder = seeder
        self._wechat = wechat

    async def generate(self, user_id: str, request: GenerateCommentRequest) -> CommentResponse:
        """Handle POST /comments/generate requests.

        Raises:
            HTTPException: With the status mapped from the failure kind
        """
        try:
            comment = await self._service.generate(
                GenerationRequest(
                    user_id=user_id,
                    target_words=request.target_words,
                    category_id=request.category_id,
                    category_name=request.category_name,
                    keyword=request.keyword,
                    reference_text=request.reference_text,
                    tone=request.tone,
                    images=request.image_refs(),
                )
            )
        except CommentGeneratorError as e:
            raise to_http_exception(e) from e
        except Exception as e:
            logger.exception("Unexpected generation failure")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"kind": "Internal", "message": f"Failed to generate comment: {e}"},
            ) from e

        return to_response(comment)

    async def analyze_images(self, request: AnalyzeImagesRequest) -> ImageAnalysisResponse:
        """Handle POST /images/analyze requests."""
        try:
            analysis = await self._service.analyze_images(request.image_refs())
        except CommentGeneratorError as e:
            raise to_http_exception(e) from e

        return ImageAnalysisResponse(
            dishes=analysis.labels,
            category_id=analysis.category.id,
            category_name=analysis.category.name,
        )

    async def list_comments(self, user_id: str, templates_only: bool = False) -> CommentListResponse:
        """Handle GET /comments requests."""
        comments = self._store.list_comments(user_id, templates_only=templates_only)
        return CommentListResponse(records=[to_response(c) for c in comments])

    async def toggle_template(self, user_id: str, comment_id: int) -> CommentResponse:
        """Handle PUT /comments/{id}/template requests."""
        comment = self._store.toggle_template(comment_id, user_id)
        if comment is None:
            raise to_http_exception(NotFound(f"Comment {comment_id} not found"))
        return to_response(comment)

    async def delete_comment(self, user_id: str, comment_id: int) -> DeleteCommentResponse:
        """Handle DELETE /comments/{id} requests."""
        if not self._store.delete_comment(comment_id, user_id):
            raise to_http_exception(NotFound(f"Comment {comment_id} not found"))
        return DeleteCommentResponse(success=True, id=comment_id)

    async def seed_categories(self, file_name: str) -> SeedCategoriesResponse:
        """Handle POST /categories/seed requests."""
        try:
            seeded = self._seeder.seed_from_file(file_name)
        except CommentGeneratorError as e:
            raise to_http_exception(e) from e

        return SeedCategoriesResponse(
            file=file_name,
            count=len(seeded),
            items=[
                CategoryResponse(
                    id=c.id,
                    name=c.name,
                    keyword=c.keyword,
                    parent_id=c.parent_id,
                    icon=c.icon,
                    active_icon=c.active_icon,
                )
                for c in seeded
            ],
        )

    async def phone_number(self, request: PhoneNumberRequest) -> PhoneNumberResponse:
        """Handle POST /users/phone requests."""
        try:
            phone = await self._wechat.get_phone_number(request.code)
        except CommentGeneratorError as e:
            raise to_http_exception(e) from e
        return PhoneNumberResponse(phone_number=phone)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        store_healthy = self._store.health_check()
        cache_healthy = self._cache.health_check()
        return HealthCheckResponse(
            status="healthy" if store_healthy and cache_healthy else "unhealthy",
            store_healthy=store_healthy,
            cache_healthy=cache_healthy,
        )
