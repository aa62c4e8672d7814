"""Error taxonomy for the comment generation pipeline.

Every failure a caller can observe is one of these exceptions. Each carries a
stable ``kind`` string and the HTTP status the handlers translate it into, so
no failure ever turns into a successful-looking empty response.
"""

from typing import Any


class CommentGeneratorError(Exception):
    """Base class for all pipeline errors."""

    kind: str = "Internal"
    status_code: int = 500

    def __init__(self, message: str, detail: Any = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable description
            detail: Optional diagnostic payload (upstream status, body, ...)
        """
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Convert to the structured error body returned to callers."""
        body: dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.detail is not None:
            body["detail"] = self.detail
        return body


class InvalidRequest(CommentGeneratorError):
    """The caller supplied an unusable request."""

    kind = "InvalidRequest"
    status_code = 400


class NotFound(CommentGeneratorError):
    """A record owned by the caller does not exist."""

    kind = "NotFound"
    status_code = 404


class NoSubjectRecognized(CommentGeneratorError):
    """Images were supplied but none of them yielded a usable label."""

    kind = "NoSubjectRecognized"
    status_code = 422


class CategoryNotFound(CommentGeneratorError):
    """The category needed for generation is not configured."""

    kind = "CategoryNotFound"
    status_code = 500


class PersistenceError(CommentGeneratorError):
    """The transactional write failed and was rolled back."""

    kind = "PersistenceError"
    status_code = 500


class CredentialUnavailable(CommentGeneratorError):
    """The provider's static secrets are not configured."""

    kind = "CredentialUnavailable"
    status_code = 503


class CredentialFetchFailed(CommentGeneratorError):
    """The provider's token endpoint rejected the issuance request."""

    kind = "CredentialFetchFailed"
    status_code = 502

    def __init__(self, provider: str, status: int | None, body: str) -> None:
        super().__init__(
            f"Failed to obtain {provider} access token",
            detail={"provider": provider, "status": status, "body": body},
        )
        self.provider = provider
        self.status = status
        self.body = body


class PlatformError(CommentGeneratorError):
    """The messaging platform answered without the expected payload."""

    kind = "PlatformError"
    status_code = 502


class GenerationTimeout(CommentGeneratorError):
    """The language model did not answer within the configured window."""

    kind = "GenerationTimeout"
    status_code = 504


class GenerationUpstreamError(CommentGeneratorError):
    """The language model endpoint failed."""

    kind = "GenerationUpstreamError"
    status_code = 502

    def __init__(self, status: int | None, body: str) -> None:
        super().__init__(
            f"Language model request failed: {status} {body}".strip(),
            detail={"status": status, "body": body},
        )
        self.status = status
        self.body = body


class GenerationEmptyOutput(CommentGeneratorError):
    """The language model answered with blank text."""

    kind = "GenerationEmptyOutput"
    status_code = 502
