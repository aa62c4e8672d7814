"""Request DTOs for API endpoints."""

import base64
import binascii

from pydantic import AliasChoices, BaseModel, Field, StrictBool, field_validator

from comment_generator.entities import ImageRef


def decode_image(value: str) -> ImageRef:
    """Turn a data URI into bytes; URLs are passed through."""
    if value.startswith("data:"):
        _, _, encoded = value.partition(",")
        return base64.b64decode(encoded, validate=True)
    return value


def check_images(images: list[str]) -> list[str]:
    """Accept only http(s) URLs and base64 data URIs."""
    for image in images:
        if image.startswith("data:"):
            header, sep, encoded = image.partition(",")
            if not sep or ";base64" not in header:
                raise ValueError("Data URI images must be base64 encoded")
            try:
                base64.b64decode(encoded, validate=True)
            except binascii.Error as e:
                raise ValueError(f"Invalid base64 image: {e}") from e
        elif not image.startswith(("http://", "https://")):
            raise ValueError("Images must be http(s) URLs or base64 data URIs")
    return images


class GenerateCommentRequest(BaseModel):
    """Request DTO for generating a review.

    The handler will convert this to a GenerationRequest entity; the word
    target is validated and clamped by the service, not here.
    """

    category_id: int | None = Field(
        None,
        description="Category of the review (required when no images are supplied)",
        validation_alias=AliasChoices("category_id", "categoryId"),
    )
    category_name: str | None = Field(
        None,
        description="Category name, used when category_id is absent",
        validation_alias=AliasChoices("category_name", "categoryName"),
    )
    # Booleans pass through unconverted and are rejected by the service
    target_words: StrictBool | float | str | None = Field(
        None,
        description="Target length in characters (clamped to 50-800)",
        validation_alias=AliasChoices("target_words", "targetWords", "words"),
    )
    keyword: str | None = Field(None, description="Free-text keyword or theme")
    reference_text: str | None = Field(
        None,
        description="Reference text the review may draw on",
        validation_alias=AliasChoices("reference_text", "referenceText", "reference"),
    )
    tone: str | None = Field(None, description="Tone key, e.g. 正常, 热情, 幽默")
    images: list[str] = Field(
        default_factory=list,
        description="Image URLs or base64 data URIs",
        max_length=9,
    )

    @field_validator("images")
    @classmethod
    def validate_images(cls, value: list[str]) -> list[str]:
        return check_images(value)

    def image_refs(self) -> list[ImageRef]:
        """Decode images into URLs or raw bytes."""
        return [decode_image(image) for image in self.images]


class AnalyzeImagesRequest(BaseModel):
    """Request DTO for recognizing dishes without generating."""

    images: list[str] = Field(
        ...,
        description="Image URLs or base64 data URIs",
        min_length=1,
        max_length=9,
    )

    @field_validator("images")
    @classmethod
    def validate_images(cls, value: list[str]) -> list[str]:
        return check_images(value)

    def image_refs(self) -> list[ImageRef]:
        """Decode images into URLs or raw bytes."""
        return [decode_image(image) for image in self.images]


class PhoneNumberRequest(BaseModel):
    """Request DTO for exchanging a mini program phone code."""

    code: str = Field(..., description="Phone number authorization code", min_length=1)
