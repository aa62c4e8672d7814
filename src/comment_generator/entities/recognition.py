"""Image recognition result entity."""

from dataclasses import dataclass

# Raw image bytes or a fetchable URL
ImageRef = bytes | str


@dataclass(frozen=True)
class RecognitionResult:
    """Best label recognized on a single image.

    Ephemeral: produced per image by a vision provider and consumed
    immediately by the generation service, never persisted.

    Attributes:
        source: The image the label was recognized on
        label: The recognized subject (dish name), if any
        confidence: Vendor confidence in [0, 1], if the vendor reports one
    """

    source: ImageRef
    label: str | None = None
    confidence: float | None = None

    @property
    def has_label(self) -> bool:
        return bool(self.label)
