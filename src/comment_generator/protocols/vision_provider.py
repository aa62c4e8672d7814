"""Vision provider protocol.

Defines the interface for any image recognition service that can name the
main subject (dish) of a picture.

Implementations can include:
- Baidu dish recognition (default)
- Tencent Hunyuan multimodal chat
"""

from typing import Protocol, runtime_checkable

from comment_generator.entities import ImageRef, RecognitionResult


@runtime_checkable
class VisionProvider(Protocol):
    """Protocol for best-effort image recognition.

    Recognition never raises: transport errors, vendor errors, low
    confidence and "not a subject" answers all come back as None.
    """

    @property
    def name(self) -> str:
        """Return the provider identifier."""
        ...

    async def recognize(self, image: ImageRef) -> RecognitionResult | None:
        """Recognize the main subject of an image.

        Args:
            image: Raw image bytes or a fetchable URL

        Returns:
            RecognitionResult with a label, or None if nothing usable
        """
        ...
