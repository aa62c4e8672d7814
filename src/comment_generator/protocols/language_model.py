"""Language model protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LanguageModel(Protocol):
    """Protocol for text generation services.

    Example:
        ```python
        model: LanguageModel = DeepSeekLanguageModel.create()
        text = await model.complete(system, prompt, temperature=0.85, max_tokens=300)
        ```
    """

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Generate text for the given instructions.

        Args:
            system_prompt: The system instruction
            user_prompt: The user instruction
            temperature: Sampling temperature
            max_tokens: Output token budget

        Returns:
            The raw generated text (not trimmed)

        Raises:
            GenerationUpstreamError: If the endpoint fails
        """
        ...
