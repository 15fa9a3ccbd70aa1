"""Completion provider protocol.

Defines the interface for any chat-completion service that turns a prompt
into a single text response. Called only on a cache miss.

Implementations can include:
- OpenAI chat completions (default)
- Any OpenAI-compatible endpoint
- Fakes for testing
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CompletionProvider(Protocol):
    """Protocol for chat-completion services.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        from lexical_cache.protocols import CompletionProvider

        provider: CompletionProvider = OpenAICompletionProvider.create()
        ```
    """

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model.

        Returns:
            Model name or identifier
        """
        ...

    async def complete(self, prompt: str) -> str:
        """Generate a response for a single prompt.

        Args:
            prompt: The user prompt

        Returns:
            The response text

        Raises:
            ProviderError: On transport failure, non-2xx status or malformed payload
        """
        ...

    async def is_available(self) -> bool:
        """Check if the provider is reachable.

        Returns:
            True if available, False otherwise
        """
        ...

    async def close(self) -> None:
        """Release any underlying connections."""
        ...
