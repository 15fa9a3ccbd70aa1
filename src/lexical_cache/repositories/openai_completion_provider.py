"""OpenAI-based completion provider.

Uses the chat completions endpoint to answer prompts that missed the cache.
Any OpenAI-compatible server works by pointing OPENAI_BASE_URL at it.

Request shape:
    - one fixed system message plus the user prompt
    - fixed sampling parameters (temperature, max_tokens, top_p)

Only ``choices[0].message.content`` is read from the response.
"""

import logging

import httpx

from lexical_cache.config import settings
from lexical_cache.errors import ProviderError

logger = logging.getLogger(__name__)


class OpenAICompletionProvider:
    """OpenAI implementation of CompletionProvider protocol.

    This class satisfies the CompletionProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = OpenAICompletionProvider.create(api_key="sk-...")
        answer = await provider.complete("What is a semantic cache?")
        ```
    """

    def __init__(
        self,
        api_key: str,
        model_name: str | None = None,
        base_url: str | None = None,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        top_p: float | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the OpenAI completion provider.

        Args:
            api_key: Bearer credential for the API.
            model_name: Chat model. Defaults to settings.openai_model.
            base_url: API base URL. Defaults to settings.openai_base_url.
            system_prompt: System message sent with every prompt.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens in the response.
            top_p: Nucleus sampling parameter.
            timeout: Request timeout in seconds.
            client: Pre-built async HTTP client (mainly for tests).
        """
        self._api_key = api_key
        self._model_name = model_name or settings.openai_model
        self._base_url = (base_url or settings.openai_base_url).rstrip("/")
        self._system_prompt = system_prompt or settings.openai_system_prompt
        self._temperature = settings.openai_temperature if temperature is None else temperature
        self._max_tokens = settings.openai_max_tokens if max_tokens is None else max_tokens
        self._top_p = settings.openai_top_p if top_p is None else top_p
        self._timeout = settings.openai_timeout if timeout is None else timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OpenAICompletionProvider":
        """Factory method to create OpenAICompletionProvider with defaults.

        Args:
            api_key: API key. If None, requires it from settings.
            model_name: Model name. If None, uses settings.
            base_url: API URL. If None, uses settings.

        Returns:
            Configured OpenAICompletionProvider

        Raises:
            ConfigurationMissingError: If no API key is given or configured
        """
        return cls(
            api_key=api_key or settings.require_openai_api_key(),
            model_name=model_name,
            base_url=base_url,
        )

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def build_payload(self, prompt: str) -> dict:
        """Build the chat completions request body for a prompt."""
        return {
            "model": self._model_name,
            "messages": [
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "top_p": self._top_p,
        }

    async def complete(self, prompt: str) -> str:
        """Generate a response for a single prompt.

        Args:
            prompt: The user prompt

        Returns:
            The assistant message content

        Raises:
            ProviderError: If the request fails, returns non-2xx, or the
                payload has no string content at choices[0].message.content
        """
        url = f"{self._base_url}/chat/completions"

        try:
            response = await self.client.post(
                url,
                json=self.build_payload(prompt),
                headers=self.headers,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error("Error fetching OpenAI API response: %s", e)
            raise ProviderError(f"OpenAI API error: {e}") from e
        except ValueError as e:
            logger.error("OpenAI API returned invalid JSON: %s", e)
            raise ProviderError(f"OpenAI API returned invalid JSON: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Unexpected response format: {data}") from e

        if not isinstance(content, str):
            raise ProviderError(f"Unexpected response content: {content!r}")

        return content

    async def is_available(self) -> bool:
        """Check if the API answers the models listing.

        Returns:
            True if reachable with the configured credential, False otherwise
        """
        try:
            response = await self.client.get(f"{self._base_url}/models", headers=self.headers)
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning("OpenAI availability check failed: %s", e)
            return False

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
