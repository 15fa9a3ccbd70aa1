"""Error taxonomy for the lexical cache.

Every failure is surfaced to the caller as one of these types. Nothing in
the cache path retries or recovers on its own.
"""


class LexicalCacheError(RuntimeError):
    """Base class for all lexical cache errors."""


class StoreUnavailableError(LexicalCacheError):
    """The key-value store could not be enumerated, read or written."""


class ProviderError(LexicalCacheError):
    """The completion provider failed or returned a malformed payload.

    A response that raised this error is never written to the store.
    """


class ConfigurationMissingError(LexicalCacheError):
    """A required setting (such as the API credential) is absent."""
