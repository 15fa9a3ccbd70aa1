"""Lexical similarity between prompts.

Prompts are compared as sets of word tokens using the Jaccard index.

Tokenizer rules:
    - A token is a maximal run of Unicode word characters (``\\w+``: letters,
      digits and underscore). Whitespace and punctuation are boundaries, so an
      apostrophe splits ``"What's"`` into ``"What"`` and ``"s"``.
    - Tokens are case-folded unless ``case_sensitive`` is set.
    - Duplicates collapse; order is discarded.
"""

import re
from collections.abc import Set

TOKEN_PATTERN = re.compile(r"\w+")


def tokenize(text: str, case_sensitive: bool = False) -> list[str]:
    """Split text into word tokens.

    Args:
        text: Any string, possibly empty
        case_sensitive: Keep the original casing instead of case-folding

    Returns:
        Tokens in order of appearance (may contain duplicates)
    """
    tokens = TOKEN_PATTERN.findall(text)
    if case_sensitive:
        return tokens
    return [token.casefold() for token in tokens]


def token_set(text: str, case_sensitive: bool = False) -> frozenset[str]:
    """Build the set of distinct tokens for a prompt."""
    return frozenset(tokenize(text, case_sensitive=case_sensitive))


def jaccard_index(first: Set[str], second: Set[str]) -> float:
    """Calculate |A ∩ B| / |A ∪ B|.

    An empty union scores 0.0 rather than being undefined.
    """
    union = first | second
    if not union:
        return 0.0
    return len(first & second) / len(union)


def similarity_score(prompt_a: str, prompt_b: str, case_sensitive: bool = False) -> float:
    """Score two prompts by token-set overlap.

    Args:
        prompt_a: First prompt
        prompt_b: Second prompt
        case_sensitive: Compare tokens without case-folding

    Returns:
        Similarity in [0, 1]; symmetric in its arguments
    """
    return jaccard_index(
        token_set(prompt_a, case_sensitive=case_sensitive),
        token_set(prompt_b, case_sensitive=case_sensitive),
    )
