"""
Exceptions raised by the wordpiece vocabulary and tokenizer.

All errors derive from WordpieceError so callers can catch the whole family,
and each one also derives from the matching builtin (ValueError, KeyError,
RuntimeError) so generic handlers keep working.

ERROR KINDS:
============
- InvalidConfigurationError: the requested configuration cannot be satisfied
  (e.g. max_tokens smaller than the number of reserved tokens)
- UndefinedTokenError: a token has no index and no unknown token is configured
- InvariantViolationError: the segmentation loop produced more pieces than a
  word can have characters
"""

from typing import Optional


class WordpieceError(Exception):
    """Base class for all wordpiece errors."""


class InvalidConfigurationError(WordpieceError, ValueError):
    """Raised when a vocabulary or tokenizer configuration is unsatisfiable."""


class UndefinedTokenError(WordpieceError, KeyError):
    """
    Raised when a token cannot be resolved to an index.

    This only happens when the vocabulary has no unknown token to fall back
    on, so it signals a mismatch between the vocabulary and the input.

    Args:
        token (str): The token that could not be resolved
        message (str, optional): Custom error message
    """

    def __init__(self, token: str, message: Optional[str] = None):
        self.token = token
        if message is None:
            message = (
                f"Unexpected token {token!r}. Define an unknown_token for the vocabulary "
                "to enable support for unknown tokens."
            )
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class InvariantViolationError(WordpieceError, RuntimeError):
    """Raised when a word yields more pieces than max_input_chars allows."""


__all__ = [
    "WordpieceError",
    "InvalidConfigurationError",
    "UndefinedTokenError",
    "InvariantViolationError",
]
