"""
Vocabulary and Tokenizer Configuration

This module defines the configuration records used to build a Vocabulary and
a WordpieceTokenizer. The configuration is kept separate from the objects that
use it, so the same settings can be:

1. Reused: build several vocabularies with identical pruning policy
2. Serialized: stored next to a vocab.txt file with to_dict()/from_dict()
3. Shared: records are frozen, so passing them around cannot mutate them

VOCABULARY SETTINGS:
====================
- min_frequency: tokens seen fewer times than this are pruned (disabled when < 2)
- max_tokens: keep only the most frequent tokens (disabled when <= 0)
- unknown_token: fallback for lookups of tokens that are not in the vocabulary
- reserved_tokens: tokens that survive pruning no matter what

The size limit includes the reserved tokens, so max_tokens must be at least the
number of reserved tokens (the unknown token counts as reserved).

TOKENIZER SETTINGS:
===================
- unknown_token: placeholder emitted for words that cannot be segmented
- max_input_chars: words longer than this are replaced by the placeholder
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from .errors import InvalidConfigurationError


# Default string for a vocabulary that only asks for "an unknown token"
DEFAULT_UNKNOWN_TOKEN = "<unk>"

# Defaults used by BERT style vocabularies
BERT_UNKNOWN_TOKEN = "[UNK]"
DEFAULT_MAX_INPUT_CHARS = 200


@dataclass(frozen=True)
class VocabularyConfig:
    """
    Configuration for building a Vocabulary.

    Args:
        min_frequency (int, optional): Minimum number of occurrences for a token to be kept.
            Values below 2 disable frequency pruning. Defaults to -1.

        max_tokens (int, optional): Maximum vocabulary size, reserved tokens included.
            Values <= 0 disable size pruning. Defaults to -1.

        unknown_token (str, optional): Token returned for out-of-vocabulary lookups. It is
            always reserved. Defaults to None (missing tokens are an error).

        reserved_tokens (FrozenSet[str], optional): Tokens that are never pruned, such as
            [PAD], [CLS] or [SEP]. Defaults to an empty set.

    Example:
        >>> config = VocabularyConfig(max_tokens=30000, unknown_token="[UNK]")
        >>> sorted(config.all_reserved_tokens)
        ['[UNK]']
    """

    min_frequency: int = -1
    max_tokens: int = -1
    unknown_token: Optional[str] = None
    reserved_tokens: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        # Accept any iterable of strings for convenience, store a frozenset
        if not isinstance(self.reserved_tokens, frozenset):
            object.__setattr__(self, "reserved_tokens", frozenset(self.reserved_tokens))

    @classmethod
    def with_default_unknown_token(cls, **kwargs) -> "VocabularyConfig":
        """
        Creates a configuration whose unknown token is DEFAULT_UNKNOWN_TOKEN ("<unk>").

        Other settings are passed through as keyword arguments.
        """
        return cls(unknown_token=DEFAULT_UNKNOWN_TOKEN, **kwargs)

    @property
    def min_frequency_enabled(self) -> bool:
        return self.min_frequency > 1

    @property
    def max_tokens_enabled(self) -> bool:
        return self.max_tokens > 0

    @property
    def all_reserved_tokens(self) -> FrozenSet[str]:
        """Reserved tokens including the unknown token, if one is configured."""
        if self.unknown_token is None:
            return self.reserved_tokens
        return self.reserved_tokens | {self.unknown_token}

    def validate(self) -> None:
        """
        Check that the size limit can hold every reserved token.

        Raises:
            InvalidConfigurationError: If max_tokens is enabled and smaller than the
                number of reserved tokens.
        """
        reserved_count = len(self.all_reserved_tokens)
        if self.max_tokens_enabled and self.max_tokens < reserved_count:
            raise InvalidConfigurationError(
                f"The vocabulary max_tokens ({self.max_tokens}) can not be smaller than "
                f"the number of reserved tokens ({reserved_count})"
            )

    def to_dict(self) -> Dict[str, Any]:
        output = asdict(self)
        # Sets are not JSON serializable
        output["reserved_tokens"] = sorted(self.reserved_tokens)
        return output

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "VocabularyConfig":
        return cls(
            min_frequency=config_dict.get("min_frequency", -1),
            max_tokens=config_dict.get("max_tokens", -1),
            unknown_token=config_dict.get("unknown_token"),
            reserved_tokens=frozenset(config_dict.get("reserved_tokens", ())),
        )


@dataclass(frozen=True)
class TokenizerConfig:
    """
    Configuration for a WordpieceTokenizer.

    Args:
        unknown_token (str, optional): Placeholder emitted for a word that is too long or
            cannot be split into vocabulary pieces. It may differ from the vocabulary's own
            unknown token. Defaults to "[UNK]".

        max_input_chars (int, optional): Maximum number of characters in a single word.
            Longer words are replaced by the placeholder. Defaults to 200.
    """

    unknown_token: str = BERT_UNKNOWN_TOKEN
    max_input_chars: int = DEFAULT_MAX_INPUT_CHARS

    def __post_init__(self):
        if self.max_input_chars <= 0:
            raise InvalidConfigurationError(
                f"max_input_chars must be positive, got {self.max_input_chars}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "TokenizerConfig":
        return cls(
            unknown_token=config_dict.get("unknown_token", BERT_UNKNOWN_TOKEN),
            max_input_chars=config_dict.get("max_input_chars", DEFAULT_MAX_INPUT_CHARS),
        )


__all__ = [
    "DEFAULT_UNKNOWN_TOKEN",
    "BERT_UNKNOWN_TOKEN",
    "DEFAULT_MAX_INPUT_CHARS",
    "VocabularyConfig",
    "TokenizerConfig",
]
