"""
Vocabulary: bidirectional mapping between token strings and integer IDs

The vocabulary is the lookup table the WordPiece tokenizer relies on. Every
token (a whole word like "play" or a continuation piece like "##ing") gets a
dense, 0-based integer ID that a model uses to index its embedding matrix.

CONSTRUCTION:
=============
A vocabulary is built exactly once from a list of "sentences" (token sequences)
and a VocabularyConfig:

1. Count: walk every token in order. A new token gets the next free index
   (0, 1, 2, ...), a seen token has its count incremented. Reserved tokens are
   pinned instead of counted.
2. Reserve: append every reserved token (and the unknown token) that did not
   occur in the sentences.
3. Prune: drop tokens below min_frequency, then keep only the max_tokens most
   frequent (pinned first, ties by original index).
4. Re-index: if pruning was enabled, close the gaps. Survivors keep their
   relative order and get new IDs 0..N-1.

When the input is a vocab.txt file (one sentence holding every line), step 1
simply numbers the lines, so IDs match line numbers as in BERT's vocab files.

LOOKUPS:
========
- get_index("play")  -> 1012, or the unknown token's ID, or UndefinedTokenError
- get_token(1012)    -> "play", or the unknown token (possibly None) when out of range

The asymmetry is deliberate: an unknown ID degrades gracefully, an unknown token
without a fallback is a data error.

After construction the vocabulary is read-only, so a single instance can be
shared between tokenizers and threads.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from transformers.utils import logging

from .config import VocabularyConfig
from .errors import UndefinedTokenError


logger = logging.get_logger(__name__)


@dataclass(frozen=True)
class Counted:
    """Frequency of a regular token: the number of times it was seen."""

    count: int

    def increment(self) -> "Counted":
        return Counted(self.count + 1)


@dataclass(frozen=True)
class Pinned:
    """Frequency of a reserved token. Ranks above every count and is never pruned."""


Frequency = Union[Counted, Pinned]


def _rank_key(frequency: Frequency) -> Tuple[int, int]:
    # Ascending sort puts pinned tokens first, then higher counts
    if isinstance(frequency, Pinned):
        return (0, 0)
    return (1, -frequency.count)


@dataclass(frozen=True)
class TokenInfo:
    """Information stored in the vocabulary about a single token."""

    frequency: Frequency
    index: int


class Vocabulary:
    """
    Immutable bidirectional mapping between tokens and dense integer indices.

    Instances are normally created with build_vocabulary(), Vocabulary.from_tokens()
    or load_vocab(). The constructor takes already indexed token information and
    checks that the indices are dense.

    Args:
        tokens (Mapping[str, TokenInfo]): Token information keyed by token string
        unknown_token (str, optional): Fallback token for lookups. Must be present in tokens.
        reserved_tokens (Iterable[str], optional): Tokens that were protected from pruning

    Example:
        >>> vocab = Vocabulary.from_tokens(["[PAD]", "[UNK]", "play", "##ing"],
        ...                                VocabularyConfig(unknown_token="[UNK]"))
        >>> vocab.get_index("##ing")
        3
        >>> vocab.get_index("running")
        1
        >>> vocab.get_token(100)
        '[UNK]'
    """

    def __init__(
        self,
        tokens: Mapping[str, TokenInfo],
        unknown_token: Optional[str] = None,
        reserved_tokens: Iterable[str] = (),
    ):
        index_to_token: List[Optional[str]] = [None] * len(tokens)
        for token, info in tokens.items():
            if not 0 <= info.index < len(tokens) or index_to_token[info.index] is not None:
                raise ValueError(f"Token {token!r} has a duplicate or out of range index {info.index}")
            index_to_token[info.index] = token

        if unknown_token is not None and unknown_token not in tokens:
            raise ValueError(f"The unknown token {unknown_token!r} is not part of the vocabulary")

        self._tokens: Mapping[str, TokenInfo] = MappingProxyType(dict(tokens))
        self._index_to_token: Tuple[str, ...] = tuple(index_to_token)
        self._unknown_token = unknown_token
        reserved = frozenset(reserved_tokens)
        self._reserved_tokens: FrozenSet[str] = reserved if unknown_token is None else reserved | {unknown_token}

    @classmethod
    def from_tokens(cls, tokens: Sequence[str], config: Optional[VocabularyConfig] = None) -> "Vocabulary":
        """Builds a vocabulary from a single ordered token list, such as the lines of vocab.txt."""
        return build_vocabulary([tokens], config)

    @property
    def tokens(self) -> Mapping[str, TokenInfo]:
        return self._tokens

    @property
    def index_to_token(self) -> Tuple[str, ...]:
        return self._index_to_token

    @property
    def unknown_token(self) -> Optional[str]:
        return self._unknown_token

    @property
    def reserved_tokens(self) -> FrozenSet[str]:
        return self._reserved_tokens

    def contains(self, token: str) -> bool:
        return token in self._tokens

    def get_token(self, index: int) -> Optional[str]:
        """
        Returns the token at the given index.

        Out of range indices do not raise: they return the unknown token, which is None
        when the vocabulary has no unknown token.
        """
        if index < 0 or index >= len(self._index_to_token):
            return self._unknown_token
        return self._index_to_token[index]

    def get_index(self, token: str) -> int:
        """
        Returns the index of the given token.

        Tokens missing from the vocabulary resolve to the unknown token's index.

        Raises:
            UndefinedTokenError: If the token is missing and no unknown token is configured.
        """
        info = self._tokens.get(token)
        if info is not None:
            return info.index
        if self._unknown_token is not None:
            return self._tokens[self._unknown_token].index
        raise UndefinedTokenError(token)

    def get_frequency(self, token: str) -> Frequency:
        """Returns the frequency recorded for a token while the vocabulary was built."""
        info = self._tokens.get(token)
        if info is None:
            raise UndefinedTokenError(token, f"Token {token!r} is not part of the vocabulary")
        return info.frequency

    def size(self) -> int:
        return len(self._tokens)

    def to_dict(self) -> Dict[str, int]:
        """Returns the token to index mapping in index order."""
        return {token: index for index, token in enumerate(self._index_to_token)}

    def save_vocabulary(self, vocab_file: str) -> None:
        """Writes one token per line in index order, the format read back by load_vocab()."""
        with open(vocab_file, "w", encoding="utf-8") as writer:
            for token in self._index_to_token:
                writer.write(token + "\n")
        logger.info(f"Saved vocabulary of {self.size()} tokens to {vocab_file}")

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self._index_to_token)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self.size()}, unknown_token={self._unknown_token!r})"


class _TokenEntry:
    """Mutable per-token record, only used while a vocabulary is being built."""

    __slots__ = ("frequency", "index")

    def __init__(self, frequency: Frequency, index: int):
        self.frequency = frequency
        self.index = index


def _add_token(entries: Dict[str, _TokenEntry], token: str, reserved_tokens: FrozenSet[str]) -> None:
    entry = entries.get(token)
    if entry is None:
        # Index is only assigned the first time a token is seen
        frequency = Pinned() if token in reserved_tokens else Counted(1)
        entries[token] = _TokenEntry(frequency, len(entries))
    elif isinstance(entry.frequency, Counted):
        # Pinned frequencies never change
        entry.frequency = entry.frequency.increment()


def _prune(entries: Dict[str, _TokenEntry], config: VocabularyConfig) -> Tuple[Dict[str, _TokenEntry], bool]:
    pruned = False

    # Pinned tokens always pass the frequency threshold
    if config.min_frequency_enabled:
        entries = {
            token: entry
            for token, entry in entries.items()
            if isinstance(entry.frequency, Pinned) or entry.frequency.count >= config.min_frequency
        }
        pruned = True

    if config.max_tokens_enabled and len(entries) > config.max_tokens:
        # Most frequent first; equal frequencies keep the earliest seen token
        ranked = sorted(entries.items(), key=lambda item: (_rank_key(item[1].frequency), item[1].index))
        # Pinned tokens rank first, so with max_tokens >= reserved count they all survive
        entries = dict(ranked[: config.max_tokens])
        pruned = True

    return entries, pruned


def build_vocabulary(
    sentences: Iterable[Iterable[str]], config: Optional[VocabularyConfig] = None
) -> Vocabulary:
    """
    Builds an immutable Vocabulary from token sequences.

    Args:
        sentences (Iterable[Iterable[str]]): Token sequences. Tokens are indexed in the order
            they are first seen.
        config (VocabularyConfig, optional): Pruning and reserved token settings. Defaults to
            no pruning, no reserved tokens and no unknown token.

    Returns:
        Vocabulary: The built vocabulary

    Raises:
        InvalidConfigurationError: If max_tokens is smaller than the number of reserved tokens.
    """
    if config is None:
        config = VocabularyConfig()
    config.validate()

    reserved_tokens = config.all_reserved_tokens
    entries: Dict[str, _TokenEntry] = {}

    # Step 1: Count tokens and index them in first-seen order
    for sentence in sentences:
        for token in sentence:
            _add_token(entries, token, reserved_tokens)

    # Step 2: Reserved tokens go after the original tokens so vocab file order is preserved
    for token in sorted(reserved_tokens):
        if token not in entries:
            _add_token(entries, token, reserved_tokens)

    # Step 3: Prune by frequency, then by size
    seen = len(entries)
    entries, pruned = _prune(entries, config)

    # Step 4: Close the index gaps left by pruning, preserving the original order
    if pruned:
        ordered = sorted(entries, key=lambda token: entries[token].index)
        tokens = {token: TokenInfo(entries[token].frequency, index) for index, token in enumerate(ordered)}
        logger.debug(f"Pruned {seen - len(tokens)} of {seen} tokens and re-indexed the vocabulary")
    else:
        tokens = {token: TokenInfo(entry.frequency, entry.index) for token, entry in entries.items()}

    logger.info(f"Built vocabulary with {len(tokens)} tokens")
    return Vocabulary(tokens, unknown_token=config.unknown_token, reserved_tokens=config.reserved_tokens)


__all__ = [
    "Counted",
    "Pinned",
    "Frequency",
    "TokenInfo",
    "Vocabulary",
    "build_vocabulary",
]
