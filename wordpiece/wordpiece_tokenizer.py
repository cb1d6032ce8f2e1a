"""
WordPiece Tokenizer Implementation

This module implements the WordpieceTokenizer class which turns raw text into
vocabulary tokens and token IDs using the WordPiece algorithm.

TOKENIZATION PIPELINE:
======================
1. Pre-tokenization: trim the text and split it on single spaces
2. WordPiece: split every word into the longest matching vocabulary pieces
3. ID conversion: map every token to its vocabulary index

There is no normalization step: the text is matched exactly as given, so a
lowercase vocabulary needs lowercase input.

EXAMPLE FLOW:
=============
Input text: "he was playing"
-> After pre-tokenization: ["he", "was", "playing"]
-> After WordPiece: ["he", "was", "play", "##ing"]
-> After ID conversion: [2002, 2001, 2377, 2075]

WORDPIECE ALGORITHM:
====================
Greedy longest-match-first. Starting at the beginning of a word, take the
longest prefix that is in the vocabulary, then repeat on the rest of the word.
Every piece after the first is looked up with the "##" continuation prefix.

Example: "unaffable" -> ["un", "##aff", "##able"]

If at some position not even a single character matches, the whole word is
replaced by the unknown placeholder; partial matches are discarded. Words longer
than max_input_chars are replaced by the placeholder without being searched.
"""

from typing import Iterable, List, Optional

import torch
from tokenizers import Regex, Tokenizer, decoders, normalizers, pre_tokenizers
from tokenizers.models import WordPiece
from transformers.utils import logging

from .config import BERT_UNKNOWN_TOKEN, DEFAULT_MAX_INPUT_CHARS, TokenizerConfig
from .errors import InvalidConfigurationError, InvariantViolationError
from .vocab_utils import strip_edges
from .vocabulary import Vocabulary


logger = logging.get_logger(__name__)

# Prefix marking a piece that continues the previous piece of the same word
CONTINUATION_PREFIX = "##"

# Same characters strip_edges() removes: control characters and the space, at either end of the text
EDGE_TRIM_PATTERN = r"\A[\x00-\x20]+|[\x00-\x20]+\z"


class WordpieceTokenizer:
    """
    WordPiece tokenizer bound to a Vocabulary.

    The tokenizer keeps no state between calls, and the vocabulary is only read,
    so one vocabulary may back several tokenizers.

    Args:
        vocabulary (Vocabulary): Vocabulary used for matching pieces and resolving IDs
        unknown_token (str, optional): Placeholder emitted for words that cannot be
            tokenized. Defaults to "[UNK]".
        max_input_chars (int, optional): Words longer than this are replaced by the
            placeholder. Defaults to 200.

    Example:
        >>> vocab = Vocabulary.from_tokens(["[UNK]", "play", "##ing"],
        ...                                VocabularyConfig(unknown_token="[UNK]"))
        >>> tokenizer = WordpieceTokenizer(vocab)
        >>> tokenizer.tokenize("playing plays")
        ['play', '##ing', '[UNK]']
        >>> tokenizer.token_to_ids(["play", "##ing", "[UNK]"])
        [1, 2, 0]
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        unknown_token: str = BERT_UNKNOWN_TOKEN,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
    ):
        # TokenizerConfig rejects a non-positive max_input_chars
        self.config = TokenizerConfig(unknown_token=unknown_token, max_input_chars=max_input_chars)
        self.vocabulary = vocabulary

        if not vocabulary.contains(unknown_token) and vocabulary.unknown_token is None:
            logger.warning(
                f"The unknown token {unknown_token!r} is not in the vocabulary and the vocabulary has no "
                "unknown token; converting an untokenizable word to IDs will fail."
            )

    @classmethod
    def from_config(cls, vocabulary: Vocabulary, config: TokenizerConfig) -> "WordpieceTokenizer":
        return cls(vocabulary, unknown_token=config.unknown_token, max_input_chars=config.max_input_chars)

    @property
    def unknown_token(self) -> str:
        return self.config.unknown_token

    @property
    def max_input_chars(self) -> int:
        return self.config.max_input_chars

    def tokenize(self, text: str) -> List[str]:
        """
        Splits text into WordPiece tokens.

        Args:
            text (str): Input text. Words are separated by single spaces.

        Returns:
            List[str]: Pieces of every word in input order, with the unknown placeholder
            standing in for each word that is too long or cannot be matched.

        Raises:
            InvariantViolationError: If a word produces more pieces than max_input_chars.
        """
        output_tokens = []

        # Step 1: Pre-tokenization, trim control characters and spaces, split on " "
        # Consecutive spaces leave empty words, which produce no tokens
        for word in strip_edges(text).split(" "):
            # Step 2: Overlong words are not searched at all
            if len(word) > self.max_input_chars:
                output_tokens.append(self.unknown_token)
                continue

            # Step 3: WordPiece, an unmatchable word collapses to a single placeholder
            sub_tokens = self._split_word(word, text)
            if sub_tokens is None:
                output_tokens.append(self.unknown_token)
            else:
                output_tokens.extend(sub_tokens)
        return output_tokens

    def _split_word(self, word: str, text: str) -> Optional[List[str]]:
        # Returns None when some position of the word matches no vocabulary piece
        sub_tokens = []
        start = 0
        while start < len(word):
            # Search from the longest remaining substring down to a single character
            end = len(word)
            current_sub_token = None
            while start < end:
                sub_token = word[start:end]
                if start > 0:
                    sub_token = CONTINUATION_PREFIX + sub_token
                if self.vocabulary.contains(sub_token):
                    current_sub_token = sub_token
                    break
                end -= 1

            if current_sub_token is None:
                return None

            sub_tokens.append(current_sub_token)
            # Every piece covers at least one character, so this only trips on a logic error
            if len(sub_tokens) > self.max_input_chars:
                raise InvariantViolationError(f"Too many sub tokens for: {text!r}")
            # Continue right after the matched piece
            start = end
        return sub_tokens

    def token_to_ids(self, tokens: Iterable[str]) -> List[int]:
        """
        Converts tokens to vocabulary indices, one index per token.

        Raises:
            UndefinedTokenError: If a token is missing and the vocabulary has no unknown token.
        """
        return [self.vocabulary.get_index(token) for token in tokens]

    def encode(self, text: str) -> List[int]:
        """Tokenizes text and converts the tokens to IDs."""
        return self.token_to_ids(self.tokenize(text))

    def ids_to_tensor(self, ids: Iterable[int]) -> torch.LongTensor:
        """
        Packs token IDs into a (1, sequence_length) tensor, the input_ids shape a BERT
        style model expects for a single sequence. No padding or truncation is applied.
        """
        return torch.tensor([list(ids)], dtype=torch.long)

    def convert_ids_to_tokens(self, ids: Iterable[int]) -> List[Optional[str]]:
        """Converts IDs back to tokens. Out of range IDs map to the vocabulary's unknown token."""
        return [self.vocabulary.get_token(int(index)) for index in ids]

    def decode(self, ids: Iterable[int]) -> str:
        """
        Converts IDs back to text, gluing continuation pieces onto the previous piece.

        Example: [2377, 2075] -> ["play", "##ing"] -> "playing"
        """
        words: List[str] = []
        for token in self.convert_ids_to_tokens(ids):
            if token is None:
                token = self.unknown_token
            if token.startswith(CONTINUATION_PREFIX) and words:
                words[-1] += token[len(CONTINUATION_PREFIX):]
            else:
                words.append(token)
        return " ".join(words)

    def to_hf_tokenizer(self) -> Tokenizer:
        """
        Exports the vocabulary as a HuggingFace tokenizers.Tokenizer.

        The exported tokenizer trims and splits text exactly like tokenize(): control
        characters and spaces are removed at both ends, then words are split on single
        spaces only. It uses the same WordPiece model and decodes "##" continuation
        pieces, so it can be plugged into HuggingFace pipelines.

        Raises:
            InvalidConfigurationError: If the unknown placeholder is not in the vocabulary.
        """
        if not self.vocabulary.contains(self.unknown_token):
            raise InvalidConfigurationError(
                f"The unknown token {self.unknown_token!r} must be part of the vocabulary to export it"
            )

        tokenizer = Tokenizer(
            WordPiece(
                self.vocabulary.to_dict(),
                unk_token=self.unknown_token,
                max_input_chars_per_word=self.max_input_chars,
            )
        )
        tokenizer.normalizer = normalizers.Replace(Regex(EDGE_TRIM_PATTERN), "")
        # Empty splits from consecutive spaces are dropped, as in tokenize()
        tokenizer.pre_tokenizer = pre_tokenizers.CharDelimiterSplit(" ")
        tokenizer.decoder = decoders.WordPiece(prefix=CONTINUATION_PREFIX)
        return tokenizer

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(vocab_size={self.vocabulary.size()}, "
            f"unknown_token={self.unknown_token!r}, max_input_chars={self.max_input_chars})"
        )


__all__ = ["CONTINUATION_PREFIX", "WordpieceTokenizer"]
