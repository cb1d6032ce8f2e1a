"""
WordPiece Tokenization Module

This module provides the components for turning text into model input IDs:
- Configuration records for vocabularies and tokenizers
- Vocabulary: immutable token <-> ID mapping with frequency based pruning
- Vocabulary utilities for loading vocab.txt files
- WordpieceTokenizer for splitting text into subword tokens and IDs

QUICK USAGE:
============
from wordpiece import VocabularyConfig, WordpieceTokenizer, load_vocab

vocab = load_vocab("vocab.txt", VocabularyConfig(unknown_token="[UNK]"))
tokenizer = WordpieceTokenizer(vocab, unknown_token="[UNK]", max_input_chars=200)
ids = tokenizer.token_to_ids(tokenizer.tokenize("i want to make a transfer"))
"""

from .config import (
    BERT_UNKNOWN_TOKEN,
    DEFAULT_MAX_INPUT_CHARS,
    DEFAULT_UNKNOWN_TOKEN,
    TokenizerConfig,
    VocabularyConfig,
)
from .errors import (
    InvalidConfigurationError,
    InvariantViolationError,
    UndefinedTokenError,
    WordpieceError,
)
from .vocabulary import Counted, Frequency, Pinned, TokenInfo, Vocabulary, build_vocabulary
from .vocab_utils import TRIMMED_CHARS, VocabularyBuilder, load_vocab, read_lines, strip_edges
from .wordpiece_tokenizer import CONTINUATION_PREFIX, WordpieceTokenizer

__all__ = [
    # Configuration
    "BERT_UNKNOWN_TOKEN",
    "DEFAULT_MAX_INPUT_CHARS",
    "DEFAULT_UNKNOWN_TOKEN",
    "TokenizerConfig",
    "VocabularyConfig",
    # Errors
    "WordpieceError",
    "InvalidConfigurationError",
    "InvariantViolationError",
    "UndefinedTokenError",
    # Vocabulary
    "Counted",
    "Pinned",
    "Frequency",
    "TokenInfo",
    "Vocabulary",
    "build_vocabulary",
    "VocabularyBuilder",
    "load_vocab",
    "read_lines",
    "strip_edges",
    "TRIMMED_CHARS",
    # Tokenizer
    "CONTINUATION_PREFIX",
    "WordpieceTokenizer",
]
