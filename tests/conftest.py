"""
Shared fixtures for the wordpiece tests.
"""

import pytest

from wordpiece import Vocabulary, VocabularyConfig, WordpieceTokenizer


TRANSFER_TOKENS = ["i", "want", "to", "make", "a", "transfer", "israel", "[UNK]"]

# Small BERT style vocab with special tokens first and continuation pieces
BERT_TOKENS = [
    "[PAD]",
    "[UNK]",
    "[CLS]",
    "[SEP]",
    "[MASK]",
    "un",
    "##aff",
    "##able",
    "play",
    "##ing",
    "##s",
    "he",
    "was",
]


@pytest.fixture
def transfer_vocab():
    return Vocabulary.from_tokens(TRANSFER_TOKENS, VocabularyConfig(unknown_token="[UNK]"))


@pytest.fixture
def bert_vocab():
    return Vocabulary.from_tokens(BERT_TOKENS, VocabularyConfig(unknown_token="[UNK]"))


@pytest.fixture
def bert_tokenizer(bert_vocab):
    return WordpieceTokenizer(bert_vocab, unknown_token="[UNK]", max_input_chars=200)
