"""
Tests for the WordpieceTokenizer.
"""

import logging

import pytest
import torch

from wordpiece import (
    InvalidConfigurationError,
    InvariantViolationError,
    TokenizerConfig,
    UndefinedTokenError,
    Vocabulary,
    VocabularyConfig,
    WordpieceTokenizer,
)


def _tokenizer(tokens, max_input_chars=200, unknown_token="[UNK]"):
    vocab = Vocabulary.from_tokens(tokens, VocabularyConfig(unknown_token="[UNK]"))
    return WordpieceTokenizer(vocab, unknown_token=unknown_token, max_input_chars=max_input_chars)


def test_whole_words_sentence(transfer_vocab):
    """Every word of the sentence is a vocabulary entry, so nothing is split or unknown."""
    tokenizer = WordpieceTokenizer(transfer_vocab, "[UNK]", 200)

    tokens = tokenizer.tokenize("i want to make a transfer to israel")

    assert tokens == ["i", "want", "to", "make", "a", "transfer", "to", "israel"]
    assert tokenizer.token_to_ids(tokens) == [0, 1, 2, 3, 4, 5, 2, 6]


def test_matching_is_case_sensitive(transfer_vocab):
    tokenizer = WordpieceTokenizer(transfer_vocab, "[UNK]", 200)

    assert tokenizer.tokenize("I want") == ["[UNK]", "want"]


def test_word_split_with_continuation_piece():
    tokenizer = _tokenizer(["make", "##r"])

    assert tokenizer.tokenize("maker") == ["make", "##r"]


def test_word_without_valid_split_is_unknown():
    """'make' matches but no '##r' or '##ker' exists, so the whole word is unknown."""
    tokenizer = _tokenizer(["make", "r", "ker"])

    assert tokenizer.tokenize("maker") == ["[UNK]"]


def test_partial_pieces_are_discarded(bert_tokenizer):
    assert bert_tokenizer.tokenize("he plays playx") == ["he", "play", "##s", "[UNK]"]


def test_only_non_initial_pieces_are_marked(bert_tokenizer):
    tokens = bert_tokenizer.tokenize("unaffable")

    assert tokens == ["un", "##aff", "##able"]
    assert not tokens[0].startswith("##")
    assert all(token.startswith("##") for token in tokens[1:])


def test_longest_match_wins():
    tokenizer = _tokenizer(["a", "ab", "##bc", "##c"])

    assert tokenizer.tokenize("abc") == ["ab", "##c"]


def test_whole_word_match_is_not_split():
    tokenizer = _tokenizer(["play", "##ing", "playing"])

    assert tokenizer.tokenize("playing") == ["playing"]


def test_word_longer_than_max_input_chars_is_unknown():
    """A word over the limit becomes a single placeholder even when it is in the vocabulary."""
    tokenizer = _tokenizer(["abcde", "abcdef", "a", "##b", "##c", "##d", "##e", "##f"], max_input_chars=5)

    assert tokenizer.tokenize("abcdef") == ["[UNK]"]
    assert tokenizer.tokenize("abcde abcdef") == ["abcde", "[UNK]"]


def test_unknown_placeholder_may_differ_from_vocabulary_unknown_token(transfer_vocab):
    """Two tokenizers can share a vocabulary with different placeholders."""
    first = WordpieceTokenizer(transfer_vocab, "[UNK]", 200)
    second = WordpieceTokenizer(transfer_vocab, "<oov>", 200)

    assert first.tokenize("i bank") == ["i", "[UNK]"]
    assert second.tokenize("i bank") == ["i", "<oov>"]
    # The vocabulary resolves the foreign placeholder to its own unknown token
    assert second.encode("i bank") == [0, 7]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("", []),
        ("   ", []),
        ("  he  was ", ["he", "was"]),
        ("he\twas", ["[UNK]"]),
    ],
)
def test_whitespace_handling(bert_tokenizer, text, expected):
    """Only single spaces separate words; empty fragments produce nothing."""
    assert bert_tokenizer.tokenize(text) == expected


@pytest.mark.parametrize(
    "text",
    ["he was playing", "unaffable plays", "completely unknown words", "", "he  was"],
)
def test_ids_have_one_entry_per_token(bert_tokenizer, text):
    tokens = bert_tokenizer.tokenize(text)

    assert len(bert_tokenizer.token_to_ids(tokens)) == len(tokens)


def test_token_to_ids_without_fallback_raises(caplog):
    vocab = Vocabulary.from_tokens(["he", "was"])

    with caplog.at_level(logging.WARNING, logger="wordpiece.wordpiece_tokenizer"):
        tokenizer = WordpieceTokenizer(vocab, "[UNK]", 200)
    assert "[UNK]" in caplog.text

    tokens = tokenizer.tokenize("he wasnt")
    assert tokens == ["he", "[UNK]"]
    with pytest.raises(UndefinedTokenError):
        tokenizer.token_to_ids(tokens)


def test_only_control_characters_and_spaces_are_trimmed(bert_tokenizer):
    """Edge tabs and newlines are trimmed, but other Unicode whitespace stays part of the word."""
    assert bert_tokenizer.tokenize("\the was\n") == ["he", "was"]
    assert bert_tokenizer.tokenize("he was\xa0") == ["he", "[UNK]"]


def test_settings_are_read_from_config(bert_vocab):
    tokenizer = WordpieceTokenizer(bert_vocab, "<oov>", 10)

    assert tokenizer.config == TokenizerConfig(unknown_token="<oov>", max_input_chars=10)
    assert tokenizer.unknown_token == "<oov>"
    assert tokenizer.max_input_chars == 10
    with pytest.raises(AttributeError):
        tokenizer.max_input_chars = 20


def test_too_many_pieces_raises():
    tokenizer = _tokenizer(["a", "##b", "##c", "##d"], max_input_chars=3)

    # The length check in tokenize() normally prevents this
    with pytest.raises(InvariantViolationError):
        tokenizer._split_word("abcd", "abcd")


def test_invalid_max_input_chars(bert_vocab):
    with pytest.raises(InvalidConfigurationError):
        WordpieceTokenizer(bert_vocab, "[UNK]", 0)


def test_from_config(bert_vocab):
    tokenizer = WordpieceTokenizer.from_config(bert_vocab, TokenizerConfig(max_input_chars=4))

    assert tokenizer.max_input_chars == 4
    assert tokenizer.tokenize("he playing") == ["he", "[UNK]"]


def test_ids_to_tensor(bert_tokenizer):
    ids = bert_tokenizer.encode("he was playing")
    tensor = bert_tokenizer.ids_to_tensor(ids)

    assert tensor.shape == (1, 4)
    assert tensor.dtype == torch.long
    assert tensor[0].tolist() == [11, 12, 8, 9]


def test_convert_ids_to_tokens(bert_tokenizer):
    assert bert_tokenizer.convert_ids_to_tokens([8, 9, 99]) == ["play", "##ing", "[UNK]"]


def test_decode_merges_continuation_pieces(bert_tokenizer):
    ids = bert_tokenizer.encode("he was playing unaffable")

    assert bert_tokenizer.decode(ids) == "he was playing unaffable"


def test_decode_accepts_tensor_ids(bert_tokenizer):
    tensor = bert_tokenizer.ids_to_tensor(bert_tokenizer.encode("he plays"))

    assert bert_tokenizer.decode(tensor[0]) == "he plays"


@pytest.mark.parametrize(
    "text",
    [
        "he was playing",
        "unaffable plays",
        "he playx unaffable",
        "was was was",
        "he  was",
        "he\twas",
        "he\nwas playing",
        "he\xa0was",
        "\xa0he was",
        "\the was \n",
    ],
)
def test_hf_export_matches_tokenize(bert_tokenizer, text):
    hf_tokenizer = bert_tokenizer.to_hf_tokenizer()
    encoding = hf_tokenizer.encode(text)

    assert encoding.tokens == bert_tokenizer.tokenize(text)
    assert encoding.ids == bert_tokenizer.encode(text)


def test_hf_export_requires_placeholder_in_vocabulary(transfer_vocab):
    tokenizer = WordpieceTokenizer(transfer_vocab, "<oov>", 200)

    with pytest.raises(InvalidConfigurationError):
        tokenizer.to_hf_tokenizer()


if __name__ == "__main__":
    pytest.main([__file__])
