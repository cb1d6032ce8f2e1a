"""
Tests for the configuration records.
"""

import dataclasses
import json

import pytest

from wordpiece import DEFAULT_UNKNOWN_TOKEN, InvalidConfigurationError, TokenizerConfig, VocabularyConfig


def test_vocabulary_config_defaults_disable_pruning():
    config = VocabularyConfig()

    assert not config.min_frequency_enabled
    assert not config.max_tokens_enabled
    assert config.unknown_token is None
    assert config.all_reserved_tokens == frozenset()


def test_unknown_token_is_reserved():
    config = VocabularyConfig(unknown_token="[UNK]", reserved_tokens=["[PAD]", "[PAD]"])

    assert config.reserved_tokens == frozenset({"[PAD]"})
    assert config.all_reserved_tokens == frozenset({"[PAD]", "[UNK]"})


def test_validate_counts_unknown_token():
    VocabularyConfig(max_tokens=1, unknown_token="[UNK]").validate()

    with pytest.raises(InvalidConfigurationError):
        VocabularyConfig(max_tokens=1, unknown_token="[UNK]", reserved_tokens={"[PAD]"}).validate()


def test_vocabulary_config_is_frozen():
    config = VocabularyConfig()

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.max_tokens = 10


def test_vocabulary_config_serializes_to_json():
    config = VocabularyConfig(min_frequency=3, max_tokens=100, unknown_token="[UNK]", reserved_tokens={"[SEP]", "[CLS]"})
    payload = json.dumps(config.to_dict())

    assert json.loads(payload)["reserved_tokens"] == ["[CLS]", "[SEP]"]
    assert VocabularyConfig.from_dict(json.loads(payload)) == config


def test_with_default_unknown_token():
    config = VocabularyConfig.with_default_unknown_token(max_tokens=10, reserved_tokens={"<pad>"})

    assert config.unknown_token == DEFAULT_UNKNOWN_TOKEN == "<unk>"
    assert config.max_tokens == 10
    assert config.all_reserved_tokens == frozenset({"<pad>", "<unk>"})


def test_tokenizer_config_defaults():
    config = TokenizerConfig()

    assert config.unknown_token == "[UNK]"
    assert config.max_input_chars == 200
    assert TokenizerConfig.from_dict({}) == config
    assert TokenizerConfig.from_dict(TokenizerConfig(max_input_chars=50).to_dict()).max_input_chars == 50


@pytest.mark.parametrize("max_input_chars", [0, -5])
def test_tokenizer_config_rejects_non_positive_max_input_chars(max_input_chars):
    with pytest.raises(InvalidConfigurationError):
        TokenizerConfig(max_input_chars=max_input_chars)


if __name__ == "__main__":
    pytest.main([__file__])
