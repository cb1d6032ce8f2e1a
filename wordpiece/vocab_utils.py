"""
Vocabulary Loading Utilities

This module provides utilities for loading vocabularies from files and for
accumulating token sequences before a Vocabulary is built.

VOCABULARY FORMAT:
==================
A vocabulary file (typically vocab.txt) contains one token per line.
Spaces and control characters around each line are trimmed, blank lines are
skipped, and the order of the remaining lines becomes the token IDs.

Example vocab.txt:
    [PAD]       # ID: 0
    [UNK]       # ID: 1
    [CLS]       # ID: 2
    [SEP]       # ID: 3
    [MASK]      # ID: 4
    the         # ID: 5
    ##ing       # ID: 6
    ...

Reserved tokens that are missing from the file (for example an unknown token
the file does not contain) are appended after the last line.
"""

import os
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from transformers.utils import logging

from .config import VocabularyConfig
from .vocabulary import Vocabulary, build_vocabulary


logger = logging.get_logger(__name__)

Source = TypeVar("Source")

# Control characters and the space (U+0000 to U+0020). Other Unicode whitespace,
# such as U+00A0 or U+3000, is kept because it can be a vocabulary token.
TRIMMED_CHARS = "".join(chr(code) for code in range(0x21))


def strip_edges(text: str) -> str:
    """Removes control characters and spaces from both ends of text."""
    return text.strip(TRIMMED_CHARS)


def read_lines(vocab_file: str, trim: bool = False) -> List[str]:
    """
    Reads all lines from a UTF-8 text file.

    Args:
        vocab_file (str): Path to the file
        trim (bool, optional): Strip every line and drop the empty ones. Defaults to False.

    Returns:
        List[str]: The lines without their line terminators. A missing file yields an
        empty list.
    """
    if not os.path.exists(vocab_file):
        logger.warning(f"Vocabulary file {vocab_file} does not exist, no tokens were read")
        return []

    lines = []
    with open(vocab_file, "r", encoding="utf-8") as reader:
        for line in reader:
            line = line.rstrip("\r\n")
            if trim:
                line = strip_edges(line)
                if not line:
                    continue
            lines.append(line)
    return lines


class VocabularyBuilder:
    """
    Accumulates token sequences, then builds a Vocabulary.

    The builder owns its sentence list and is meant to be used from a single
    thread. The Vocabulary returned by build() is independent of it.

    Args:
        config (VocabularyConfig, optional): Settings applied when building

    Example:
        >>> builder = VocabularyBuilder(VocabularyConfig(unknown_token="[UNK]"))
        >>> builder.add_from_text_file("vocab.txt")
        >>> builder.add(["extra", "tokens"])
        >>> vocab = builder.build()
    """

    def __init__(self, config: Optional[VocabularyConfig] = None):
        self.config = config if config is not None else VocabularyConfig()
        self._sentences: List[Sequence[str]] = []

    def add(self, sentence: Sequence[str]) -> None:
        self._sentences.append(list(sentence))

    def add_all(self, sentences: Iterable[Sequence[str]]) -> None:
        for sentence in sentences:
            self.add(sentence)

    def add_from_text_file(self, vocab_file: str) -> None:
        """Adds the trimmed, non-empty lines of a vocab file as one sentence."""
        self.add(read_lines(vocab_file, trim=True))

    def add_from_customized_file(self, source: Source, parser: Callable[[Source], Sequence[str]]) -> None:
        """Adds the tokens produced by a custom parser for a vocabulary in another format."""
        self.add(parser(source))

    def build(self) -> Vocabulary:
        return build_vocabulary(self._sentences, self.config)


def load_vocab(vocab_file: str, config: Optional[VocabularyConfig] = None) -> Vocabulary:
    """
    Loads a vocabulary file into a Vocabulary.

    Args:
        vocab_file (str): Path to the vocabulary file (e.g., "vocab.txt")
        config (VocabularyConfig, optional): Pruning and reserved token settings

    Returns:
        Vocabulary: Tokens indexed by line order

    Example:
        >>> vocab = load_vocab("vocab.txt", VocabularyConfig(unknown_token="[UNK]"))
        >>> vocab.get_index("[CLS]")
        2
    """
    builder = VocabularyBuilder(config)
    builder.add_from_text_file(vocab_file)
    vocab = builder.build()
    logger.info(f"Loaded vocabulary of {vocab.size()} tokens from {vocab_file}")
    return vocab


__all__ = ["TRIMMED_CHARS", "strip_edges", "read_lines", "VocabularyBuilder", "load_vocab"]
