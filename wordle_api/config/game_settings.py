"""
Game Configuration Constants Module

Game rules and constants shared by the game engine, the statistics engine
and the account linking protocol. Word list helpers work on any list so the
same checks apply to words loaded from the store or from the bundled file.
"""

import json
from typing import FrozenSet, Final, Iterable, List

WORD_LENGTH: Final[int] = 5

MAX_ATTEMPTS: Final[int] = 6
"""
Maximum number of guess attempts allowed per game.
Type: Final[int] - Immutable to prevent accidental modification
"""

FALLBACK_WORDS: Final[List[str]] = ["PLATO", "PRADO", "PLACA", "BRAZO", "CAMPO"]
"""Used when neither the store nor the word list file yields any word."""

COMMON_LETTERS: Final[FrozenSet[str]] = frozenset("EARIOTNSLCU")
"""Letters considered common when classifying the difficulty of a target word."""

PIN_LENGTH: Final[int] = 4
PIN_MAX_GENERATION_TRIES: Final[int] = 50

HISTORY_DEFAULT_LIMIT: Final[int] = 20
HISTORY_MAX_LIMIT: Final[int] = 100


def normalize_words(words: Iterable[str]) -> List[str]:
    """
    Uppercase a raw word list, dropping anything that is not a
    WORD_LENGTH alphabetic word and collapsing duplicates (order kept).
    """
    seen = set()
    normalized = []
    for word in words:
        if not isinstance(word, str):
            continue
        candidate = word.strip().upper()
        if len(candidate) != WORD_LENGTH or not candidate.isalpha():
            continue
        if candidate in seen:
            continue
        seen.add(candidate)
        normalized.append(candidate)
    return normalized


def load_word_file(path: str) -> List[str]:
    """
    Load word list from a JSON file containing an array of words.

    Returns:
        List[str]: Normalized uppercase 5-letter words

    Raises:
        FileNotFoundError: If the file is not found
        ValueError: If the JSON is malformed or is not an array
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            word_list = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(word_list, list):
        raise ValueError("JSON file must contain an array of words")

    return normalize_words(word_list)


def validate_word_list(words: List[str]) -> bool:
    """
    Validates the integrity and consistency of a word list.

    Ensures the list is non-empty, every word is exactly WORD_LENGTH
    uppercase alphabetic characters and there are no duplicates.

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not words:
        raise ValueError("Word list cannot be empty")

    for index, word in enumerate(words):
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word at index {index} '{word}' is not {WORD_LENGTH} characters long")

        if not word.isalpha():
            raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")

        if not word.isupper():
            raise ValueError(f"Word at index {index} '{word}' is not in uppercase format")

    if len(words) != len(set(words)):
        duplicates = sorted({word for word in words if words.count(word) > 1})
        raise ValueError(f"Duplicate words found in word list: {duplicates}")

    return True

