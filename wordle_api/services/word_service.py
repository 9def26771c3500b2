"""
Word Service

Supplies the 5-letter vocabulary. The list is loaded once per process and
kept in memory; it is never reloaded mid-process, so words added to the
store later are only picked up after a restart.
"""

import logging
import random
import threading
from typing import List, Optional

from ..config.game_settings import FALLBACK_WORDS, load_word_file, normalize_words, validate_word_list
from ..errors import EmptyVocabulary

logger = logging.getLogger(__name__)


class WordService:
    """
    Cached vocabulary accessor.

    Load order: the store's ``words`` collection, then the bundled JSON word
    list, then FALLBACK_WORDS.
    """

    def __init__(self, store=None, word_file: Optional[str] = None, words: Optional[List[str]] = None):
        self.store = store
        self.word_file = word_file
        self._preset = words
        self._words: Optional[List[str]] = None
        self._word_set = frozenset()
        self.source: Optional[str] = None
        self._lock = threading.Lock()

    def _load(self):
        if self._preset is not None:
            return normalize_words(self._preset), "preset"

        if self.store is not None:
            try:
                words = normalize_words(self.store.load_words())
                if words and validate_word_list(words):
                    logger.info("Loaded %d words from the store", len(words))
                    return words, "store"
            except Exception as e:
                logger.error("Failed to load words from the store: %s", e)

        if self.word_file:
            try:
                words = load_word_file(self.word_file)
                if words and validate_word_list(words):
                    logger.info("Loaded %d words from %s", len(words), self.word_file)
                    return words, "file"
            except (OSError, ValueError) as e:
                logger.error("Failed to load word list file %s: %s", self.word_file, e)

        logger.warning("Using fallback word list")
        return list(FALLBACK_WORDS), "fallback"

    def get_words(self) -> List[str]:
        """Return the cached vocabulary, loading it on first use."""
        if self._words is None:
            with self._lock:
                if self._words is None:
                    words, source = self._load()
                    self._word_set = frozenset(words)
                    self.source = source
                    self._words = words
        return self._words

    def get_random_word(self) -> str:
        words = self.get_words()
        if not words:
            raise EmptyVocabulary()
        return random.choice(words)

    def is_valid_word(self, candidate: str) -> bool:
        if not candidate:
            return False
        self.get_words()
        return candidate.strip().upper() in self._word_set


# Global service instance
_word_service = None


def get_word_service() -> Optional[WordService]:
    """Get the global word service instance."""
    return _word_service


def initialize_word_service(store=None, word_file: Optional[str] = None) -> WordService:
    """Initialize the global word service instance."""
    global _word_service
    _word_service = WordService(store=store, word_file=word_file)
    return _word_service
