"""Word-list store: the active tracked words and their bypass patterns.

Design goals:
  - Built-in words are permanent; custom words come and go at runtime
  - The word set and its pattern cache change together: a reader never sees
    a word without its pattern, or a pattern for a removed word
  - Readers never block: mutations build a new snapshot and swap it in
"""

from __future__ import annotations
import logging
import re
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from .patterns import compile_bypass_pattern

logger = logging.getLogger(__name__)


def _clean(word: str) -> str:
    return word.lower().strip()


@dataclass(frozen=True, slots=True)
class WordSnapshot:
    """Immutable view of the word set plus compiled patterns."""
    words: frozenset[str]
    patterns: Mapping[str, re.Pattern | None]   # None = compilation failed

    def __iter__(self):
        return iter(sorted(self.words))

    def __len__(self) -> int:
        return len(self.words)


class WordListStore:
    """Thread-safe set of tracked words, copy-on-write."""

    __slots__ = ("_builtins", "_snapshot", "_lock")

    def __init__(self, builtins: Iterable[str] = (), extra: Iterable[str] = ()) -> None:
        self._builtins = frozenset(_clean(w) for w in builtins if w and w.strip())
        self._lock = threading.Lock()
        words = self._builtins | {_clean(w) for w in extra if w and w.strip()}
        self._snapshot = WordSnapshot(
            words=frozenset(words),
            patterns=MappingProxyType({w: compile_bypass_pattern(w) for w in words}),
        )
        logger.info("Word list initialised with %d tracked words", len(words))

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def add_word(self, word: str) -> bool:
        """Track ``word``. False if it is already tracked."""
        word = _clean(word)
        with self._lock:
            current = self._snapshot
            if word in current.words:
                return False
            patterns = dict(current.patterns)
            patterns[word] = compile_bypass_pattern(word)
            self._snapshot = WordSnapshot(
                words=current.words | {word},
                patterns=MappingProxyType(patterns),
            )
        logger.info("Added word %r to the tracked list", word)
        return True

    def remove_word(self, word: str) -> bool:
        """Stop tracking ``word``. False if unknown or built-in."""
        word = _clean(word)
        with self._lock:
            current = self._snapshot
            if word not in current.words or word in self._builtins:
                return False
            patterns = dict(current.patterns)
            patterns.pop(word, None)
            self._snapshot = WordSnapshot(
                words=current.words - {word},
                patterns=MappingProxyType(patterns),
            )
        logger.info("Removed word %r from the tracked list", word)
        return True

    def contains(self, word: str) -> bool:
        return _clean(word) in self._snapshot.words

    def all(self) -> frozenset[str]:
        return self._snapshot.words

    def snapshot(self) -> WordSnapshot:
        """Consistent view for one detection call."""
        return self._snapshot

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def is_builtin(self, word: str) -> bool:
        return _clean(word) in self._builtins

    def pattern_for(self, word: str) -> re.Pattern | None:
        return self._snapshot.patterns.get(_clean(word))

    @property
    def builtins(self) -> frozenset[str]:
        return self._builtins

    @property
    def custom(self) -> frozenset[str]:
        return self._snapshot.words - self._builtins

    @property
    def size(self) -> int:
        return len(self._snapshot.words)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.contains(word)
