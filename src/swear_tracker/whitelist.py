"""Whitelist: safe words that exempt a message from detection.

The policy is coarse on purpose: a single whitelisted token anywhere in the
message exempts the whole message, not just that token.
"""

from __future__ import annotations
from typing import Iterable


class Whitelist:
    """Static set of safe words, compared against whitespace tokens."""

    __slots__ = ("_words",)

    def __init__(self, words: Iterable[str] = ()) -> None:
        self._words = frozenset(w.lower().strip() for w in words if w and w.strip())

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._words

    def __len__(self) -> int:
        return len(self._words)

    def exempt_token(self, text: str) -> str | None:
        """Return the first token that exempts ``text``, if any."""
        for token in text.split():
            if token.lower() in self._words:
                return token
        return None

    def exempts(self, text: str) -> bool:
        return self.exempt_token(text) is not None

    @property
    def words(self) -> frozenset[str]:
        return self._words
