"""Detector: the main API.  Tiered: exact words, then substrings, then bypasses.

Usage:
    from swear_tracker import Detector

    detector = Detector()                 # built-in words + whitelist
    result = detector.detect("well sh!t")
    print(result.per_word, result.total)  # {"shit": 1} 1

    detector.add_word("frick")            # visible to the next detect()
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field

from .defaults import BUILTIN_WORDS, WHITELIST
from .normalize import normalize
from .patterns import collapse_runs
from .types import DetectionResult
from .whitelist import Whitelist
from .wordlist import WordListStore, WordSnapshot

logger = logging.getLogger(__name__)

TIER_EXACT = "exact"
TIER_SUBSTRING = "substring"
TIER_BYPASS = "bypass"


@dataclass
class DetectorConfig:
    """Configuration for the Detector."""
    words: set[str] = field(default_factory=lambda: set(BUILTIN_WORDS))   # built-ins
    extra_words: set[str] = field(default_factory=set)    # removable at runtime
    whitelist: set[str] = field(default_factory=lambda: set(WHITELIST))
    # Shorter words only count as whole words ("as" inside "class")
    min_substring_length: int = 3


class Detector:
    """Tiered word detector.

    Tier 1: Whole-word matches on the normalised text (counted)
    Tier 2: Embedded substrings, only if tier 1 found nothing (counted)
    Tier 3: Bypass patterns, only if tiers 1-2 found nothing (presence, 1 each)

    The first tier with any finding decides the whole message; a single exact
    match elsewhere hides every substring or bypass spelling in the same
    message.
    """

    def __init__(self, config: DetectorConfig | None = None) -> None:
        self.config = config or DetectorConfig()
        self.store = WordListStore(self.config.words, self.config.extra_words)
        self.whitelist = Whitelist(self.config.whitelist)

    def detect(self, raw_text: str) -> DetectionResult:
        """Scan one message and return per-word counts."""
        if not raw_text or not raw_text.strip():
            return DetectionResult()

        text = normalize(raw_text)

        # --- Whitelist: one safe token exempts the whole message ---
        token = self.whitelist.exempt_token(text)
        if token is not None:
            logger.debug("Skipping message with whitelisted token %r", token)
            return DetectionResult()

        words = self.store.snapshot()

        # --- Tier 1: exact whole words ---
        found = self._scan_exact(text, words)
        if found:
            return self._result(found, TIER_EXACT)

        # --- Tier 2: embedded substrings ---
        found = self._scan_substring(text, words)
        if found:
            return self._result(found, TIER_SUBSTRING)

        # --- Tier 3: bypass patterns ---
        found = self._scan_bypass(text, words)
        if found:
            return self._result(found, TIER_BYPASS)

        return DetectionResult()

    # ------------------------------------------------------------------
    # Word list
    # ------------------------------------------------------------------

    def add_word(self, word: str) -> bool:
        return self.store.add_word(word)

    def remove_word(self, word: str) -> bool:
        return self.store.remove_word(word)

    def contains(self, word: str) -> bool:
        return self.store.contains(word)

    def words(self) -> frozenset[str]:
        return self.store.all()

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    def _scan_exact(self, text: str, words: WordSnapshot) -> dict[str, int]:
        found: dict[str, int] = {}
        for word in words:
            if not word:
                continue
            # ASCII \b: a lookalike letter such as "σ" still ends a word
            count = len(re.findall(rf"\b{re.escape(word)}\b", text, re.IGNORECASE | re.ASCII))
            if count:
                found[word] = count
        return found

    def _scan_substring(self, text: str, words: WordSnapshot) -> dict[str, int]:
        found: dict[str, int] = {}
        for word in words:
            if len(word) < self.config.min_substring_length:
                continue
            count = len(re.findall(re.escape(word), text, re.IGNORECASE))
            if count:
                found[word] = count
        return found

    def _scan_bypass(self, text: str, words: WordSnapshot) -> dict[str, int]:
        found: dict[str, int] = {}
        texts = {text, collapse_runs(text)}
        for word in words:
            pattern = words.patterns.get(word)
            if pattern is not None and any(pattern.search(t) for t in texts):
                found[word] = 1
        return found

    def _result(self, found: dict[str, int], tier: str) -> DetectionResult:
        result = DetectionResult(per_word=found, tier=tier)
        logger.info(
            "Detected %d occurrence(s) via %s match: %s",
            result.total, tier, ", ".join(f"{w}×{c}" for w, c in found.items()),
        )
        return result
