"""SwearTracker: detection plus persistence, the entry point for chat glue.

Usage:

    tracker = SwearTracker.create(db_path="events.db")
    tracker.load_custom_words()

    # For every inbound message
    result = tracker.process_message(user_id, username, text)
    if result:
        notify(pick_response(username, result.total))

    # Admin commands
    tracker.add_custom_word("frick", added_by=admin_id)
    tracker.remove_custom_word("frick")
"""

from __future__ import annotations
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from .detector import Detector, DetectorConfig
from .events_sqlite import MEMORY, SqliteEventStore
from .types import DetectionResult, LeaderboardEntry, OverallStats, RecentMessage, UserStats

logger = logging.getLogger(__name__)


@dataclass
class SwearTracker:
    """Runs the detector on messages and records what it finds."""

    detector: Detector
    store: SqliteEventStore

    @classmethod
    def create(
        cls,
        *,
        config: DetectorConfig | None = None,
        db_path: str | Path = MEMORY,
    ) -> "SwearTracker":
        """Factory: fresh detector with its own event store."""
        return cls(detector=Detector(config), store=SqliteEventStore(db_path))

    def process_message(self, user_id: str, username: str, text: str) -> DetectionResult:
        """Detect and, if anything was found, write one event per occurrence.

        A storage failure is logged and leaves detection state untouched.
        """
        result = self.detector.detect(text)
        if not result:
            return result

        logger.info(
            "User %s (%s) used %d tracked word(s): %s",
            username, user_id, result.total, ", ".join(result.per_word),
        )
        try:
            self.store.record(result.to_events(user_id, username, text))
        except sqlite3.Error:
            logger.exception("Failed to record events for %s (%s)", username, user_id)
        return result

    # ------------------------------------------------------------------
    # Word list (persisted)
    # ------------------------------------------------------------------

    def load_custom_words(self) -> int:
        """Load persisted custom words into the detector. Returns the number added."""
        added = sum(1 for word in self.store.custom_words() if self.detector.add_word(word))
        if added:
            logger.info("Loaded %d custom word(s) from storage", added)
        return added

    def add_custom_word(self, word: str, added_by: str | None = None) -> bool:
        word = word.lower().strip()
        if self.detector.contains(word):
            return False
        try:
            self.store.add_custom_word(word, added_by)
        except sqlite3.Error:
            logger.exception("Failed to persist custom word %r", word)
            return False
        return self.detector.add_word(word)

    def remove_custom_word(self, word: str) -> bool:
        word = word.lower().strip()
        if not self.detector.contains(word) or self.detector.store.is_builtin(word):
            return False
        try:
            self.store.remove_custom_word(word)
        except sqlite3.Error:
            logger.exception("Failed to delete custom word %r", word)
            return False
        return self.detector.remove_word(word)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def user_stats(self, user_id: str) -> UserStats | None:
        return self.store.user_stats(user_id)

    def recent_messages(self, user_id: str, limit: int = 10) -> list[RecentMessage]:
        return self.store.recent_messages(user_id, limit)

    def leaderboard(self, limit: int = 10) -> list[LeaderboardEntry]:
        return self.store.leaderboard(limit)

    def overall_stats(self) -> OverallStats:
        return self.store.overall_stats()

    def word_top_users(self, word: str, limit: int = 5) -> list[LeaderboardEntry]:
        return self.store.word_top_users(word, limit)

    def reset_user(self, user_id: str) -> bool:
        try:
            self.store.reset_user(user_id)
        except sqlite3.Error:
            logger.exception("Failed to reset user %s", user_id)
            return False
        return True

    def clear_all(self) -> bool:
        try:
            self.store.clear_all()
        except sqlite3.Error:
            logger.exception("Failed to clear event data")
            return False
        return True

    @property
    def stats(self) -> dict:
        return {
            "tracked_words": self.detector.store.size,
            "custom_words": sorted(self.detector.store.custom),
            "events": self.store.size,
        }

    def close(self) -> None:
        self.store.close()
