"""Core types."""

from __future__ import annotations
import time
import uuid
from dataclasses import dataclass, field


@dataclass(slots=True)
class DetectionResult:
    """Result of scanning one message."""
    per_word: dict[str, int] = field(default_factory=dict)  # word → occurrences
    tier: str | None = None        # "exact" | "substring" | "bypass" | None

    @property
    def total(self) -> int:
        return sum(self.per_word.values())

    def __bool__(self) -> bool:
        return self.total > 0

    def to_events(
        self,
        user_id: str,
        username: str,
        raw_text: str,
        *,
        timestamp: float | None = None,
    ) -> list[SwearEvent]:
        """One event per counted occurrence, each carrying the full breakdown.

        Leaderboards are then a plain row count.
        """
        if not self.per_word:
            return []
        ts = time.time() if timestamp is None else timestamp
        batch_id = uuid.uuid4().hex
        return [
            SwearEvent(
                user_id=user_id,
                username=username,
                message_content=raw_text,
                words_used=dict(self.per_word),
                timestamp=ts,
                batch_id=batch_id,
            )
            for _ in range(self.total)
        ]


@dataclass(frozen=True, slots=True)
class SwearEvent:
    """A single stored occurrence."""
    user_id: str
    username: str
    message_content: str
    words_used: dict[str, int]
    timestamp: float
    batch_id: str          # shared by every event emitted for one message


@dataclass(frozen=True, slots=True)
class WordCount:
    word: str
    count: int


@dataclass(slots=True)
class UserStats:
    user_id: str
    total: int
    word_counts: dict[str, int] = field(default_factory=dict)
    first_seen: float | None = None
    last_seen: float | None = None

    @property
    def top_words(self) -> list[WordCount]:
        return [
            WordCount(w, c)
            for w, c in sorted(self.word_counts.items(), key=lambda kv: (-kv[1], kv[0]))
        ]


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    user_id: str
    username: str
    count: int


@dataclass(frozen=True, slots=True)
class RecentMessage:
    content: str
    words_used: dict[str, int]
    timestamp: float


@dataclass(slots=True)
class OverallStats:
    total: int = 0
    unique_users: int = 0
    top_words: list[WordCount] = field(default_factory=list)
    hourly: dict[int, int] = field(default_factory=dict)   # UTC hour → events
