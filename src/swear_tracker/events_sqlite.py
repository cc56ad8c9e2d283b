"""Event store backed by SQLite: history, leaderboards and word stats.

Each counted occurrence is its own row, so a user's total and the
leaderboard are plain row counts.  Rows written for the same message share a
``batch_id``; per-word figures are computed once per message so the
duplication does not inflate them.

Usage:
    store = SqliteEventStore("~/.swear-tracker/events.db")
    store.record(result.to_events(user_id, username, text))
    store.leaderboard(limit=10)
"""

from __future__ import annotations
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Iterable

from .types import (
    LeaderboardEntry,
    OverallStats,
    RecentMessage,
    SwearEvent,
    UserStats,
    WordCount,
)

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS swear_events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    batch_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    username TEXT NOT NULL,
    message_content TEXT NOT NULL,
    words_used TEXT NOT NULL,
    timestamp REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_events_user
    ON swear_events(user_id, timestamp);
CREATE INDEX IF NOT EXISTS idx_events_batch
    ON swear_events(batch_id);
CREATE TABLE IF NOT EXISTS custom_words (
    word TEXT PRIMARY KEY,
    added_by TEXT,
    added_at REAL NOT NULL
);
"""

# One row per message: the per-word map is identical on every row of a batch
_MESSAGES = "SELECT DISTINCT batch_id, user_id, username, words_used FROM swear_events"


class SqliteEventStore:
    """Persistent occurrence log plus the custom word list."""

    __slots__ = ("_db", "_path")

    def __init__(self, db_path: str | Path = MEMORY) -> None:
        if str(db_path) == MEMORY:
            self._path = MEMORY
        else:
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            self._path = str(path)
        self._db = sqlite3.connect(self._path, check_same_thread=False)
        self._db.executescript(_SCHEMA)

    @property
    def path(self) -> str:
        return self._path

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def record(self, events: Iterable[SwearEvent]) -> int:
        """Insert events in one transaction. Returns the number written."""
        rows = [
            (
                e.batch_id,
                e.user_id,
                e.username,
                e.message_content,
                json.dumps(e.words_used, ensure_ascii=False),
                e.timestamp,
            )
            for e in events
        ]
        if not rows:
            return 0
        with self._db:
            self._db.executemany(
                "INSERT INTO swear_events "
                "(batch_id, user_id, username, message_content, words_used, timestamp) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                rows,
            )
        logger.info(
            "Recorded %d event(s) for %s (%s)", len(rows), rows[0][2], rows[0][1],
        )
        return len(rows)

    def user_stats(self, user_id: str) -> UserStats | None:
        """Totals for one user, or None if they have no events."""
        total, first, last = self._db.execute(
            "SELECT COUNT(*), MIN(timestamp), MAX(timestamp) "
            "FROM swear_events WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        if not total:
            return None
        rows = self._db.execute(
            f"SELECT j.key, SUM(j.value) FROM ({_MESSAGES} WHERE user_id = ?) AS m, "
            "json_each(m.words_used) AS j GROUP BY j.key",
            (user_id,),
        ).fetchall()
        return UserStats(
            user_id=user_id,
            total=total,
            word_counts={word: int(count) for word, count in rows},
            first_seen=first,
            last_seen=last,
        )

    def recent_messages(self, user_id: str, limit: int = 10) -> list[RecentMessage]:
        """Most recent flagged messages for a user, newest first."""
        rows = self._db.execute(
            "SELECT message_content, words_used, MAX(timestamp) AS ts FROM swear_events "
            "WHERE user_id = ? GROUP BY batch_id ORDER BY ts DESC, MAX(id) DESC LIMIT ?",
            (user_id, limit),
        ).fetchall()
        return [RecentMessage(content, json.loads(words), ts) for content, words, ts in rows]

    def leaderboard(self, limit: int = 10) -> list[LeaderboardEntry]:
        # Bare username with MAX(id): SQLite takes it from the newest row
        rows = self._db.execute(
            "SELECT user_id, username, COUNT(*) AS n, MAX(id) FROM swear_events "
            "GROUP BY user_id ORDER BY n DESC, user_id LIMIT ?",
            (limit,),
        ).fetchall()
        return [LeaderboardEntry(uid, name, n) for uid, name, n, _ in rows]

    def overall_stats(self, top: int = 10) -> OverallStats:
        total, users = self._db.execute(
            "SELECT COUNT(*), COUNT(DISTINCT user_id) FROM swear_events"
        ).fetchone()
        words = self._db.execute(
            f"SELECT j.key, SUM(j.value) AS n FROM ({_MESSAGES}) AS m, "
            "json_each(m.words_used) AS j GROUP BY j.key ORDER BY n DESC, j.key LIMIT ?",
            (top,),
        ).fetchall()
        hours = self._db.execute(
            "SELECT CAST(strftime('%H', timestamp, 'unixepoch') AS INTEGER) AS hour, "
            "COUNT(*) FROM swear_events GROUP BY hour ORDER BY hour"
        ).fetchall()
        return OverallStats(
            total=total,
            unique_users=users,
            top_words=[WordCount(w, int(n)) for w, n in words],
            hourly={int(h): n for h, n in hours},
        )

    def word_top_users(self, word: str, limit: int = 5) -> list[LeaderboardEntry]:
        """Users who used ``word`` the most."""
        rows = self._db.execute(
            "SELECT user_id, username, SUM(value) AS n FROM ("
            "  SELECT DISTINCT m.batch_id, m.user_id, m.username, j.value"
            "  FROM swear_events AS m, json_each(m.words_used) AS j WHERE j.key = ?"
            ") GROUP BY user_id ORDER BY n DESC, user_id LIMIT ?",
            (word.lower().strip(), limit),
        ).fetchall()
        return [LeaderboardEntry(uid, name, int(n)) for uid, name, n in rows]

    def reset_user(self, user_id: str) -> int:
        """Delete a user's events. Returns the number of rows removed."""
        with self._db:
            cur = self._db.execute("DELETE FROM swear_events WHERE user_id = ?", (user_id,))
        logger.info("Reset counts for user %s (%d rows)", user_id, cur.rowcount)
        return cur.rowcount

    def clear_all(self) -> None:
        with self._db:
            self._db.execute("DELETE FROM swear_events")
        logger.info("Cleared all swear events")

    @property
    def size(self) -> int:
        return self._db.execute("SELECT COUNT(*) FROM swear_events").fetchone()[0]

    # ------------------------------------------------------------------
    # Custom words
    # ------------------------------------------------------------------

    def add_custom_word(self, word: str, added_by: str | None = None) -> None:
        with self._db:
            self._db.execute(
                "INSERT OR IGNORE INTO custom_words (word, added_by, added_at) VALUES (?, ?, ?)",
                (word, added_by, time.time()),
            )

    def remove_custom_word(self, word: str) -> None:
        with self._db:
            self._db.execute("DELETE FROM custom_words WHERE word = ?", (word,))

    def custom_words(self) -> list[str]:
        rows = self._db.execute("SELECT word FROM custom_words ORDER BY word").fetchall()
        return [r[0] for r in rows]

    def close(self) -> None:
        self._db.close()
