"""YAML/dict config loader for swear-tracker.

Supports loading from a YAML file or a plain dict (for embedding in a
larger bot config).

Example YAML:

    swear_tracker:
      enabled: true
      words:                 # replaces the built-in list (omit for defaults)
        - heck
        - darn
      extra_words:           # removable at runtime
        - frick
      whitelist:
        - assist
        - class
      min_substring_length: 3
      store:
        backend: sqlite      # "memory" or "sqlite"
        path: ~/.swear-tracker/events.db
      responses:
        single: ["Watch it, {username}."]
        multiple: ["{username}, that's {count} fines."]
      facts:                 # replaces the built-in trivia
        - "Swearing helps with pain."
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

from .defaults import BUILTIN_WORDS, FACTS, RESPONSES, WHITELIST
from .detector import Detector, DetectorConfig
from .events_sqlite import MEMORY, SqliteEventStore
from .tracker import SwearTracker
from .types import DetectionResult, OverallStats

MIN_WORD_LENGTH = 2
MAX_WORD_LENGTH = 20


class _NoopTracker:
    """Pass-through tracker when detection is disabled."""
    def __init__(self) -> None:
        self.detector = Detector(DetectorConfig(words=set(), whitelist=set()))
    def process_message(self, user_id: str, username: str, text: str) -> DetectionResult:
        return DetectionResult()
    def load_custom_words(self) -> int:
        return 0
    def add_custom_word(self, word: str, added_by: str | None = None) -> bool:
        return False
    def remove_custom_word(self, word: str) -> bool:
        return False
    def user_stats(self, user_id: str) -> None:
        return None
    def recent_messages(self, user_id: str, limit: int = 10) -> list:
        return []
    def leaderboard(self, limit: int = 10) -> list:
        return []
    def word_top_users(self, word: str, limit: int = 5) -> list:
        return []
    def overall_stats(self) -> OverallStats:
        return OverallStats()
    def reset_user(self, user_id: str) -> bool:
        return False
    def clear_all(self) -> bool:
        return False
    @property
    def stats(self) -> dict:
        return {"tracked_words": 0, "custom_words": [], "events": 0}
    def close(self) -> None:
        pass


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "swear_tracker" key or flat
    if "swear_tracker" in data:
        data = data["swear_tracker"] or {}

    store = data.get("store") or {}
    words = data.get("words")
    whitelist = data.get("whitelist")
    return {
        "enabled": data.get("enabled", True),
        "words": set(BUILTIN_WORDS if words is None else words),
        "extra_words": set(data.get("extra_words") or []),
        "whitelist": set(WHITELIST if whitelist is None else whitelist),
        "min_substring_length": int(data.get("min_substring_length", 3)),
        "store_backend": store.get("backend", "memory"),
        "store_path": store.get("path", "events.db"),
        "responses": {**RESPONSES, **(data.get("responses") or {})},
        "facts": list(data.get("facts") or FACTS),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml
    with open(Path(path).expanduser(), encoding="utf-8") as f:
        return load_config(yaml.safe_load(f))


def detector_config(cfg: dict[str, Any]) -> DetectorConfig:
    return DetectorConfig(
        words=cfg["words"],
        extra_words=cfg["extra_words"],
        whitelist=cfg["whitelist"],
        min_substring_length=cfg["min_substring_length"],
    )


def create_tracker(config: dict[str, Any] | None = None) -> SwearTracker:
    """Create a fully configured tracker from a config dict."""
    config = config or {}
    cfg = config if "store_backend" in config else load_config(config)

    if not cfg["enabled"]:
        return _NoopTracker()

    backend = cfg["store_backend"]
    if backend == "sqlite":
        store = SqliteEventStore(cfg["store_path"])
    elif backend == "memory":
        store = SqliteEventStore(MEMORY)
    else:
        raise ValueError(f"Unknown store backend: {backend!r}")

    tracker = SwearTracker(detector=Detector(detector_config(cfg)), store=store)
    tracker.load_custom_words()
    return tracker


def validate_word(word: str | None) -> str | None:
    """Shape check for admin-supplied words. Returns an error message or None."""
    word = (word or "").lower().strip()
    if not word:
        return "Please provide a word."
    if not MIN_WORD_LENGTH <= len(word) <= MAX_WORD_LENGTH:
        return f"The word must be between {MIN_WORD_LENGTH} and {MAX_WORD_LENGTH} characters long."
    return None
