"""swear-tracker: profanity detection and tallying for chat messages."""

from .detector import Detector, DetectorConfig
from .normalize import normalize
from .patterns import compile_bypass_pattern
from .whitelist import Whitelist
from .wordlist import WordListStore
from .events_sqlite import SqliteEventStore
from .tracker import SwearTracker
from .responses import pick_fact, pick_response
from .config import create_tracker, load_config, load_from_yaml, validate_word
from .types import DetectionResult, SwearEvent, UserStats, LeaderboardEntry, OverallStats

__all__ = [
    "Detector", "DetectorConfig",
    "normalize", "compile_bypass_pattern",
    "Whitelist", "WordListStore",
    "SqliteEventStore",
    "SwearTracker",
    "pick_fact", "pick_response",
    "create_tracker", "load_config", "load_from_yaml", "validate_word",
    "DetectionResult", "SwearEvent", "UserStats", "LeaderboardEntry", "OverallStats",
]
__version__ = "0.1.0"
