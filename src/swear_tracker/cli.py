"""CLI interface for swear-tracker: for scripting and bot glue.

Usage:
    # Detect only (stdin: message text, stdout: JSON result)
    echo 'well sh!t' | swear-tracker detect

    # Detect and record for a user
    echo 'what the fuck' | swear-tracker process --user-id 42 --username bob

    # Word list admin
    swear-tracker add-word frick
    swear-tracker remove-word frick

    # Stats
    swear-tracker leaderboard --limit 5
    swear-tracker stats --user-id 42

    # Trivia
    swear-tracker fact

All state is persisted in SQLite so counts survive across calls.
"""

from __future__ import annotations
import argparse
import dataclasses
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from .config import create_tracker, load_config, load_from_yaml, validate_word
from .responses import pick_fact, pick_response
from .tracker import SwearTracker

DEFAULT_DB = os.environ.get(
    "SWEAR_TRACKER_DB",
    str(Path.home() / ".swear-tracker" / "events.db"),
)
DEFAULT_CONFIG = os.environ.get("SWEAR_TRACKER_CONFIG", "")


def _load(args: argparse.Namespace) -> dict[str, Any]:
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    # --db wins; without a config file the default database is used
    if args.db or not args.config:
        cfg["store_backend"] = "sqlite"
        cfg["store_path"] = args.db or DEFAULT_DB
    return cfg


def _build_tracker(args: argparse.Namespace) -> SwearTracker:
    return create_tracker(_load(args))


def _emit(data: Any) -> None:
    if dataclasses.is_dataclass(data):
        data = dataclasses.asdict(data)
    elif isinstance(data, list):
        data = [dataclasses.asdict(d) if dataclasses.is_dataclass(d) else d for d in data]
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def _result_json(result) -> dict[str, Any]:
    return {"words": result.per_word, "total": result.total, "tier": result.tier}


def cmd_detect(args: argparse.Namespace) -> None:
    """Detect tracked words in stdin text without recording."""
    tracker = _build_tracker(args)
    result = tracker.detector.detect(sys.stdin.read())
    _emit(_result_json(result))
    tracker.close()


def cmd_process(args: argparse.Namespace) -> None:
    """Detect and record tracked words in stdin text."""
    cfg = _load(args)
    tracker = create_tracker(cfg)
    result = tracker.process_message(args.user_id, args.username, sys.stdin.read())
    output = _result_json(result)
    if result:
        output["alert"] = pick_response(args.username, result.total, cfg["responses"])
    _emit(output)
    tracker.close()


def cmd_add_word(args: argparse.Namespace) -> int:
    error = validate_word(args.word)
    if error:
        sys.stderr.write(f"{error}\n")
        return 2
    tracker = _build_tracker(args)
    ok = tracker.add_custom_word(args.word, added_by=args.added_by)
    _emit({"word": args.word.lower().strip(), "added": ok})
    tracker.close()
    return 0 if ok else 1


def cmd_remove_word(args: argparse.Namespace) -> int:
    tracker = _build_tracker(args)
    ok = tracker.remove_custom_word(args.word)
    _emit({"word": args.word.lower().strip(), "removed": ok})
    tracker.close()
    return 0 if ok else 1


def cmd_words(args: argparse.Namespace) -> None:
    """List tracked words."""
    tracker = _build_tracker(args)
    store = tracker.detector.store
    _emit({"builtin": sorted(store.builtins), "custom": sorted(store.custom)})
    tracker.close()


def cmd_stats(args: argparse.Namespace) -> int:
    tracker = _build_tracker(args)
    if args.user_id:
        stats = tracker.user_stats(args.user_id)
        if stats is None:
            sys.stderr.write(f"No events for user {args.user_id}\n")
            tracker.close()
            return 1
        _emit({**dataclasses.asdict(stats), "top_words": [dataclasses.asdict(w) for w in stats.top_words]})
    else:
        _emit(tracker.overall_stats())
    tracker.close()
    return 0


def cmd_leaderboard(args: argparse.Namespace) -> None:
    tracker = _build_tracker(args)
    _emit(tracker.leaderboard(args.limit))
    tracker.close()


def cmd_history(args: argparse.Namespace) -> None:
    tracker = _build_tracker(args)
    _emit(tracker.recent_messages(args.user_id, args.limit))
    tracker.close()


def cmd_wordstats(args: argparse.Namespace) -> None:
    tracker = _build_tracker(args)
    _emit({
        "word": args.word.lower().strip(),
        "tracked": tracker.detector.contains(args.word),
        "top_users": [dataclasses.asdict(e) for e in tracker.word_top_users(args.word, args.limit)],
    })
    tracker.close()


def cmd_fact(args: argparse.Namespace) -> None:
    """Print a random bit of swearing trivia."""
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    _emit({"fact": pick_fact(cfg["facts"])})


def cmd_reset(args: argparse.Namespace) -> int:
    tracker = _build_tracker(args)
    ok = tracker.reset_user(args.user_id)
    sys.stderr.write(f"Reset user {args.user_id}\n" if ok else "Reset failed\n")
    tracker.close()
    return 0 if ok else 1


def cmd_clear(args: argparse.Namespace) -> int:
    tracker = _build_tracker(args)
    ok = tracker.clear_all()
    sys.stderr.write("Cleared all events\n" if ok else "Clear failed\n")
    tracker.close()
    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swear-tracker",
        description="Track profanity in chat messages",
    )
    parser.add_argument("--db", default=None, help=f"SQLite event store path (default {DEFAULT_DB})")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML config file")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("SWEAR_TRACKER_LOG_LEVEL", "WARNING"),
        help="Logging level (stderr)",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("detect", help="Detect words in stdin text (no recording)")

    p = sub.add_parser("process", help="Detect and record words in stdin text")
    p.add_argument("--user-id", required=True)
    p.add_argument("--username", required=True)

    p = sub.add_parser("add-word", help="Add a custom tracked word")
    p.add_argument("word")
    p.add_argument("--added-by", default=None)

    p = sub.add_parser("remove-word", help="Remove a custom tracked word")
    p.add_argument("word")

    sub.add_parser("words", help="List tracked words")

    p = sub.add_parser("stats", help="Overall or per-user stats")
    p.add_argument("--user-id", default="")

    p = sub.add_parser("leaderboard", help="Top users by count")
    p.add_argument("--limit", type=int, default=10)

    p = sub.add_parser("history", help="Recent flagged messages for a user")
    p.add_argument("--user-id", required=True)
    p.add_argument("--limit", type=int, default=10)

    p = sub.add_parser("wordstats", help="Top users for one word")
    p.add_argument("word")
    p.add_argument("--limit", type=int, default=5)

    sub.add_parser("fact", help="Random swearing trivia")

    p = sub.add_parser("reset", help="Delete a user's events")
    p.add_argument("--user-id", required=True)

    sub.add_parser("clear", help="Delete all events")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    cmds = {
        "detect": cmd_detect,
        "process": cmd_process,
        "add-word": cmd_add_word,
        "remove-word": cmd_remove_word,
        "words": cmd_words,
        "stats": cmd_stats,
        "leaderboard": cmd_leaderboard,
        "history": cmd_history,
        "wordstats": cmd_wordstats,
        "fact": cmd_fact,
        "reset": cmd_reset,
        "clear": cmd_clear,
    }
    return cmds[args.command](args) or 0


if __name__ == "__main__":
    sys.exit(main())
