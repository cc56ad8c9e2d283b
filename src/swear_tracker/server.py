"""HTTP sidecar server for swear-tracker.

Runs as a lightweight stdlib HTTP server on localhost.
The chat bot calls this via HTTP for every message and admin command.

Endpoints:
    GET  /health                Health check
    GET  /words                 Tracked words (built-in / custom)
    GET  /leaderboard?limit=N   Top users by count
    GET  /stats                 Overall stats
    GET  /stats/<user_id>       Stats for one user
    GET  /history/<user_id>     Recent flagged messages for one user
    GET  /wordstats/<word>      Top users for one word
    GET  /fact                  Random swearing trivia
    POST /detect                Detect only: {"text": ...}
    POST /process               Detect and record: {"user_id", "username", "text"}
    POST /words/add             {"word", "added_by"}
    POST /words/remove          {"word"}
    POST /reset                 {"user_id"}
    POST /clear                 Delete all events

All endpoints expect/return JSON.
"""

from __future__ import annotations
import dataclasses
import json
import logging
import os
from http.server import HTTPServer, BaseHTTPRequestHandler
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, unquote, urlsplit

from .config import create_tracker, load_config, load_from_yaml, validate_word
from .responses import pick_fact, pick_response
from .tracker import SwearTracker

logger = logging.getLogger(__name__)

DEFAULT_PORT = int(os.environ.get("SWEAR_TRACKER_PORT", "18792"))
DEFAULT_DB = os.environ.get(
    "SWEAR_TRACKER_DB",
    str(Path.home() / ".swear-tracker" / "events.db"),
)

# Shared state
_tracker: SwearTracker | None = None
_config: dict[str, Any] = {}


def _get_tracker() -> SwearTracker:
    global _tracker, _config
    if _tracker is None:
        if not _config:
            path = os.environ.get("SWEAR_TRACKER_CONFIG", "")
            _config = load_from_yaml(path) if path else load_config({
                "store": {"backend": "sqlite", "path": DEFAULT_DB},
            })
        _tracker = create_tracker(_config)
    return _tracker


def _as_json(data: Any) -> Any:
    if dataclasses.is_dataclass(data):
        return dataclasses.asdict(data)
    if isinstance(data, list):
        return [_as_json(d) for d in data]
    return data


class _BadRequest(Exception):
    pass


class SwearHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the swear-tracker sidecar."""

    def _read_json(self) -> dict[str, Any]:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        try:
            data = json.loads(body) if body else {}
        except json.JSONDecodeError as e:
            raise _BadRequest(f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise _BadRequest("body must be a JSON object")
        return data

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(_as_json(data), ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        url = urlsplit(self.path)
        query = parse_qs(url.query)
        parts = [unquote(p) for p in url.path.strip("/").split("/") if p]
        try:
            tracker = _get_tracker()
            limit = int(query.get("limit", ["10"])[0])

            if parts == ["health"]:
                self._respond(200, {"status": "ok", **tracker.stats})
            elif parts == ["words"]:
                store = tracker.detector.store
                self._respond(200, {"builtin": sorted(store.builtins), "custom": sorted(store.custom)})
            elif parts == ["leaderboard"]:
                self._respond(200, {"leaderboard": _as_json(tracker.leaderboard(limit))})
            elif parts == ["fact"]:
                self._respond(200, {"fact": pick_fact(_config.get("facts"))})
            elif parts == ["stats"]:
                self._respond(200, tracker.overall_stats())
            elif len(parts) == 2 and parts[0] == "stats":
                stats = tracker.user_stats(parts[1])
                if stats is None:
                    self._respond(404, {"error": "no events for user", "user_id": parts[1]})
                else:
                    self._respond(200, {**dataclasses.asdict(stats),
                                        "top_words": _as_json(stats.top_words)})
            elif len(parts) == 2 and parts[0] == "history":
                self._respond(200, {"messages": _as_json(tracker.recent_messages(parts[1], limit))})
            elif len(parts) == 2 and parts[0] == "wordstats":
                word = parts[1].lower().strip()
                self._respond(200, {
                    "word": word,
                    "tracked": tracker.detector.contains(word),
                    "top_users": _as_json(tracker.word_top_users(word, int(query.get("limit", ["5"])[0]))),
                })
            else:
                self._respond(404, {"error": "not found"})

        except ValueError as e:
            self._respond(400, {"error": str(e)})
        except Exception as e:
            logger.exception("GET %s failed", self.path)
            self._respond(500, {"error": str(e)})

    def do_POST(self) -> None:
        try:
            body = self._read_json()
            tracker = _get_tracker()

            if self.path == "/detect":
                result = tracker.detector.detect(str(body.get("text", "")))
                self._respond(200, {"words": result.per_word, "total": result.total, "tier": result.tier})

            elif self.path == "/process":
                username = str(body.get("username", ""))
                result = tracker.process_message(
                    str(body.get("user_id", "")), username, str(body.get("text", "")),
                )
                out = {"words": result.per_word, "total": result.total, "tier": result.tier}
                if result:
                    out["alert"] = pick_response(username, result.total, _config.get("responses"))
                self._respond(200, out)

            elif self.path == "/words/add":
                word = str(body.get("word") or "")
                error = validate_word(word)
                if error:
                    self._respond(400, {"error": error})
                    return
                ok = tracker.add_custom_word(word, added_by=body.get("added_by"))
                self._respond(200 if ok else 409, {"word": word.lower().strip(), "added": ok})

            elif self.path == "/words/remove":
                word = str(body.get("word", ""))
                ok = tracker.remove_custom_word(word)
                self._respond(200 if ok else 409, {"word": word.lower().strip(), "removed": ok})

            elif self.path == "/reset":
                user_id = str(body.get("user_id", ""))
                if not user_id:
                    self._respond(400, {"error": "user_id is required"})
                    return
                self._respond(200, {"status": "reset" if tracker.reset_user(user_id) else "failed",
                                    "user_id": user_id})

            elif self.path == "/clear":
                self._respond(200, {"status": "cleared" if tracker.clear_all() else "failed"})

            else:
                self._respond(404, {"error": "not found"})

        except _BadRequest as e:
            self._respond(400, {"error": str(e)})
        except Exception as e:
            logger.exception("POST %s failed", self.path)
            self._respond(500, {"error": str(e)})


def serve(port: int = DEFAULT_PORT, config: dict[str, Any] | None = None) -> None:
    """Start the swear-tracker HTTP sidecar."""
    global _config, _tracker
    if config is not None:
        _config = config
        _tracker = None
    tracker = _get_tracker()

    server = HTTPServer(("127.0.0.1", port), SwearHandler)
    print(f"swear-tracker sidecar listening on http://127.0.0.1:{port}")
    print(f"  tracked words: {tracker.stats['tracked_words']}")
    print(f"  event store: {_config.get('store_backend')} {_config.get('store_path', '')}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down...")
        server.shutdown()
    finally:
        tracker.close()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="swear-tracker HTTP sidecar")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--db", default=DEFAULT_DB)
    parser.add_argument("--config", default=os.environ.get("SWEAR_TRACKER_CONFIG", ""))
    parser.add_argument("--log-level", default=os.environ.get("SWEAR_TRACKER_LOG_LEVEL", "INFO"))
    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    if not args.config:
        cfg["store_backend"] = "sqlite"
        cfg["store_path"] = args.db
    serve(port=args.port, config=cfg)
