"""Tests for the tracker facade, config loading, responses, CLI and sidecar."""

import io
import json
import random
import sys, os
import threading
import urllib.error
import urllib.request
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from swear_tracker import SwearTracker, create_tracker, load_config, load_from_yaml
from swear_tracker import cli, server
from swear_tracker.config import validate_word
from swear_tracker.defaults import BUILTIN_WORDS, FACTS, RESPONSES, WHITELIST
from swear_tracker.responses import pick_fact, pick_response


@pytest.fixture
def tracker():
    t = SwearTracker.create()
    yield t
    t.close()


# ── Tracker ──────────────────────────────────────────────────────────

def test_process_message_records_each_occurrence(tracker):
    result = tracker.process_message("42", "bob", "shit shit damn")
    assert result.per_word == {"shit": 2, "damn": 1}
    assert tracker.store.size == 3
    assert tracker.leaderboard()[0].count == 3
    assert tracker.user_stats("42").word_counts == {"shit": 2, "damn": 1}


def test_clean_message_records_nothing(tracker):
    result = tracker.process_message("42", "bob", "have a nice day")
    assert result.total == 0
    assert tracker.store.size == 0
    assert tracker.user_stats("42") is None


def test_storage_failure_keeps_detection_working(tracker):
    tracker.store.close()
    result = tracker.process_message("42", "bob", "shit")
    assert result.per_word == {"shit": 1}
    # detector state untouched
    assert tracker.detector.words() == frozenset(BUILTIN_WORDS)
    assert tracker.detector.detect("damn").total == 1


def test_custom_word_lifecycle(tmp_path):
    db = tmp_path / "events.db"
    t1 = SwearTracker.create(db_path=db)
    assert t1.add_custom_word(" Frick ", added_by="admin") is True
    assert t1.add_custom_word("frick") is False
    assert t1.add_custom_word("shit") is False
    assert t1.process_message("1", "al", "frick").per_word == {"frick": 1}
    t1.close()

    t2 = SwearTracker.create(db_path=db)
    assert not t2.detector.contains("frick")
    assert t2.load_custom_words() == 1
    assert t2.detector.contains("frick")
    assert t2.remove_custom_word("frick") is True
    assert t2.store.custom_words() == []
    assert t2.remove_custom_word("frick") is False
    assert t2.remove_custom_word("damn") is False
    t2.close()


def test_add_custom_word_storage_failure(tracker):
    tracker.store.close()
    assert tracker.add_custom_word("frick") is False
    assert not tracker.detector.contains("frick")


def test_reset_and_clear(tracker):
    tracker.process_message("1", "al", "shit")
    tracker.process_message("2", "bo", "damn")
    assert tracker.reset_user("1") is True
    assert [e.user_id for e in tracker.leaderboard()] == ["2"]
    assert tracker.clear_all() is True
    assert tracker.overall_stats().total == 0


def test_stats_property(tracker):
    tracker.add_custom_word("frick")
    tracker.process_message("1", "al", "frick frick")
    assert tracker.stats == {
        "tracked_words": len(BUILTIN_WORDS) + 1,
        "custom_words": ["frick"],
        "events": 2,
    }


# ── Config ───────────────────────────────────────────────────────────

def test_load_config_defaults():
    cfg = load_config({})
    assert cfg["enabled"] is True
    assert cfg["words"] == set(BUILTIN_WORDS)
    assert cfg["whitelist"] == set(WHITELIST)
    assert cfg["min_substring_length"] == 3
    assert cfg["store_backend"] == "memory"
    assert cfg["responses"] == RESPONSES
    assert cfg["facts"] == FACTS


def test_load_config_nested():
    cfg = load_config({"swear_tracker": {
        "words": ["heck"],
        "extra_words": ["darn"],
        "whitelist": [],
        "store": {"backend": "sqlite", "path": "x.db"},
    }})
    assert cfg["words"] == {"heck"}
    assert cfg["extra_words"] == {"darn"}
    assert cfg["whitelist"] == set()
    assert cfg["store_backend"] == "sqlite"
    assert cfg["store_path"] == "x.db"


def test_create_tracker_from_config():
    t = create_tracker({"words": ["heck"], "extra_words": ["darn"], "whitelist": ["heckle"]})
    assert t.detector.words() == {"heck", "darn"}
    assert t.process_message("1", "al", "heck darn").total == 2
    assert t.process_message("1", "al", "heckle heck").total == 0
    assert t.remove_custom_word("darn") is True
    assert t.remove_custom_word("heck") is False
    t.close()


def test_disabled_tracker_is_noop():
    t = create_tracker({"enabled": False})
    assert t.process_message("1", "al", "shit").total == 0
    assert t.add_custom_word("frick") is False
    assert t.leaderboard() == []


def test_unknown_backend():
    with pytest.raises(ValueError):
        create_tracker({"store": {"backend": "postgres"}})


def test_load_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "swear_tracker:\n"
        "  words: [heck, darn]\n"
        "  min_substring_length: 4\n"
        "  store:\n"
        "    backend: sqlite\n"
        f"    path: {tmp_path / 'events.db'}\n",
        encoding="utf-8",
    )
    cfg = load_from_yaml(path)
    assert cfg["words"] == {"heck", "darn"}
    assert cfg["min_substring_length"] == 4
    t = create_tracker(cfg)
    t.process_message("1", "al", "heck")
    t.close()
    assert (tmp_path / "events.db").exists()


@pytest.mark.parametrize("word, ok", [
    ("frick", True),
    ("  Frick  ", True),
    ("ab", True),
    ("", False),
    ("   ", False),
    (None, False),
    ("a", False),
    ("x" * 21, False),
])
def test_validate_word(word, ok):
    assert (validate_word(word) is None) is ok


# ── Responses ────────────────────────────────────────────────────────

def test_single_response():
    text = pick_response("bob", 1, rng=random.Random(1))
    assert "bob" in text
    assert any(text == t.replace("{username}", "bob") for t in RESPONSES["single"])


def test_multiple_response():
    text = pick_response("bob", 4, rng=random.Random(1))
    assert "bob" in text and "4" in text
    assert "{" not in text


def test_custom_responses():
    responses = {"single": ["one for {username}"], "multiple": ["{count} for {username}"]}
    assert pick_response("al", 1, responses) == "one for al"
    assert pick_response("al", 2, responses) == "2 for al"


def test_fact_from_builtin_list():
    assert pick_fact(rng=random.Random(3)) in FACTS


def test_fact_from_custom_list():
    assert pick_fact(["only one"]) == "only one"
    assert load_config({"facts": ["mine"]})["facts"] == ["mine"]


# ── CLI ──────────────────────────────────────────────────────────────

def _run_cli(monkeypatch, capsys, argv, stdin=""):
    monkeypatch.setattr(sys, "stdin", io.StringIO(stdin))
    code = cli.main(argv)
    out = capsys.readouterr().out
    return code, (json.loads(out) if out.strip() else None)


def test_cli_detect(monkeypatch, capsys, tmp_path):
    db = str(tmp_path / "e.db")
    code, out = _run_cli(monkeypatch, capsys, ["--db", db, "detect"], "well sh!t")
    assert code == 0
    assert out == {"words": {"shit": 1}, "total": 1, "tier": "exact"}


def test_cli_process_and_stats(monkeypatch, capsys, tmp_path):
    db = str(tmp_path / "e.db")
    code, out = _run_cli(monkeypatch, capsys,
                         ["--db", db, "process", "--user-id", "7", "--username", "al"], "damn damn")
    assert out["total"] == 2
    assert "al" in out["alert"]

    _, board = _run_cli(monkeypatch, capsys, ["--db", db, "leaderboard"])
    assert board == [{"user_id": "7", "username": "al", "count": 2}]

    _, stats = _run_cli(monkeypatch, capsys, ["--db", db, "stats", "--user-id", "7"])
    assert stats["total"] == 2
    assert stats["word_counts"] == {"damn": 2}

    code, _ = _run_cli(monkeypatch, capsys, ["--db", db, "stats", "--user-id", "8"])
    assert code == 1


def test_cli_word_admin(monkeypatch, capsys, tmp_path):
    db = str(tmp_path / "e.db")
    code, out = _run_cli(monkeypatch, capsys, ["--db", db, "add-word", "Frick"])
    assert code == 0 and out == {"word": "frick", "added": True}

    code, out = _run_cli(monkeypatch, capsys, ["--db", db, "add-word", "frick"])
    assert code == 1 and out["added"] is False

    code, out = _run_cli(monkeypatch, capsys, ["--db", db, "add-word", "x"])
    assert code == 2 and out is None

    _, words = _run_cli(monkeypatch, capsys, ["--db", db, "words"])
    assert words["custom"] == ["frick"]

    code, out = _run_cli(monkeypatch, capsys, ["--db", db, "remove-word", "shit"])
    assert code == 1 and out["removed"] is False

    code, out = _run_cli(monkeypatch, capsys, ["--db", db, "remove-word", "frick"])
    assert code == 0 and out["removed"] is True


def test_cli_fact(monkeypatch, capsys):
    monkeypatch.setattr(cli, "DEFAULT_CONFIG", "")
    code, out = _run_cli(monkeypatch, capsys, ["fact"])
    assert code == 0
    assert out["fact"] in FACTS


# ── HTTP sidecar ─────────────────────────────────────────────────────

@pytest.fixture
def sidecar(monkeypatch):
    cfg = load_config({})
    monkeypatch.setattr(server, "_config", cfg)
    monkeypatch.setattr(server, "_tracker", create_tracker(cfg))
    httpd = server.HTTPServer(("127.0.0.1", 0), server.SwearHandler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{httpd.server_address[1]}"
    httpd.shutdown()
    httpd.server_close()


def _call(url, body=None):
    data = None if body is None else json.dumps(body).encode("utf-8")
    req = urllib.request.Request(url, data=data, headers={"Content-Type": "application/json"})
    try:
        with urllib.request.urlopen(req) as resp:
            return resp.status, json.loads(resp.read())
    except urllib.error.HTTPError as e:
        return e.code, json.loads(e.read())


def test_sidecar_health(sidecar):
    status, body = _call(f"{sidecar}/health")
    assert status == 200
    assert body["status"] == "ok"
    assert body["tracked_words"] == len(BUILTIN_WORDS)


def test_sidecar_fact(sidecar):
    status, body = _call(f"{sidecar}/fact")
    assert status == 200
    assert body["fact"] in FACTS


def test_sidecar_process_and_stats(sidecar):
    status, body = _call(f"{sidecar}/process", {"user_id": "1", "username": "al", "text": "f u c k"})
    assert status == 200
    assert body["words"] == {"fuck": 1}
    assert body["tier"] == "bypass"
    assert "alert" in body

    _, board = _call(f"{sidecar}/leaderboard")
    assert board["leaderboard"] == [{"user_id": "1", "username": "al", "count": 1}]

    status, _ = _call(f"{sidecar}/stats/unknown")
    assert status == 404

    _, words = _call(f"{sidecar}/wordstats/fuck")
    assert words["tracked"] is True
    assert words["top_users"][0]["count"] == 1


def test_sidecar_word_admin(sidecar):
    status, body = _call(f"{sidecar}/words/add", {"word": "frick"})
    assert status == 200 and body["added"] is True
    status, _ = _call(f"{sidecar}/words/add", {"word": "frick"})
    assert status == 409
    status, _ = _call(f"{sidecar}/words/add", {"word": ""})
    assert status == 400
    _, body = _call(f"{sidecar}/detect", {"text": "frick"})
    assert body["total"] == 1
    status, body = _call(f"{sidecar}/words/remove", {"word": "frick"})
    assert status == 200 and body["removed"] is True


def test_sidecar_bad_json(sidecar):
    req = urllib.request.Request(f"{sidecar}/detect", data=b"{not json", method="POST")
    with pytest.raises(urllib.error.HTTPError) as exc:
        urllib.request.urlopen(req)
    assert exc.value.code == 400


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
