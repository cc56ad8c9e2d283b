"""Alert text for a flagged message, plus the odd bit of trivia."""

from __future__ import annotations
import random

from .defaults import FACTS, RESPONSES


def pick_response(
    username: str,
    count: int,
    responses: dict[str, list[str]] | None = None,
    rng: random.Random | None = None,
) -> str:
    """Random single/multiple template with ``{username}`` and ``{count}`` filled."""
    responses = responses or RESPONSES
    templates = responses["single"] if count == 1 else responses["multiple"]
    template = (rng or random).choice(templates)
    return template.replace("{username}", username).replace("{count}", str(count))


def pick_fact(facts: list[str] | None = None, rng: random.Random | None = None) -> str:
    return (rng or random).choice(facts or FACTS)
