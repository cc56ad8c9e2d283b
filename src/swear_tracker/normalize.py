"""Text canonicalisation applied before every detection pass.

Cheap, fixed folding: emoji tags out, lower-case, accents to base letters,
common leetspeak digits/symbols to letters.  The tolerant matcher in
``patterns`` handles everything this table does not.
"""

from __future__ import annotations
import re

# Custom emoji markup: <:name:123456> or animated <a:name:123456>
_EMOJI_TAG = re.compile(r"<a?:\w+:\d+>")

_ACCENTS = {
    "a": "àáâäãåā",
    "e": "èéêëē",
    "i": "ìíîï",
    "o": "òóôöõø",
    "u": "ùúûü",
    "y": "ýÿ",
    "c": "ç",
    "n": "ñ",
    "b": "ß",
}

LEET: dict[str, str] = {
    "@": "a",
    "4": "a",
    "8": "b",
    "(": "c",
    "3": "e",
    "9": "g",
    "1": "i",
    "!": "i",
    "|": "i",
    "0": "o",
    "5": "s",
    "$": "s",
    "7": "t",
    "+": "t",
}

_FOLD = str.maketrans({
    **{ch: base for base, chars in _ACCENTS.items() for ch in chars},
    **LEET,
})


def strip_emoji(text: str) -> str:
    """Remove inline emoji tags so their names never contribute to matches."""
    return _EMOJI_TAG.sub("", text)


def normalize(text: str) -> str:
    """Canonical form used by every detection tier."""
    if not text:
        return ""
    return strip_emoji(text).lower().translate(_FOLD)
