"""Bypass patterns: tolerant regexes for evasion spellings.

A tracked word is compiled into a regex that accepts, per letter, any glyph
from ``SUBSTITUTIONS`` and any run of whitespace/punctuation between letters:

    "shit"  →  s,h,i,t  →  matches "sh!t", "5 h 1 t", "s.h.i.t", "šhíτ"

Stretched spellings ("fuuuck") are caught by also searching the text with
repeated characters collapsed.  These only run when the exact and substring
tiers found nothing.
"""

from __future__ import annotations
import logging
import re

from .normalize import normalize

logger = logging.getLogger(__name__)

# letter → glyphs that can stand in for it
SUBSTITUTIONS: dict[str, tuple[str, ...]] = {
    "a": ("a", "@", "4", "á", "à", "â", "ä", "å", "ã", "α"),
    "b": ("b", "8", "ß", "6"),
    "c": ("c", "(", "[", "{", "<", "©", "ç"),
    "d": ("d", "δ"),
    "e": ("e", "3", "é", "è", "ê", "ë", "ē", "ε"),
    "f": ("f", "ƒ", "ph"),
    "g": ("g", "9", "ğ", "γ"),
    "h": ("h", "η"),
    "i": ("i", "1", "!", "|", "í", "ì", "î", "ï", "ι"),
    "j": ("j",),
    "k": ("k", "κ"),
    "l": ("l", "1", "|", "ł", "λ"),
    "m": ("m", "μ"),
    "n": ("n", "ñ", "η", "ν"),
    "o": ("o", "0", "ó", "ò", "ô", "ö", "õ", "ø", "○", "ο"),
    "p": ("p", "þ", "ρ"),
    "q": ("q",),
    "r": ("r", "ř", "ρ"),
    "s": ("s", "5", "$", "š", "σ"),
    "t": ("t", "7", "+", "τ"),
    "u": ("u", "ú", "ù", "û", "ü", "µ", "υ"),
    "v": ("v", "ν"),
    "w": ("w", "ω"),
    "x": ("x", "×", "χ"),
    "y": ("y", "ý", "ÿ", "¥", "γ"),
    "z": ("z", "ž", "ζ"),
}


def _glyphs(char: str) -> list[str]:
    """Equivalents for one letter, plus what the normalizer turns them into.

    Patterns run on normalized text, where "1" and "|" have already become
    "i"; an "l" spelled with either must still match.
    """
    out: list[str] = []
    for glyph in SUBSTITUTIONS.get(char, ()):
        for form in (glyph, normalize(glyph)):
            if form and form not in out:
                out.append(form)
    return out


# Symbols that stand in for a letter never count as separators, so a run
# of "<" or "©" has exactly one reading and matching stays linear.
_SYMBOL_GLYPHS = sorted({
    ch
    for letter in SUBSTITUTIONS
    for glyph in _glyphs(letter)
    for ch in glyph
    if not re.match(r"\w", ch)
})

# Whitespace or punctuation allowed between letters
SEPARATOR = "[^\\w" + "".join(re.escape(ch) for ch in _SYMBOL_GLYPHS) + "]*"

_RUNS = re.compile(r"(.)\1+", re.DOTALL)


def collapse_runs(text: str) -> str:
    """Squeeze repeated characters: "fuuuck" -> "fuck".

    Bypass patterns are tried on this form as well, which is how stretched
    spellings match without a repeat in the pattern itself.
    """
    return _RUNS.sub(r"\1", text)


def _letter(char: str) -> str:
    glyphs = _glyphs(char)
    if not glyphs:
        return re.escape(char)
    return "(?:" + "|".join(re.escape(g) for g in glyphs) + ")"


def build_bypass_source(word: str) -> str:
    """Regex source for ``word``; no compilation."""
    return SEPARATOR.join(_letter(char) for char in word.lower())


def compile_bypass_pattern(word: str) -> re.Pattern | None:
    """Compile the tolerant matcher for ``word``.

    Returns None (and logs) if the pattern cannot be built; callers treat
    that as "never matches".
    """
    try:
        if not word:
            raise ValueError("empty word")
        return re.compile(build_bypass_source(word), re.IGNORECASE)
    except (re.error, ValueError, TypeError, AttributeError) as e:
        logger.error("Could not build bypass pattern for %r: %s", word, e)
        return None
