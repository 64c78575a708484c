# app/domain/text.py
from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

# \w is Unicode-aware but keeps "_"; callers want letters/digits only.
_NON_WORD = re.compile(r"[^\w\s]|_")
_SPACES = re.compile(r"\s+")
_NON_ASCII_LETTER = re.compile(r"[^A-Z]")

# Soundex consonant classes. Vowels, H, W, Y are class 0.
_PHONETIC_CLASSES: dict[str, str] = {
    **dict.fromkeys("BFPV", "1"),
    **dict.fromkeys("CGJKQSXZ", "2"),
    **dict.fromkeys("DT", "3"),
    "L": "4",
    **dict.fromkeys("MN", "5"),
    "R": "6",
}
PHONETIC_CODE_LEN = 4


def normalize(text: object) -> str:
    """
    Canonical comparison form: lowercase, punctuation -> space,
    whitespace collapsed, trimmed. normalize(normalize(x)) == normalize(x).
    """
    if text is None:
        return ""
    s = str(text).lower()
    s = _NON_WORD.sub(" ", s)
    return _SPACES.sub(" ", s).strip()


def edit_distance(a: object, b: object) -> int:
    """Unit-cost Levenshtein distance over normalized text."""
    return Levenshtein.distance(normalize(a), normalize(b))


def phonetic_code(text: object) -> str:
    """
    Soundex-style code: first letter kept, then consonant classes with
    adjacent duplicates collapsed, zero padded to 4 chars.

    Class-0 letters (vowels, H, W, Y) are dropped but still separate
    duplicates: "Tymms" -> T520, "Tomas" -> T520.
    """
    s = _NON_ASCII_LETTER.sub("", str(text or "").upper())
    if not s:
        return ""

    first = s[0]
    out = first
    prev = _PHONETIC_CLASSES.get(first, "0")
    for ch in s[1:]:
        if len(out) >= PHONETIC_CODE_LEN:
            break
        code = _PHONETIC_CLASSES.get(ch, "0")
        if code != "0" and code != prev:
            out += code
        prev = code

    return out.ljust(PHONETIC_CODE_LEN, "0")
