# app/domain/matching.py
from __future__ import annotations

from typing import Any

from .parsing import parse_price_digits
from .text import edit_distance, normalize, phonetic_code

MAX_EDITS = 2  # "colville" -> "coalville"
PRICE_BAND_PCT = 0.12
PRICE_BAND_FLOOR = 15_000

# Street types as callers say them vs. how catalogs store them.
STREET_TYPE_ABBREVIATIONS: dict[str, str] = {
    "st": "street",
    "rd": "road",
    "ave": "avenue",
    "av": "avenue",
    "ln": "lane",
    "dr": "drive",
    "cl": "close",
    "ct": "court",
    "cres": "crescent",
    "cr": "crescent",
    "gdns": "gardens",
    "gr": "grove",
    "pl": "place",
    "sq": "square",
    "tce": "terrace",
    "terr": "terrace",
    "pk": "park",
    "wy": "way",
}


def canonical_street(text: Any) -> str:
    """
    normalize() plus street-type expansion ("Tiehouse St" -> "tiehouse street").
    A leading "st" is Saint ("St Peters Road"), so only later tokens expand.
    """
    tokens = normalize(text).split(" ")
    out = [tokens[0]] if tokens else []
    for tok in tokens[1:]:
        out.append(STREET_TYPE_ABBREVIATIONS.get(tok, tok))
    return " ".join(out)


def town_match(want: Any, got: Any) -> bool:
    w, g = normalize(want), normalize(got)
    if not w or not g:
        return False
    if w in g or g in w:
        return True
    return edit_distance(w, g) <= MAX_EDITS


def street_hit(want: Any, got: Any) -> bool:
    w, g = canonical_street(want), canonical_street(got)
    if not w or not g:
        return False
    if w in g:
        return True
    if edit_distance(w, g) <= MAX_EDITS:
        return True
    return phonetic_code(w) == phonetic_code(g)


def price_close(want: Any, got: Any) -> bool:
    """
    Within max(12%, 15k) of the asked price.
    No price on either side never filters anything out.
    """
    w = parse_price_digits(want)
    g = parse_price_digits(got)
    if not w or not g:
        return True
    band = max(w * PRICE_BAND_PCT, PRICE_BAND_FLOOR)
    return abs(w - g) <= band
