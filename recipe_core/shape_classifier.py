#!/usr/bin/env python3
"""Heuristic rules that recognise recipe strings and index records.

Each rule takes one streamed ``(key, value)`` pair and returns a tagged match
or ``None``. Rules are grouped per root shape and tried in order; the first
match wins and later rules are not evaluated for that pair.
"""
import math
import re
from typing import Any, Callable, NamedTuple, Optional, Sequence, Union

from recipe_core.models import MAX_SAFE_INTEGER, IndexEntry, Number, RootShape

TOKEN = r"[A-Za-z0-9\-=]+"
ROW = rf"{TOKEN},{TOKEN},{TOKEN}"
RECIPE_RE = re.compile(rf"{ROW}(?:;{ROW})*")
KEY_RE = re.compile(r"[A-Za-z0-9\-=:]+")
NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

RECIPE_FIELD = "data"


class RecipeMatch(NamedTuple):
    data: str


class IndexMatch(NamedTuple):
    key: str
    entry: IndexEntry


class RowMatch(NamedTuple):
    entry: IndexEntry


Match = Union[RecipeMatch, IndexMatch, RowMatch]
Rule = Callable[[Any, Any], Optional[Match]]


def looks_like_key(s: Any) -> bool:
    return isinstance(s, str) and KEY_RE.fullmatch(s) is not None


def looks_like_recipe_string(s: Any) -> bool:
    """True for ``"A,B,1;C,D,2"`` style strings (surrounding whitespace allowed)."""
    return isinstance(s, str) and RECIPE_RE.fullmatch(s.strip()) is not None


def coerce_cost(value: Any) -> Optional[Number]:
    """Return ``value`` as a finite non-negative number, or ``None``.

    Accepts JSON numbers and numeric strings. Integral results come back as
    ``int`` so they serialize as ``10`` rather than ``10.0``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str) and NUMBER_RE.fullmatch(value.strip()):
        number = float(value.strip())
    else:
        return None

    if isinstance(number, int):
        if abs(number) > MAX_SAFE_INTEGER:
            try:
                number = float(number)
            except OverflowError:
                return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer() and abs(number) <= MAX_SAFE_INTEGER:
            number = int(number)
    if number < 0:
        return None
    return number


def _is_sequence(value: Any, min_len: int) -> bool:
    return isinstance(value, list) and len(value) >= min_len


def match_recipe_string(key: Any, value: Any) -> Optional[RecipeMatch]:
    if key == RECIPE_FIELD and looks_like_recipe_string(value):
        return RecipeMatch(value.strip())
    return None


def match_index_tuple(key: Any, value: Any) -> Optional[IndexMatch]:
    if not looks_like_key(key) or not _is_sequence(value, 3):
        return None
    icon, name = value[0], value[1]
    if not (isinstance(icon, str) and isinstance(name, str)):
        return None
    cost = coerce_cost(value[2])
    if cost is None:
        return None
    return IndexMatch(key, IndexEntry(icon, name, cost))


def match_array_row(key: Any, value: Any) -> Optional[RowMatch]:
    # value[0] is a display-order field in the source format
    if not _is_sequence(value, 4):
        return None
    icon, name = value[1], value[2]
    if not (isinstance(icon, str) and isinstance(name, str)):
        return None
    cost = coerce_cost(value[3])
    if cost is None:
        return None
    return RowMatch(IndexEntry(icon, name, cost))


OBJECT_RULES: Sequence[Rule] = (match_recipe_string, match_index_tuple)
ARRAY_RULES: Sequence[Rule] = (match_array_row,)

RULES_BY_SHAPE = {
    RootShape.OBJECT: OBJECT_RULES,
    RootShape.ARRAY: ARRAY_RULES,
}


def classify(key: Any, value: Any, rules: Sequence[Rule]) -> Optional[Match]:
    for rule in rules:
        match = rule(key, value)
        if match is not None:
            return match
    return None
