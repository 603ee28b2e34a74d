"""Store-agnostic filter expressions for post listing.

Handlers and repository callers build filters out of these nodes; only
``app.services.posts.compile_filter`` knows how they map onto the database.
"""
from dataclasses import dataclass
from typing import Tuple, Union

SEARCH_FIELDS = ("title", "content", "location", "tags")


@dataclass(frozen=True)
class MatchAll:
    pass


@dataclass(frozen=True)
class Pattern:
    """Regular expression searched (not anchored) in ``field``.

    For multi-value fields the pattern matches when any element matches.
    """

    field: str
    pattern: str
    ignore_case: bool = True


@dataclass(frozen=True)
class AnyOf:
    clauses: Tuple["Filter", ...]


@dataclass(frozen=True)
class AllOf:
    clauses: Tuple["Filter", ...]


Filter = Union[MatchAll, Pattern, AnyOf, AllOf]


def normalize_search(search: str | None) -> str | None:
    term = (search or "").strip()
    return term or None


def build_search_filter(search: str | None) -> Filter:
    term = normalize_search(search)
    if term is None:
        return MatchAll()
    # passed through as a pattern, not escaped
    return AnyOf(tuple(Pattern(field, term) for field in SEARCH_FIELDS))
