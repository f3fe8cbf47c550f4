"""Value objects — self-validating domain primitives."""

from __future__ import annotations

from dataclasses import dataclass

# Keeps the search non-empty when neither free text nor a user is given.
FLOOR_TERM = "stars:>=0"


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """Ordered search terms sent to the host's repository search.

    Built from an optional free-text query and an optional ``user:``
    qualifier, always followed by :data:`FLOOR_TERM`.  Blank parts are
    dropped, so ``SearchQuery.build()`` is just ``stars:>=0``.
    """

    terms: tuple[str, ...]

    @classmethod
    def build(cls, query: str | None = None, user: str | None = None) -> SearchQuery:
        parts = [
            query if query and query.strip() else "",
            f"user:{user.strip()}" if user and user.strip() else "",
            FLOOR_TERM,
        ]
        return cls(terms=tuple(p for p in parts if p))

    def __str__(self) -> str:
        return " ".join(self.terms)


@dataclass(frozen=True, slots=True)
class LanguageSpec:
    """Languages a repository must *all* contain to pass the filter.

    Parsed from a whitespace-separated string such as ``"Go Python"``.
    Matching is case-insensitive and token-exact: ``"C"`` does not match
    ``"C++"``.
    """

    tokens: frozenset[str]

    @classmethod
    def parse(cls, raw: str | None) -> LanguageSpec:
        return cls(tokens=frozenset(t.casefold() for t in (raw or "").split()))

    def __bool__(self) -> bool:
        return bool(self.tokens)

    def matches(self, languages: list[str] | tuple[str, ...]) -> bool:
        """True when every required token equals one of *languages*."""
        available = {lang.casefold() for lang in languages}
        return self.tokens <= available
