"""Deterministic slug identifiers for generated rules and failure modes."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final

MAX_SUFFIX_ATTEMPTS: Final[int] = 1000
_SLUG_SEPARATOR: Final[str] = "-"
_SLUG_CHARSET_RE: Final[re.Pattern[str]] = re.compile(r"[^a-z0-9-]")
_WHITESPACE_RE: Final[re.Pattern[str]] = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class SlugProfile:
    """Immutable parameters for turning free text into an identifier."""

    prefix: str
    stop_words: frozenset[str]
    max_tokens: int
    max_length: int
    disallowed: re.Pattern[str]
    leading_phrase: re.Pattern[str] | None = None

    def fallback(self, index: int) -> str:
        return f"{self.prefix}{index}"


RULE_PROFILE: Final[SlugProfile] = SlugProfile(
    prefix="constraint-",
    stop_words=frozenset(
        {
            "the",
            "a",
            "an",
            "is",
            "are",
            "must",
            "should",
            "can",
            "will",
            "be",
            "to",
            "of",
            "not",
            "only",
        }
    ),
    max_tokens=3,
    max_length=30,
    disallowed=re.compile(r"[^a-z0-9\s]", re.ASCII),
)

FAILURE_MODE_PROFILE: Final[SlugProfile] = SlugProfile(
    prefix="out-of-scope-",
    stop_words=frozenset({"handle", "support", "debug"}),
    max_tokens=2,
    max_length=25,
    disallowed=re.compile(r"[^\w\s]", re.ASCII),
    leading_phrase=re.compile(r"^does\s+not\s+", re.IGNORECASE),
)


def slugify(text: str, profile: SlugProfile, index: int) -> str:
    """Return the base identifier for ``text``.

    ``index`` is the item's 0-based position in its section and only feeds the
    positional fallback used when no token survives filtering.
    """

    working = text.strip()
    if profile.leading_phrase is not None:
        working = profile.leading_phrase.sub("", working, count=1)
    working = profile.disallowed.sub(" ", working.lower())
    working = _WHITESPACE_RE.sub(" ", working).strip()

    tokens = [token for token in working.split() if token not in profile.stop_words]
    tokens = tokens[: profile.max_tokens]
    if not tokens:
        return profile.fallback(index)

    slug = _SLUG_CHARSET_RE.sub("", _SLUG_SEPARATOR.join(tokens)).strip(_SLUG_SEPARATOR)
    if not slug:
        return profile.fallback(index)
    slug = slug[: profile.max_length]
    return f"{profile.prefix}{slug}"


class IdentifierAllocator:
    """Hands out collision-free identifiers within one collection.

    The registry is an insertion-ordered dict so iteration order is the
    allocation order.
    """

    def __init__(self, profile: SlugProfile, reserved: Iterable[str] = ()) -> None:
        self._profile = profile
        self._taken: dict[str, None] = dict.fromkeys(reserved)

    @property
    def taken(self) -> tuple[str, ...]:
        return tuple(self._taken)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._taken

    def allocate(self, text: str, index: int) -> str:
        base = slugify(text, self._profile, index)
        candidate = base
        if candidate in self._taken:
            candidate = self._next_free(base, index)
        self._taken[candidate] = None
        return candidate

    def _next_free(self, base: str, index: int) -> str:
        for suffix in range(1, MAX_SUFFIX_ATTEMPTS + 1):
            candidate = f"{base}{_SLUG_SEPARATOR}{suffix}"
            if candidate not in self._taken:
                return candidate
        return self._profile.fallback(index)


__all__ = [
    "FAILURE_MODE_PROFILE",
    "IdentifierAllocator",
    "MAX_SUFFIX_ATTEMPTS",
    "RULE_PROFILE",
    "SlugProfile",
    "slugify",
]
