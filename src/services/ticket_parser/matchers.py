"""
Shared building blocks for the ticket field extractors.

Every field is recovered by an ordered tuple of small matcher functions.
``first_match`` runs them in priority order and returns the first non-empty
value, so a later pattern is only ever a fallback for an earlier one.
"""

import re
from datetime import date
from typing import Callable, Iterable, Optional
from loguru import logger

Matcher = Callable[..., Optional[str]]

DATE_PATTERN = re.compile(r"\b(\d{1,2})[/\-](\d{1,2})[/\-](\d{4}|\d{2})\b")


class DiagnosticLog:
    """Ordered trace of parsing decisions returned alongside the extraction result."""

    def __init__(self):
        self._entries: list[str] = []

    def add(self, message: str) -> None:
        self._entries.append(message)
        logger.debug(message)

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def first_match(
    matchers: Iterable[Matcher],
    *args,
    log: DiagnosticLog | None = None,
    field: str = "field",
) -> Optional[str]:
    """
    Run matchers in order and return the first non-empty result.

    Args:
        matchers: Matcher functions, highest priority first
        *args: Arguments passed unchanged to every matcher
        log: Optional diagnostic log receiving which matcher won
        field: Field name used in log entries

    Returns:
        The winning value, or None when every matcher comes up empty
    """
    for matcher in matchers:
        value = matcher(*args)
        if value:
            if log is not None:
                log.add(f"{field}: matched by {matcher.__name__.lstrip('_')} -> {value!r}")
            return value
    if log is not None:
        log.add(f"{field}: not found")
    return None


def to_iso_date(month: str, day: str, year: str) -> Optional[str]:
    """Convert M/D/YY or M/D/YYYY parts to YYYY-MM-DD, or None if not a real date."""
    full_year = int(year) + 2000 if len(year) == 2 else int(year)
    try:
        return date(full_year, int(month), int(day)).isoformat()
    except ValueError:
        return None


def find_dates(text: str) -> list[str]:
    """All valid dates in ``text`` as ISO strings, in order of appearance."""
    found = []
    for match in DATE_PATTERN.finditer(text or ""):
        iso = to_iso_date(*match.groups())
        if iso:
            found.append(iso)
    return found


def collapse_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()
