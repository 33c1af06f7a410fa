"""Fuzzy join of enacted-law records to the roll-call vote events that passed them.

Each vote event is scored against every law independently and assigned to the
single best law when the score clears the threshold. The assignment is greedy
and event-local: it is not a global bipartite optimum, and ties go to the law
seen first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date

from .filters import MISSING_END_DATE, Filter, LawDateFilter
from .models import LawRecord, VoteEvent
from .schema import DATE_BONUS, DATE_SLACK_DAYS, SIMILARITY_THRESHOLD
from .text import dates_close, normalize_title, title_similarity

logger = logging.getLogger(__name__)


@dataclass
class LinkResult:
    """Result of linking vote events to laws."""

    laws: list[LawRecord]
    # law title -> vote events, in event encounter order
    linked: dict[str, list[VoteEvent]]
    matched: list[VoteEvent] = field(default_factory=list)
    event_count: int = 0

    @property
    def unmatched_count(self) -> int:
        return self.event_count - len(self.matched)


def dedupe_laws(laws: list[LawRecord]) -> list[LawRecord]:
    """
    Drop laws whose (normalized title, end date) key was already seen.

    Titles are trimmed; the first occurrence of each key is kept.
    """
    seen: set[tuple[str, date | None]] = set()
    unique: list[LawRecord] = []
    for law in laws:
        if not law.title:
            continue
        key = (normalize_title(law.title), law.end_date)
        if key in seen:
            continue
        seen.add(key)
        unique.append(replace(law, title=law.title.strip()))
    return unique


def score_pair(
    law: LawRecord,
    event: VoteEvent,
    *,
    date_bonus: float = DATE_BONUS,
    slack_days: int = DATE_SLACK_DAYS,
) -> float:
    """Title similarity plus a bonus when either law date is near the event's end date."""
    score = title_similarity(law.title, event.title)
    if dates_close(law.end_date, event.end_date, slack_days) or dates_close(
        law.start_date, event.end_date, slack_days
    ):
        score += date_bonus
    return score


def best_law(
    laws: list[LawRecord],
    event: VoteEvent,
    *,
    date_bonus: float = DATE_BONUS,
    slack_days: int = DATE_SLACK_DAYS,
) -> tuple[LawRecord | None, float]:
    """Highest-scoring law for an event; the first law wins ties."""
    best: LawRecord | None = None
    best_score = 0.0
    for law in laws:
        score = score_pair(law, event, date_bonus=date_bonus, slack_days=slack_days)
        if score > best_score:
            best_score = score
            best = law
    return best, best_score


def link_records(
    laws: list[LawRecord],
    events: list[VoteEvent],
    *,
    threshold: float = SIMILARITY_THRESHOLD,
    date_bonus: float = DATE_BONUS,
    slack_days: int = DATE_SLACK_DAYS,
) -> LinkResult:
    """
    Assign every vote event to the enacted law it most plausibly belongs to.

    Laws are deduplicated first, so there is one bucket per unique
    (normalized title, end date). Every deduplicated law gets a bucket, even
    if nothing matches it. An event is appended to its best law's bucket when
    the best score is at least ``threshold``; otherwise it is dropped.

    Args:
        laws: Enacted-law records, in source order
        events: Vote events, in source order
        threshold: Minimum composite score for a match
        date_bonus: Score added when dates are within ``slack_days``
        slack_days: Calendar-day tolerance for the date bonus

    Returns:
        LinkResult with the deduplicated laws, the law -> events mapping and
        the matched events in encounter order
    """
    unique_laws = dedupe_laws(laws)
    linked: dict[str, list[VoteEvent]] = {law.title: [] for law in unique_laws}
    matched: list[VoteEvent] = []

    for event in events:
        law, score = best_law(unique_laws, event, date_bonus=date_bonus, slack_days=slack_days)
        if law is None or score < threshold:
            logger.debug(
                "No law above %.2f for vote event %s (best %.3f)", threshold, event.id, score
            )
            continue
        linked[law.title].append(event)
        matched.append(event)

    logger.info(
        "Linked %d of %d vote events to %d laws",
        len(matched),
        len(events),
        len(unique_laws),
    )
    return LinkResult(laws=unique_laws, linked=linked, matched=matched, event_count=len(events))


def link(laws: list[LawRecord], events: list[VoteEvent]) -> dict[str, list[VoteEvent]]:
    """Link with default settings and return only the law -> events mapping."""
    return link_records(laws, events).linked


def laws_in_range(
    laws: list[LawRecord],
    start_date: date | None = None,
    end_date: date | None = None,
    filters: list[Filter] | None = None,
) -> list[LawRecord]:
    """
    Laws ending within a date range, most recent first.

    Laws without an end date are treated as ending on 1970-01-01, so they
    fall outside any range starting later and sort last.
    """
    date_filter = LawDateFilter(start_date=start_date, end_date=end_date)
    selected = [
        law
        for law in laws
        if date_filter.apply(law) and all(f.apply(law) for f in filters or [])
    ]
    return sorted(selected, key=lambda law: law.end_date or MISSING_END_DATE, reverse=True)


def filter_event_votes(event: VoteEvent, filters: list[Filter]) -> VoteEvent:
    """Copy of the event keeping only votes that pass every filter."""
    votes = tuple(row for row in event.votes if all(f.apply(row) for f in filters))
    return replace(event, votes=votes)
