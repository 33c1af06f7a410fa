"""Resolve one canonical party label per voter from their linked voting history."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .models import VoteClass, VoteEvent
from .votes import VOTE_ORDER, classify_vote, is_valid_name, normalize_party_name

logger = logging.getLogger(__name__)


def canonicalize_parties(matched_events: Iterable[VoteEvent]) -> dict[str, str]:
    """
    Pick the most frequently declared party for every valid voter name.

    Counts are taken over every vote row of every matched event. When two
    labels share the highest count, the label first seen for that voter wins.
    Voters absent from the events are absent from the result.

    Args:
        matched_events: Vote events linked to laws, in encounter order

    Returns:
        Mapping of trimmed voter name to canonical party label
    """
    counter: dict[str, dict[str, int]] = {}
    for event in matched_events:
        for row in event.votes:
            if not is_valid_name(row.voter_name):
                continue
            name = row.voter_name.strip()
            party = normalize_party_name(row.voter_party)
            counts = counter.setdefault(name, {})
            counts[party] = counts.get(party, 0) + 1

    canonical: dict[str, str] = {}
    for name, counts in counter.items():
        best_party = ""
        best_count = -1
        for party, count in counts.items():
            if count > best_count:
                best_count = count
                best_party = party
        canonical[name] = best_party

    logger.info("Resolved canonical parties for %d voters", len(canonical))
    return canonical


def canonical_party_for(canonical: Mapping[str, str], name: str, raw_party: str) -> str:
    """Canonical label for a known valid voter, else the normalized raw label."""
    if is_valid_name(name):
        key = name.strip()
        if key in canonical:
            return canonical[key]
    return normalize_party_name(raw_party)


@dataclass(frozen=True)
class VoterPosition:
    """A voter's resolved party and vote class on one event."""

    name: str
    party: str
    vote_class: VoteClass


def voter_positions(event: VoteEvent, canonical: Mapping[str, str]) -> list[VoterPosition]:
    """Valid voters of an event with canonical parties, sorted by party then yes/no/other."""
    positions = [
        VoterPosition(
            name=row.voter_name,
            party=canonical_party_for(canonical, row.voter_name, row.voter_party),
            vote_class=classify_vote(row.option),
        )
        for row in event.votes
        if is_valid_name(row.voter_name)
    ]
    return sorted(positions, key=lambda p: (p.party, VOTE_ORDER[p.vote_class]))
