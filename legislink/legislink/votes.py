"""Vote option classification, voter-name validity and per-event party tallies."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Final

from .models import VoteClass, VoteEvent
from .schema import MIN_NAME_LENGTH, UNKNOWN_PARTY

# Checked in this order; "ไม่เห็นด้วย" contains "เห็นด้วย", so negatives go first
NEGATIVE_TERMS: Final[tuple[str, ...]] = (
    "ไม่เห็น",
    "คัดค้าน",
    "against",
    "reject",
    "disapprove",
)
POSITIVE_TERMS: Final[tuple[str, ...]] = (
    "เห็นชอบ",
    "เห็นด้วย",
    "approve",
    "for",
    "support",
    "pass",
)

_NEGATIVE_RE: Final = re.compile("|".join(map(re.escape, NEGATIVE_TERMS)), re.IGNORECASE)
_POSITIVE_RE: Final = re.compile("|".join(map(re.escape, POSITIVE_TERMS)), re.IGNORECASE)

# Latin letters or Thai script (ก..๙)
_LETTER_RE: Final = re.compile(r"[A-Za-zก-๙]")
_UUID_RE: Final = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_WHITESPACE_RE: Final = re.compile(r"\s+")

# Display order of vote classes within a party
VOTE_ORDER: Final[dict[VoteClass, int]] = {
    VoteClass.YES: 0,
    VoteClass.NO: 1,
    VoteClass.OTHER: 2,
}


def classify_vote(option: str | None) -> VoteClass:
    """
    Classify a free-text vote option as yes, no or other.

    Examples:
        >>> classify_vote("เห็นด้วย")
        <VoteClass.YES: 'yes'>
        >>> classify_vote("ไม่เห็นด้วย")
        <VoteClass.NO: 'no'>
        >>> classify_vote("งดออกเสียง")
        <VoteClass.OTHER: 'other'>
    """
    if not option:
        return VoteClass.OTHER
    text = str(option).lower()
    if _NEGATIVE_RE.search(text):
        return VoteClass.NO
    if _POSITIVE_RE.search(text):
        return VoteClass.YES
    # Abstentions, absences and anything unrecognised
    return VoteClass.OTHER


def is_valid_name(name: str | None) -> bool:
    """True for names with a Latin/Thai letter, not UUID-shaped, of length >= 3."""
    if not name:
        return False
    text = str(name).strip()
    if not _LETTER_RE.search(text):
        return False
    if _UUID_RE.match(text):
        return False
    return len(text) >= MIN_NAME_LENGTH


def normalize_party_name(label: str | None) -> str:
    """Collapse whitespace in a party label; empty labels become ``UNKNOWN_PARTY``."""
    text = _WHITESPACE_RE.sub(" ", label or "").strip()
    return text or UNKNOWN_PARTY


@dataclass
class PartyTally:
    """Vote counts of one party on one vote event."""

    party: str
    yes: int = 0
    no: int = 0
    other: int = 0
    voters: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.yes + self.no + self.other

    def add(self, vote_class: VoteClass, voter_name: str) -> None:
        setattr(self, vote_class.value, getattr(self, vote_class.value) + 1)
        if voter_name not in self.voters:
            self.voters.append(voter_name)


def party_breakdown(event: VoteEvent) -> list[PartyTally]:
    """
    Tally an event's votes per declared party.

    Votes cast under invalid voter names are ignored. Parties are returned in
    the order they are first seen among the event's votes.
    """
    tallies: dict[str, PartyTally] = {}
    for row in event.votes:
        if not is_valid_name(row.voter_name):
            continue
        party = normalize_party_name(row.voter_party)
        tally = tallies.get(party)
        if tally is None:
            tally = tallies[party] = PartyTally(party=party)
        tally.add(classify_vote(row.option), row.voter_name.strip())
    return list(tallies.values())
