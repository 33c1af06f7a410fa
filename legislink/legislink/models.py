"""Typed input records.

Raw payloads are converted into these frozen dataclasses by ``ingest``; every
other module works on them instead of on loosely structured dicts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class VoteClass(str, Enum):
    """Coarse classification of a free-text vote option."""

    YES = "yes"
    NO = "no"
    OTHER = "other"


@dataclass(frozen=True)
class LawRecord:
    """An enacted-law event."""

    title: str
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class VoteRow:
    """One voter's choice on a vote event."""

    option: str = ""
    voter_name: str = ""
    voter_party: str = ""


@dataclass(frozen=True)
class VoteEvent:
    """A roll-call vote event with its embedded votes."""

    id: str
    title: str
    start_date: date | None = None
    end_date: date | None = None
    votes: tuple[VoteRow, ...] = ()


@dataclass(frozen=True)
class SideVote:
    """A vote on one side of a focal-vs-everyone comparison."""

    name: str
    option: str = ""
    party: str = ""
    image: str = ""


@dataclass(frozen=True)
class CompareEvent:
    """A vote event split into the focal actor's vote and everyone else's."""

    id: str
    title: str = ""
    start_date: date | None = None
    focal: SideVote | None = None
    others: tuple[SideVote, ...] = ()


@dataclass(frozen=True)
class Organization:
    id: str = ""
    name: str = ""
    name_en: str = ""
    classification: str = ""
    image: str = ""


@dataclass(frozen=True)
class Post:
    role: str = ""
    label: str = ""
    organizations: tuple[Organization, ...] = ()


@dataclass(frozen=True)
class Membership:
    id: str = ""
    province: str = ""
    start_date: date | None = None
    end_date: date | None = None
    posts: tuple[Post, ...] = ()


@dataclass(frozen=True)
class PersonProfile:
    """A person with their membership history."""

    id: str = ""
    firstname: str = ""
    lastname: str = ""
    name: str = ""
    image: str = ""
    memberships: tuple[Membership, ...] = ()

    @property
    def display_name(self) -> str:
        """Explicit name, else "firstname lastname" with whitespace collapsed."""
        if self.name:
            return self.name
        return " ".join(f"{self.firstname} {self.lastname}".split())
