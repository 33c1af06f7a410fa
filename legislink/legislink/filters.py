"""Filter definitions for selecting laws and vote rows."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any

from .models import LawRecord, VoteRow
from .votes import normalize_party_name

# A law without an end date sorts and filters as if it ended on this day
MISSING_END_DATE = date(1970, 1, 1)


class Filter(ABC):
    """Base class for record filters."""

    @abstractmethod
    def apply(self, record: Any) -> bool:
        """Return True if record should be included."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Human-readable description of the filter."""
        ...


@dataclass
class LawDateFilter(Filter):
    """Filter laws by end date range (inclusive)."""

    start_date: date | None = None
    end_date: date | None = None

    def apply(self, record: LawRecord) -> bool:
        law_end = record.end_date or MISSING_END_DATE
        if law_end < (self.start_date or date(1900, 1, 1)):
            return False
        if law_end > (self.end_date or date(9999, 12, 31)):
            return False
        return True

    def describe(self) -> str:
        parts = []
        if self.start_date:
            parts.append(f"end_date >= {self.start_date}")
        if self.end_date:
            parts.append(f"end_date <= {self.end_date}")
        return " AND ".join(parts) if parts else "no date filter"


@dataclass
class TitleSearchFilter(Filter):
    """Filter laws whose title contains a case-insensitive search string."""

    text: str

    def apply(self, record: LawRecord) -> bool:
        return self.text.lower() in record.title.lower()

    def describe(self) -> str:
        return f"title contains {self.text!r}"


@dataclass
class PartyFilter(Filter):
    """Filter vote rows by declared party label."""

    parties: list[str]

    def apply(self, record: VoteRow) -> bool:
        if not self.parties:
            return True
        return normalize_party_name(record.voter_party) in self.parties

    def describe(self) -> str:
        if not self.parties:
            return "all parties"
        return f"party in [{', '.join(self.parties)}]"


@dataclass
class VoterFilter(Filter):
    """Filter vote rows by voter name."""

    names: list[str]

    def apply(self, record: VoteRow) -> bool:
        if not self.names:
            return True
        return record.voter_name in self.names

    def describe(self) -> str:
        if not self.names:
            return "all voters"
        if len(self.names) == 1:
            return f"voter = {self.names[0]}"
        return f"voter in [{', '.join(self.names)}]"


@dataclass
class CompositeFilter(Filter):
    """Combine multiple filters with AND logic."""

    filters: list[Filter]

    def apply(self, record: Any) -> bool:
        return all(f.apply(record) for f in self.filters)

    def describe(self) -> str:
        return " AND ".join(f"({f.describe()})" for f in self.filters)


def since(start_date: date) -> LawDateFilter:
    """Filter to laws enacted on or after ``start_date``."""
    return LawDateFilter(start_date=start_date)
