"""
Party-affiliation timelines built from person membership records.

A person's memberships carry posts, and posts carry organizations. Every
organization classified as a political party contributes one interval spanning
its membership's start and end dates. Open intervals (no end date) are
ongoing. Overlapping intervals are kept as they are and counted separately
when computing tenure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from .models import Membership, PersonProfile
from .schema import PARTY_CLASSIFICATION
from .utils import name_key, round_half_up


@dataclass(frozen=True)
class MembershipInterval:
    """One party affiliation over a date range."""

    party_th: str
    party_en: str
    start: date | None
    end: date | None = None

    @property
    def party_label(self) -> str:
        return self.party_th or self.party_en

    @property
    def is_open(self) -> bool:
        return self.end is None


def _is_party(classification: str) -> bool:
    return (classification or "").upper() == PARTY_CLASSIFICATION


def party_timeline(profile: PersonProfile) -> list[MembershipInterval]:
    """Party intervals of a person, ordered by start date (missing starts first)."""
    intervals = [
        MembershipInterval(
            party_th=org.name,
            party_en=org.name_en,
            start=membership.start_date,
            end=membership.end_date,
        )
        for membership in profile.memberships
        for post in membership.posts
        for org in post.organizations
        if _is_party(org.classification)
    ]
    return sorted(intervals, key=lambda i: i.start or date.min)


def current_party(profile: PersonProfile) -> str:
    """
    Label of the last open interval in timeline order.

    Falls back to the chronologically last interval when none is open, and to
    "" for a person with no party intervals.
    """
    timeline = party_timeline(profile)
    for interval in reversed(timeline):
        if interval.is_open:
            return interval.party_label
    if timeline:
        return timeline[-1].party_label
    return ""


def diff_year_month(start: date, end: date) -> tuple[int, int]:
    """
    Whole years and months between two dates.

    A month only counts once its day-of-month is reached.

    Examples:
        >>> diff_year_month(date(2020, 1, 1), date(2021, 6, 15))
        (1, 5)
        >>> diff_year_month(date(2020, 1, 31), date(2020, 3, 1))
        (0, 1)
    """
    years = end.year - start.year
    months = end.month - start.month
    if end.day < start.day:
        months -= 1
    if months < 0:
        years -= 1
        months += 12
    return years, months


def tenure_years(
    profile: PersonProfile | None,
    party: str,
    today: date | None = None,
) -> float:
    """
    Years a person has spent in a party, to one decimal.

    Every interval whose Thai or English party name equals ``party`` counts,
    open intervals up to ``today``. Overlapping intervals are each counted.
    Intervals without a start date contribute nothing.

    Args:
        profile: The person, or None
        party: Target party label (Thai or English)
        today: End date for open intervals (default: date.today())

    Returns:
        Tenure in years, e.g. 1.4 for one year and five months
    """
    target = (party or "").strip()
    if profile is None or not target:
        return 0.0

    end_of_open = today or date.today()
    total_months = 0
    for interval in party_timeline(profile):
        if interval.start is None:
            continue
        if target not in (interval.party_th.strip(), interval.party_en.strip()):
            continue
        years, months = diff_year_month(interval.start, interval.end or end_of_open)
        total_months += years * 12 + months

    return round_half_up(total_months / 12, 1)


# -----------------------------------------------------------------------------
# Profile flattening
# -----------------------------------------------------------------------------


def latest_membership(memberships: tuple[Membership, ...]) -> Membership | None:
    """Membership ending last (open ones first), later start breaking ties."""
    if not memberships:
        return None
    ranked = sorted(
        memberships,
        key=lambda m: (m.end_date or date.max, m.start_date or date.min),
        reverse=True,
    )
    return ranked[0]


def current_membership(memberships: tuple[Membership, ...]) -> Membership | None:
    """First open membership, else the latest one."""
    for membership in memberships:
        if membership.end_date is None:
            return membership
    return latest_membership(memberships)


def _organization_name(membership: Membership | None) -> str:
    if membership is None:
        return ""
    for post in membership.posts:
        for org in post.organizations:
            if org.name:
                return org.name
    return ""


def _role(membership: Membership | None) -> str:
    if membership is None or not membership.posts:
        return ""
    post = membership.posts[0]
    return post.role or post.label


def all_parties(profile: PersonProfile) -> list[str]:
    """Distinct party names of a person, in membership order."""
    names: list[str] = []
    for membership in profile.memberships:
        for post in membership.posts:
            for org in post.organizations:
                if not _is_party(org.classification):
                    continue
                name = (org.name or org.name_en).strip()
                if name not in names:
                    names.append(name)
    return names


@dataclass
class ProfileSummary:
    """Display-ready view of a person profile."""

    name: str
    firstname: str
    lastname: str
    image: str
    parties: list[str]
    province: str
    latest_role: str
    latest_party: str
    current_membership_id: str
    current_membership_name: str
    timeline: list[MembershipInterval] = field(default_factory=list)
    profile: PersonProfile | None = None


def flatten_profile(profile: PersonProfile) -> ProfileSummary:
    latest = latest_membership(profile.memberships)
    current = current_membership(profile.memberships)
    return ProfileSummary(
        name=profile.display_name,
        firstname=profile.firstname,
        lastname=profile.lastname,
        image=profile.image,
        parties=all_parties(profile),
        province=latest.province if latest else "",
        latest_role=_role(latest),
        latest_party=current_party(profile),
        current_membership_id=current.id if current else "",
        current_membership_name=_organization_name(current),
        timeline=party_timeline(profile),
        profile=profile,
    )


class ProfileIndex:
    """Profiles looked up by display name or "firstname lastname".

    Keys are whitespace-collapsed and lower-cased; the first profile
    registered under a key wins.
    """

    def __init__(self, profiles: list[PersonProfile] | None = None):
        self.summaries: list[ProfileSummary] = []
        self._by_key: dict[str, ProfileSummary] = {}
        for profile in profiles or []:
            self.add(profile)

    def add(self, profile: PersonProfile) -> ProfileSummary:
        summary = flatten_profile(profile)
        self.summaries.append(summary)
        for key in (summary.name, f"{summary.firstname} {summary.lastname}"):
            k = name_key(key)
            if k and k not in self._by_key:
                self._by_key[k] = summary
        return summary

    def get(self, name: str | None) -> ProfileSummary | None:
        return self._by_key.get(name_key(name))

    def __len__(self) -> int:
        return len(self.summaries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name_key(name) in self._by_key
