"""Pairwise co-voting aggregation between a focal actor and everyone else.

For every vote event the caller supplies the focal actor's sampled vote and
the votes of all other actors. A pair (focal, other) agrees on an event when
both chose the identical non-empty option. ``sum_flag`` counts agreements per
pair across events; percentages divide by the number of events supplied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

import polars as pl

from .models import CompareEvent
from .schema import NO_DATA, TOP_ALLIES_LIMIT
from .timeline import ProfileIndex
from .utils import name_key, round_half_up

logger = logging.getLogger(__name__)

FLAT_COLUMNS = {
    "event_id": pl.String,
    "a_name": pl.String,
    "a_party": pl.String,
    "a_option": pl.String,
    "b_name": pl.String,
    "b_party": pl.String,
    "b_option": pl.String,
    "flag": pl.Int64,
}


@dataclass(frozen=True)
class PairwiseRow:
    """Agreement count between a focal actor (A) and another actor (B)."""

    a_name: str
    b_name: str
    sum_flag: int


@dataclass(frozen=True)
class ComparisonRow:
    """A pairwise row joined with percentages, images and profile data."""

    a_name: str
    b_name: str
    sum_flag: int
    percent: str
    a_image: str = ""
    b_image: str = ""
    a_latest_party: str = ""
    b_latest_party: str = ""
    a_current_membership_name: str = ""
    b_current_membership_name: str = ""

    @property
    def pct(self) -> float:
        return percent_value(self.percent)

    def swapped(self) -> ComparisonRow:
        """The same row seen from B's side."""
        return replace(
            self,
            a_name=self.b_name,
            b_name=self.a_name,
            a_image=self.b_image,
            b_image=self.a_image,
            a_latest_party=self.b_latest_party,
            b_latest_party=self.a_latest_party,
            a_current_membership_name=self.b_current_membership_name,
            b_current_membership_name=self.a_current_membership_name,
        )


def flatten_compare_rows(events: list[CompareEvent]) -> pl.DataFrame:
    """
    One row per (event, other actor) with the agreement flag.

    Events without a sampled focal vote produce no rows.
    """
    records = []
    for event in events:
        focal = event.focal
        if focal is None:
            continue
        for other in event.others:
            agrees = bool(focal.option) and bool(other.option) and focal.option == other.option
            records.append(
                {
                    "event_id": event.id,
                    "a_name": focal.name,
                    "a_party": focal.party,
                    "a_option": focal.option,
                    "b_name": other.name,
                    "b_party": other.party,
                    "b_option": other.option,
                    "flag": 1 if agrees else 0,
                }
            )
    return pl.DataFrame(records, schema=FLAT_COLUMNS)


def aggregate_pairs(events: list[CompareEvent]) -> list[PairwiseRow]:
    """
    Sum agreement flags per (A, B) pair.

    Returns:
        Rows sorted by sum_flag descending, then a_name, then b_name ascending
    """
    flat = flatten_compare_rows(events)
    if flat.is_empty():
        return []

    summed = (
        flat.group_by(["a_name", "b_name"], maintain_order=True)
        .agg(pl.col("flag").sum().alias("sum_flag"))
        .sort(["sum_flag", "a_name", "b_name"], descending=[True, False, False])
    )
    logger.info("Aggregated %d vote rows into %d pairs", flat.height, summed.height)
    return [
        PairwiseRow(a_name=row["a_name"], b_name=row["b_name"], sum_flag=int(row["sum_flag"]))
        for row in summed.iter_rows(named=True)
    ]


def format_percent(sum_flag: int, total_events: int) -> str:
    """Agreement share as "NN.N%", or ``NO_DATA`` when no events were considered."""
    if total_events <= 0:
        return NO_DATA
    return f"{round_half_up(sum_flag / total_events * 100, 1):.1f}%"


def percent_value(percent: str | None) -> float:
    """Parse a rendered percentage back to a number; non-numeric text gives 0."""
    try:
        return float(str(percent or "").replace("%", ""))
    except ValueError:
        return 0.0


def image_index(events: list[CompareEvent]) -> dict[str, str]:
    """First non-empty image seen for every actor name."""
    images: dict[str, str] = {}
    for event in events:
        sides = ([event.focal] if event.focal else []) + list(event.others)
        for vote in sides:
            name = vote.name.strip()
            image = vote.image.strip()
            if name and image and name not in images:
                images[name] = image
    return images


def join_profiles(
    pairs: list[PairwiseRow],
    total_events: int,
    profiles: ProfileIndex,
    images: dict[str, str] | None = None,
) -> list[ComparisonRow]:
    """Attach percentages, images and current party/membership to pairwise rows."""
    images = images or {}
    rows = []
    for pair in pairs:
        a_profile = profiles.get(pair.a_name)
        b_profile = profiles.get(pair.b_name)
        rows.append(
            ComparisonRow(
                a_name=pair.a_name,
                b_name=pair.b_name,
                sum_flag=pair.sum_flag,
                percent=format_percent(pair.sum_flag, total_events),
                a_image=images.get(pair.a_name.strip()) or (a_profile.image if a_profile else ""),
                b_image=images.get(pair.b_name.strip()) or (b_profile.image if b_profile else ""),
                a_latest_party=a_profile.latest_party if a_profile else "",
                b_latest_party=b_profile.latest_party if b_profile else "",
                a_current_membership_name=(
                    a_profile.current_membership_name if a_profile else ""
                ),
                b_current_membership_name=(
                    b_profile.current_membership_name if b_profile else ""
                ),
            )
        )
    return rows


def orient_to_focal(rows: list[ComparisonRow], focal_name: str) -> list[ComparisonRow]:
    """
    Rows where ``focal_name`` is on the A side.

    When the focal actor only appears on the B side of a precomputed table,
    those rows are swapped so the focal actor becomes A. An empty focal name
    selects the A name of the first row. Names are compared by ``name_key``.
    """
    focal = name_key(focal_name)
    if not focal and rows:
        focal = name_key(rows[0].a_name)
    as_a = [r for r in rows if name_key(r.a_name) == focal]
    if as_a:
        return as_a
    as_b = [r.swapped() for r in rows if name_key(r.b_name) == focal]
    if as_b:
        logger.debug("Swapped %d rows to put %s on the A side", len(as_b), focal)
    return as_b


def top_allies(rows: list[ComparisonRow], limit: int = TOP_ALLIES_LIMIT) -> list[ComparisonRow]:
    """Highest-agreement other actors, one row per B name, at most ``limit``."""
    seen: set[str] = set()
    unique = []
    for row in rows:
        if not row.b_name.strip() or row.b_name in seen:
            continue
        seen.add(row.b_name)
        unique.append(row)
    unique.sort(key=lambda r: r.pct, reverse=True)
    return unique[:limit]


@dataclass
class Comparison:
    """Everything derived for one focal actor."""

    focal_name: str
    total_events: int
    pairs: list[PairwiseRow] = field(default_factory=list)
    rows: list[ComparisonRow] = field(default_factory=list)
    allies: list[ComparisonRow] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.rows)


def compare_focal(
    events: list[CompareEvent],
    profiles: ProfileIndex,
    focal_name: str = "",
    *,
    limit: int = TOP_ALLIES_LIMIT,
) -> Comparison:
    """Aggregate, join with profiles, orient to the focal actor and pick allies."""
    total = len(events)
    pairs = aggregate_pairs(events)
    joined = join_profiles(pairs, total, profiles, image_index(events))
    rows = orient_to_focal(joined, focal_name)
    # Spelling as found in the data, else the profile name
    if rows:
        focal = rows[0].a_name
    else:
        known = profiles.get(focal_name)
        focal = known.name if known else " ".join((focal_name or "").split())
        logger.warning("No voting comparison data available for %s", focal or "<unnamed>")
    return Comparison(
        focal_name=focal,
        total_events=total,
        pairs=pairs,
        rows=rows,
        allies=top_allies(rows, limit),
    )
