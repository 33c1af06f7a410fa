"""Mean/standard-deviation banding of agreement percentages among same-party peers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date

from .covote import ComparisonRow
from .timeline import ProfileIndex, tenure_years

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeerBand:
    """Mean +/- one population standard deviation, clamped to [0, 100]."""

    mean: float
    sd: float
    lower: float
    upper: float
    n: int = 0

    @property
    def is_empty(self) -> bool:
        """True when no peers contributed, regardless of their agreement."""
        return self.n == 0


EMPTY_BAND = PeerBand(mean=0.0, sd=0.0, lower=0.0, upper=0.0)


def band(percentages: list[float]) -> PeerBand:
    """
    Summarize percentages as mean, population SD and the [mean-sd, mean+sd] band.

    An empty list gives an all-zero band with ``n == 0``, meaning "no peers".

    Examples:
        >>> b = band([10, 20, 30])
        >>> round(b.mean, 2), round(b.sd, 2), round(b.lower, 2), round(b.upper, 2)
        (20.0, 8.16, 11.84, 28.16)
    """
    if not percentages:
        return EMPTY_BAND
    n = len(percentages)
    mean = sum(percentages) / n
    variance = sum((p - mean) ** 2 for p in percentages) / n
    sd = math.sqrt(variance)
    return PeerBand(
        mean=mean,
        sd=sd,
        lower=max(0.0, mean - sd),
        upper=min(100.0, mean + sd),
        n=n,
    )


@dataclass(frozen=True)
class Peer:
    """A same-party peer with their agreement percentage and party tenure."""

    name: str
    pct: float
    image: str
    years: float


@dataclass
class PeerComparison:
    party: str
    peers: list[Peer]
    band: PeerBand


def party_peers(
    rows: list[ComparisonRow],
    profiles: ProfileIndex,
    selected_name: str,
    today: date | None = None,
) -> PeerComparison:
    """
    Peers of ``selected_name`` among the focal actor's comparison rows.

    A peer is a B-side actor whose current party equals the selected person's
    current party. Each appears once, with tenure in that party, ordered by
    agreement percentage descending.
    """
    selected = profiles.get(selected_name)
    party = (selected.latest_party if selected else "").strip()
    if not party:
        logger.debug("No current party for %s", selected_name)
        return PeerComparison(party="", peers=[], band=EMPTY_BAND)

    seen: set[str] = set()
    peers: list[Peer] = []
    for row in rows:
        if not row.b_name.strip() or row.b_latest_party.strip() != party:
            continue
        if row.b_name in seen:
            continue
        seen.add(row.b_name)
        profile = profiles.get(row.b_name)
        peers.append(
            Peer(
                name=row.b_name,
                pct=row.pct,
                image=row.b_image,
                years=tenure_years(profile.profile if profile else None, party, today),
            )
        )

    peers.sort(key=lambda p: p.pct, reverse=True)
    return PeerComparison(party=party, peers=peers, band=band([p.pct for p in peers]))
