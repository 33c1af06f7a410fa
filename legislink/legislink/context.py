"""Caller-owned memoisation of pipeline results for one raw-data snapshot."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable
from typing import Any, TypeVar

from .covote import Comparison, compare_focal
from .linker import LinkResult, link_records
from .models import CompareEvent, LawRecord, VoteEvent
from .parties import canonicalize_parties
from .schema import DATE_BONUS, DATE_SLACK_DAYS, SIMILARITY_THRESHOLD, TOP_ALLIES_LIMIT
from .timeline import ProfileIndex
from .utils import name_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PipelineContext:
    """
    Results cached per snapshot version.

    Link results are keyed on the linking parameters and comparisons on the
    normalised focal name. Every key also carries the snapshot version, and
    ``reset`` drops all entries, so results never leak across snapshots.
    A key is computed at most once, even when the context is shared between
    threads.

    Example:
        >>> ctx = PipelineContext("2024-06-01")
        >>> result = ctx.link(laws, events)
        >>> result is ctx.link(laws, events)
        True
    """

    def __init__(self, snapshot_version: str = ""):
        self.snapshot_version = snapshot_version
        self._cache: dict[Hashable, Any] = {}
        self._lock = threading.RLock()

    def reset(self, snapshot_version: str) -> None:
        """Invalidate every cached result and switch to a new snapshot version."""
        with self._lock:
            logger.debug(
                "Resetting pipeline context %r -> %r (%d entries)",
                self.snapshot_version,
                snapshot_version,
                len(self._cache),
            )
            self._cache.clear()
            self.snapshot_version = snapshot_version

    def ensure_snapshot(self, snapshot_version: str) -> None:
        """Reset only if ``snapshot_version`` differs from the current one."""
        if snapshot_version != self.snapshot_version:
            self.reset(snapshot_version)

    def __len__(self) -> int:
        return len(self._cache)

    def _memo(self, key: tuple, compute: Callable[[], T]) -> T:
        with self._lock:
            full_key = (self.snapshot_version, *key)
            if full_key not in self._cache:
                self._cache[full_key] = compute()
            return self._cache[full_key]

    def link(
        self,
        laws: list[LawRecord],
        events: list[VoteEvent],
        *,
        threshold: float = SIMILARITY_THRESHOLD,
        date_bonus: float = DATE_BONUS,
        slack_days: int = DATE_SLACK_DAYS,
    ) -> LinkResult:
        return self._memo(
            ("link", threshold, date_bonus, slack_days),
            lambda: link_records(
                laws,
                events,
                threshold=threshold,
                date_bonus=date_bonus,
                slack_days=slack_days,
            ),
        )

    def canonical_parties(
        self,
        laws: list[LawRecord],
        events: list[VoteEvent],
        *,
        threshold: float = SIMILARITY_THRESHOLD,
        date_bonus: float = DATE_BONUS,
        slack_days: int = DATE_SLACK_DAYS,
    ) -> dict[str, str]:
        """Canonical party map over the events matched by ``link``."""
        params = {"threshold": threshold, "date_bonus": date_bonus, "slack_days": slack_days}
        return self._memo(
            ("parties", threshold, date_bonus, slack_days),
            lambda: canonicalize_parties(self.link(laws, events, **params).matched),
        )

    def compare(
        self,
        events: list[CompareEvent],
        profiles: ProfileIndex,
        focal_name: str,
        *,
        limit: int = TOP_ALLIES_LIMIT,
    ) -> Comparison:
        """Comparison for ``focal_name``; names differing only in case/spacing share a result."""
        return self._memo(
            ("compare", name_key(focal_name), limit),
            lambda: compare_focal(events, profiles, focal_name, limit=limit),
        )
