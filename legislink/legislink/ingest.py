"""Parse raw GraphQL/JSON payloads into typed records.

This is the ingestion boundary. Records missing a required field are skipped
and logged; the rest of the batch is processed normally. Passing a batch that
is not a list of records at all raises ``RecordShapeError``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

from .exceptions import RecordShapeError, SnapshotReadError
from .models import (
    CompareEvent,
    LawRecord,
    Membership,
    Organization,
    PersonProfile,
    Post,
    SideVote,
    VoteEvent,
    VoteRow,
)

logger = logging.getLogger(__name__)


def load_snapshot(json_path: Path | str) -> dict[str, Any]:
    """
    Read a JSON snapshot file.

    Snapshots saved from the GraphQL endpoint are wrapped as
    ``{"data": {...}}``; the wrapper is removed when present.

    Args:
        json_path: Path to the snapshot file.

    Returns:
        The payload dictionary (e.g. with ``voteEvents``/``billEnforceEvents``,
        ``events`` or ``people`` keys).

    Raises:
        SnapshotReadError: If the file cannot be read or is not a JSON object.
    """
    json_path = Path(json_path)
    try:
        with json_path.open(encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SnapshotReadError(message=str(e), source_path=json_path) from e

    if not isinstance(payload, dict):
        raise SnapshotReadError(
            message=f"Top-level JSON value is {type(payload).__name__}, not an object",
            source_path=json_path,
        )
    data = payload.get("data")
    if isinstance(data, dict):
        return data
    return payload


def parse_date(value: Any) -> date | None:
    """Parse an ISO date (optionally with a time part); None when unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _records(raw: Any, kind: str) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, (list, tuple)):
        raise RecordShapeError(
            message="Pass the list under the payload key, not the payload itself",
            record_kind=kind,
            received_type=type(raw).__name__,
        )
    return list(raw)


def parse_law_records(raw: Any) -> list[LawRecord]:
    """Convert raw enacted-law events; records without a title are skipped."""
    laws: list[LawRecord] = []
    for item in _records(raw, "law"):
        if not isinstance(item, Mapping) or not _text(item.get("title")).strip():
            logger.debug("Skipping law record without title: %r", item)
            continue
        laws.append(
            LawRecord(
                title=_text(item["title"]),
                start_date=parse_date(item.get("start_date")),
                end_date=parse_date(item.get("end_date")),
            )
        )
    return laws


def _vote_rows(raw: Any) -> tuple[VoteRow, ...]:
    rows = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, Mapping):
            continue
        rows.append(
            VoteRow(
                option=_text(item.get("option")),
                voter_name=_text(item.get("voter_name")),
                voter_party=_text(item.get("voter_party")),
            )
        )
    return tuple(rows)


def parse_vote_events(raw: Any) -> list[VoteEvent]:
    """Convert raw vote events; records without an id or title are skipped."""
    events: list[VoteEvent] = []
    for item in _records(raw, "vote event"):
        if not isinstance(item, Mapping):
            logger.debug("Skipping non-mapping vote event: %r", item)
            continue
        event_id = _text(item.get("id"))
        title = _text(item.get("title"))
        if not event_id or not title.strip():
            logger.debug("Skipping vote event without id/title: %r", event_id or item)
            continue
        events.append(
            VoteEvent(
                id=event_id,
                title=title,
                start_date=parse_date(item.get("start_date")),
                end_date=parse_date(item.get("end_date")),
                votes=_vote_rows(item.get("votes")),
            )
        )
    return events


def _side_vote(item: Any) -> SideVote | None:
    if not isinstance(item, Mapping):
        return None
    voters = item.get("voters") or []
    voter = voters[0] if isinstance(voters, list) and voters else None
    if isinstance(voter, Mapping):
        name = f"{_text(voter.get('firstname'))} {_text(voter.get('lastname'))}"
        image = _text(voter.get("image"))
    else:
        name = ""
        image = ""
    return SideVote(
        name=name.strip(),
        option=_text(item.get("option")),
        party=_text(item.get("voter_party")),
        image=image,
    )


def parse_compare_events(raw: Any) -> list[CompareEvent]:
    """
    Convert focal-vs-everyone events.

    Each event carries the focal actor's votes under ``A`` (only the first is
    used) and everyone else's under ``B``.
    """
    events: list[CompareEvent] = []
    for item in _records(raw, "compare event"):
        if not isinstance(item, Mapping) or not _text(item.get("id")):
            logger.debug("Skipping compare event without id: %r", item)
            continue
        a_votes = item.get("A") or []
        focal = _side_vote(a_votes[0]) if isinstance(a_votes, list) and a_votes else None
        others = tuple(
            vote
            for vote in (_side_vote(b) for b in (item.get("B") or []))
            if vote is not None
        )
        events.append(
            CompareEvent(
                id=_text(item["id"]),
                title=_text(item.get("title")),
                start_date=parse_date(item.get("start_date")),
                focal=focal,
                others=others,
            )
        )
    return events


def _organization(item: Mapping) -> Organization:
    return Organization(
        id=_text(item.get("id")),
        name=_text(item.get("name")),
        name_en=_text(item.get("name_en")),
        classification=_text(item.get("classification")),
        image=_text(item.get("image")),
    )


def _post(item: Mapping) -> Post:
    return Post(
        role=_text(item.get("role")),
        label=_text(item.get("label")),
        organizations=tuple(
            _organization(o) for o in item.get("organizations") or [] if isinstance(o, Mapping)
        ),
    )


def _membership(item: Mapping) -> Membership:
    return Membership(
        id=_text(item.get("id")),
        province=_text(item.get("province")),
        start_date=parse_date(item.get("start_date")),
        end_date=parse_date(item.get("end_date")),
        posts=tuple(_post(p) for p in item.get("posts") or [] if isinstance(p, Mapping)),
    )


def parse_profiles(raw: Any) -> list[PersonProfile]:
    """Convert person profiles with their memberships, posts and organizations."""
    people: list[PersonProfile] = []
    for item in _records(raw, "person"):
        if not isinstance(item, Mapping):
            logger.debug("Skipping non-mapping person record: %r", item)
            continue
        people.append(
            PersonProfile(
                id=_text(item.get("id")),
                firstname=_text(item.get("firstname")),
                lastname=_text(item.get("lastname")),
                name=_text(item.get("name")),
                image=_text(item.get("image")),
                memberships=tuple(
                    _membership(m)
                    for m in item.get("memberships") or []
                    if isinstance(m, Mapping)
                ),
            )
        )
    return people
