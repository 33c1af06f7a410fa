"""Shared pytest fixtures for legislink tests."""

import json
from datetime import date
from pathlib import Path

import pytest

from legislink.models import (
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
from legislink.timeline import ProfileIndex

BUDGET_LAW = "พระราชบัญญัติงบประมาณ พ.ศ. 2567"
FISHERIES_LAW = "พระราชบัญญัติการประมง"


@pytest.fixture
def laws() -> list[LawRecord]:
    """Two enacted laws with distinct normalized titles."""
    return [
        LawRecord(BUDGET_LAW, date(2023, 12, 1), date(2023, 12, 20)),
        LawRecord(FISHERIES_LAW, date(2024, 3, 1), date(2024, 3, 15)),
    ]


@pytest.fixture
def vote_events() -> list[VoteEvent]:
    """Four vote events: two on the budget, one on fisheries, one unrelated motion."""
    return [
        VoteEvent(
            id="ve-1",
            title="ร่างพระราชบัญญัติงบประมาณ พ.ศ. 2567 วาระที่ 3",
            end_date=date(2023, 12, 14),
            votes=(
                VoteRow("เห็นด้วย", "Somchai Jaidee", "Party A"),
                VoteRow("ไม่เห็นด้วย", "Malee Dee", "Party B"),
                VoteRow("เห็นด้วย", "12345", "Party A"),
            ),
        ),
        VoteEvent(
            id="ve-2",
            title="ร่างพระราชบัญญัติการประมง (ฉบับที่ 2)",
            end_date=date(2024, 2, 1),
            votes=(
                VoteRow("เห็นด้วย", "Somchai Jaidee", "Party A"),
                VoteRow("งดออกเสียง", "Malee Dee", "Party A"),
            ),
        ),
        VoteEvent(
            id="ve-3",
            title="Motion on flooding",
            end_date=date(2024, 1, 10),
            votes=(VoteRow("เห็นด้วย", "Somchai Jaidee", "Party B"),),
        ),
        VoteEvent(
            id="ve-4",
            title="ร่างพระราชบัญญัติงบประมาณ พ.ศ. 2567 วาระที่ 1",
            end_date=date(2023, 11, 1),
            votes=(VoteRow("เห็นด้วย", "Somchai Jaidee", " Party  A "),),
        ),
    ]


def _side(name: str, option: str, image: str = "") -> SideVote:
    return SideVote(name=name, option=option, image=image)


@pytest.fixture
def compare_events() -> list[CompareEvent]:
    """Five events comparing Somchai Jaidee with three other voters.

    Agreements: Preecha Sook 3, Malee Dee 2, Anan Rak 0.
    """
    focal = "Somchai Jaidee"
    return [
        CompareEvent(
            id="ce-1",
            focal=_side(focal, "เห็นด้วย", "s.png"),
            others=(
                _side("Malee Dee", "เห็นด้วย"),
                _side("Preecha Sook", "ไม่เห็นด้วย", "p.png"),
                _side("Anan Rak", "งดออกเสียง"),
            ),
        ),
        CompareEvent(
            id="ce-2",
            focal=_side(focal, "ไม่เห็นด้วย"),
            others=(_side("Malee Dee", "ไม่เห็นด้วย"), _side("Preecha Sook", "ไม่เห็นด้วย")),
        ),
        CompareEvent(id="ce-3", focal=None, others=(_side("Malee Dee", "เห็นด้วย"),)),
        CompareEvent(
            id="ce-4",
            focal=_side(focal, "เห็นด้วย"),
            others=(_side("Malee Dee", ""), _side("Preecha Sook", "เห็นด้วย")),
        ),
        CompareEvent(
            id="ce-5",
            focal=_side(focal, "เห็นด้วย"),
            others=(_side("Preecha Sook", "เห็นด้วย"),),
        ),
    ]


def _party(name: str, name_en: str) -> Organization:
    return Organization(name=name, name_en=name_en, classification="POLITICAL_PARTY")


HOUSE = Organization(name="สภาผู้แทนราษฎร", classification="HOUSE_OF_REPRESENTATIVE")


def _membership(mid: str, org: Organization, start: date | None, end: date | None) -> Membership:
    return Membership(
        id=mid,
        province="กรุงเทพมหานคร",
        start_date=start,
        end_date=end,
        posts=(Post(role="สมาชิกพรรค", organizations=(org,)),),
    )


@pytest.fixture
def profiles() -> list[PersonProfile]:
    """Profiles for the focal voter and the three compared voters."""
    somchai = PersonProfile(
        id="p-1",
        firstname="Somchai",
        lastname="Jaidee",
        image="somchai.png",
        memberships=(
            _membership("m-1", _party("พรรคเอ", "Party A"), date(2019, 3, 24), date(2021, 8, 31)),
            Membership(
                id="m-2",
                province="เชียงใหม่",
                start_date=date(2021, 9, 1),
                posts=(
                    Post(role="สมาชิกสภาผู้แทนราษฎร", organizations=(HOUSE,)),
                    Post(role="สมาชิกพรรค", organizations=(_party("พรรคบี", "Party B"),)),
                ),
            ),
        ),
    )
    preecha = PersonProfile(
        id="p-2",
        firstname="Preecha",
        lastname="Sook",
        image="preecha.png",
        memberships=(_membership("m-3", _party("พรรคบี", "Party B"), date(2020, 1, 15), None),),
    )
    malee = PersonProfile(
        id="p-3",
        firstname="Malee",
        lastname="Dee",
        memberships=(
            _membership("m-4", _party("พรรคบี", "Party B"), date(2022, 6, 1), date(2023, 1, 1)),
            _membership("m-5", _party("พรรคซี", "Party C"), date(2023, 1, 2), None),
        ),
    )
    anan = PersonProfile(
        id="p-4",
        firstname="Anan",
        lastname="Rak",
        memberships=(_membership("m-6", _party("พรรคบี", "Party B"), date(2023, 5, 10), None),),
    )
    return [somchai, preecha, malee, anan]


@pytest.fixture
def profile_index(profiles) -> ProfileIndex:
    return ProfileIndex(profiles)


# =============================================================================
# RAW SNAPSHOTS
# =============================================================================


@pytest.fixture
def raw_combined() -> dict:
    """Combined snapshot as saved from the GraphQL endpoint."""
    return {
        "data": {
            "billEnforceEvents": [
                {"title": BUDGET_LAW, "start_date": "2023-12-01", "end_date": "2023-12-20"},
                {"title": FISHERIES_LAW, "start_date": "2024-03-01", "end_date": "2024-03-15"},
                {"title": "", "end_date": "2024-01-01"},
            ],
            "voteEvents": [
                {
                    "id": "ve-1",
                    "title": "ร่างพระราชบัญญัติงบประมาณ พ.ศ. 2567 วาระที่ 3",
                    "start_date": "2023-12-14",
                    "end_date": "2023-12-14T10:30:00",
                    "votes": [
                        {
                            "option": "เห็นด้วย",
                            "voter_name": "Somchai Jaidee",
                            "voter_party": "Party A",
                        },
                        {
                            "option": "ไม่เห็นด้วย",
                            "voter_name": "Malee Dee",
                            "voter_party": "Party B",
                        },
                    ],
                },
                {
                    "id": "ve-2",
                    "title": "Motion on flooding",
                    "end_date": "2024-01-10",
                    "votes": [],
                },
                {"id": "ve-3", "title": ""},
            ],
        }
    }


@pytest.fixture
def raw_compare() -> dict:
    """Compare-person snapshot with A (focal) and B (others) votes."""

    def vote(option: str, firstname: str, lastname: str, party: str = "") -> dict:
        return {
            "option": option,
            "voter_party": party,
            "voters": [{"firstname": firstname, "lastname": lastname, "image": ""}],
        }

    return {
        "data": {
            "events": [
                {
                    "id": "ce-1",
                    "title": "ร่างพระราชบัญญัติงบประมาณ",
                    "start_date": "2023-12-14",
                    "A": [vote("เห็นด้วย", "Somchai", "Jaidee")],
                    "B": [
                        vote("เห็นด้วย", "Preecha", "Sook"),
                        vote("ไม่เห็นด้วย", "Malee", "Dee"),
                    ],
                },
                {
                    "id": "ce-2",
                    "title": "ร่างพระราชบัญญัติการประมง",
                    "A": [vote("ไม่เห็นด้วย", "Somchai", "Jaidee")],
                    "B": [
                        vote("ไม่เห็นด้วย", "Preecha", "Sook"),
                        vote("ไม่เห็นด้วย", "Malee", "Dee"),
                    ],
                },
            ]
        }
    }


@pytest.fixture
def raw_people() -> dict:
    """People snapshot with nested memberships, posts and organizations."""
    return {
        "data": {
            "people": [
                {
                    "id": "p-1",
                    "firstname": "Somchai",
                    "lastname": "Jaidee",
                    "image": "somchai.png",
                    "memberships": [
                        {
                            "id": "m-1",
                            "province": "เชียงใหม่",
                            "start_date": "2021-09-01",
                            "end_date": None,
                            "posts": [
                                {
                                    "role": "สมาชิกพรรค",
                                    "label": "",
                                    "organizations": [
                                        {
                                            "id": "o-1",
                                            "name": "พรรคบี",
                                            "name_en": "Party B",
                                            "classification": "POLITICAL_PARTY",
                                            "image": "",
                                        }
                                    ],
                                }
                            ],
                        }
                    ],
                },
                {
                    "id": "p-2",
                    "firstname": "Preecha",
                    "lastname": "Sook",
                    "memberships": [
                        {
                            "id": "m-2",
                            "start_date": "2020-01-15",
                            "posts": [
                                {
                                    "role": "สมาชิกพรรค",
                                    "organizations": [
                                        {
                                            "name": "พรรคบี",
                                            "name_en": "Party B",
                                            "classification": "POLITICAL_PARTY",
                                        }
                                    ],
                                }
                            ],
                        }
                    ],
                },
                "not a person",
            ]
        }
    }


def write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def combined_file(tmp_path, raw_combined) -> Path:
    return write_json(tmp_path / "combined.json", raw_combined)


@pytest.fixture
def compare_file(tmp_path, raw_compare) -> Path:
    return write_json(tmp_path / "compare_person.json", raw_compare)


@pytest.fixture
def people_file(tmp_path, raw_people) -> Path:
    return write_json(tmp_path / "profiles.json", raw_people)
