"""Tests for peer statistics."""

from datetime import date

import pytest

from legislink.covote import ComparisonRow, compare_focal
from legislink.peers import band, party_peers

TODAY = date(2024, 6, 15)


class TestBand:
    """Tests for band."""

    def test_population_sd(self):
        """Standard deviation divides by N."""
        b = band([10, 20, 30])
        assert b.mean == pytest.approx(20.0)
        assert b.sd == pytest.approx(8.165, abs=1e-3)
        assert b.lower == pytest.approx(11.835, abs=1e-3)
        assert b.upper == pytest.approx(28.165, abs=1e-3)

    def test_clamped(self):
        """The band is clamped to [0, 100]."""
        low = band([0, 0, 30])
        assert low.lower == 0.0
        high = band([100, 100, 70])
        assert high.upper == 100.0

    def test_single_value(self):
        """A single value has no spread."""
        b = band([42.5])
        assert (b.mean, b.sd, b.lower, b.upper) == (42.5, 0.0, 42.5, 42.5)

    def test_empty(self):
        """Empty input gives the all-zero band."""
        b = band([])
        assert (b.mean, b.sd, b.lower, b.upper) == (0.0, 0.0, 0.0, 0.0)
        assert b.is_empty

    def test_zero_agreement_is_not_empty(self):
        """Peers who all agreed 0% still form a non-empty band."""
        b = band([0.0, 0.0])
        assert (b.mean, b.sd, b.lower, b.upper) == (0.0, 0.0, 0.0, 0.0)
        assert b.n == 2
        assert not b.is_empty

    def test_within_bounds(self):
        """lower <= mean <= upper within [0, 100]."""
        for values in ([5, 95], [0, 100], [50], [12.5, 12.5, 99.9]):
            b = band(values)
            assert 0 <= b.lower <= b.mean <= b.upper <= 100


class TestPartyPeers:
    """Tests for party_peers."""

    def test_same_party_peers(self, compare_events, profile_index):
        """Peers share the selected person's current party, best agreement first."""
        rows = compare_focal(compare_events, profile_index, "Somchai Jaidee").rows
        result = party_peers(rows, profile_index, "Somchai Jaidee", TODAY)
        assert result.party == "พรรคบี"
        assert [(p.name, p.pct, p.years) for p in result.peers] == [
            ("Preecha Sook", 60.0, 4.4),
            ("Anan Rak", 0.0, 1.1),
        ]
        assert result.peers[0].image == "p.png"
        assert result.band.mean == pytest.approx(30.0)
        assert result.band.sd == pytest.approx(30.0)
        assert result.band.lower == 0.0
        assert result.band.upper == pytest.approx(60.0)

    def test_deduplicated(self, profile_index):
        """A peer listed twice appears once."""
        row = ComparisonRow(
            "Somchai Jaidee", "Preecha Sook", 1, "25.0%", b_latest_party="พรรคบี"
        )
        result = party_peers([row, row], profile_index, "Somchai Jaidee", TODAY)
        assert [p.name for p in result.peers] == ["Preecha Sook"]

    def test_unknown_selected_person(self, compare_events, profile_index):
        """Without a current party there are no peers."""
        rows = compare_focal(compare_events, profile_index, "Somchai Jaidee").rows
        result = party_peers(rows, profile_index, "Nobody Here", TODAY)
        assert result.peers == []
        assert result.band.is_empty
