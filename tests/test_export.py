"""Tests for Arrow, Parquet and DuckDB export."""

from datetime import date

import pyarrow.parquet as pq
import pytest

from legislink.covote import compare_focal
from legislink.exceptions import DatabaseReadError, OutputWriteError
from legislink.export import (
    canonical_parties_table,
    linked_events_table,
    load_to_duckdb,
    pairwise_table,
    query_database,
    summarize_database,
    timeline_table,
    write_parquet,
    write_tables,
)
from legislink.linker import link_records
from legislink.parties import canonicalize_parties
from legislink.schema import (
    CANONICAL_PARTY_SCHEMA,
    LINKED_EVENTS_SCHEMA,
    PAIRWISE_SCHEMA,
    TIMELINE_SCHEMA,
)


@pytest.fixture
def tables(laws, vote_events, compare_events, profile_index) -> dict:
    result = link_records(laws, vote_events)
    comparison = compare_focal(compare_events, profile_index, "Somchai Jaidee")
    return {
        "linked_events": linked_events_table(result),
        "canonical_parties": canonical_parties_table(canonicalize_parties(result.matched)),
        "pairwise": pairwise_table(comparison.rows),
        "party_timeline": timeline_table(profile_index),
    }


class TestTables:
    """Tests for table builders."""

    def test_schemas(self, tables):
        """Tables use the declared schemas."""
        assert tables["linked_events"].schema == LINKED_EVENTS_SCHEMA
        assert tables["canonical_parties"].schema == CANONICAL_PARTY_SCHEMA
        assert tables["pairwise"].schema == PAIRWISE_SCHEMA
        assert tables["party_timeline"].schema == TIMELINE_SCHEMA

    def test_linked_events_rows(self, tables):
        """One row per linked event, with law dates."""
        table = tables["linked_events"]
        assert table.num_rows == 3
        assert table.column("event_id").to_pylist() == ["ve-1", "ve-4", "ve-2"]
        assert table.column("law_end_date").to_pylist()[0] == date(2023, 12, 20)
        assert table.column("vote_count").to_pylist() == [3, 1, 2]

    def test_timeline_rows(self, tables):
        """Open intervals are marked current."""
        table = tables["party_timeline"]
        rows = [r for r in table.to_pylist() if r["person"] == "Somchai Jaidee"]
        assert [(r["party_th"], r["is_current"]) for r in rows] == [
            ("พรรคเอ", False),
            ("พรรคบี", True),
        ]

    def test_empty_inputs(self):
        """Empty inputs give empty tables."""
        assert canonical_parties_table({}).num_rows == 0
        assert pairwise_table([]).num_rows == 0


class TestWriters:
    """Tests for Parquet writers."""

    def test_write_parquet(self, tmp_path, tables):
        """Tables round-trip through Parquet."""
        path = write_parquet(tables["canonical_parties"], tmp_path / "nested" / "parties.parquet")
        assert path.exists()
        assert pq.read_table(path).to_pylist() == tables["canonical_parties"].to_pylist()

    def test_write_tables(self, tmp_path, tables):
        """Each table is written under its name."""
        paths = write_tables(tables, tmp_path)
        assert sorted(p.name for p in paths) == [
            "canonical_parties.parquet",
            "linked_events.parquet",
            "pairwise.parquet",
            "party_timeline.parquet",
        ]

    def test_write_failure(self, tmp_path, tables):
        """Writing below a regular file raises OutputWriteError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(OutputWriteError):
            write_parquet(tables["pairwise"], blocker / "pairwise.parquet")


class TestDuckDB:
    """Tests for DuckDB loading and queries."""

    def test_load_and_query(self, tmp_path, tables):
        """Tables load into DuckDB and can be queried."""
        db = tmp_path / "legislink.duckdb"
        result = load_to_duckdb(db, tables, show_progress=False)
        assert result.tables_loaded == list(tables)
        assert result.rows_loaded == sum(t.num_rows for t in tables.values())

        columns, rows = query_database(
            db, "SELECT voter_name, party FROM canonical_parties ORDER BY 1"
        )
        assert columns == ["voter_name", "party"]
        assert rows == [("Malee Dee", "Party B"), ("Somchai Jaidee", "Party A")]

    def test_query_error(self, tmp_path, tables):
        """A failing query raises DatabaseReadError."""
        db = tmp_path / "legislink.duckdb"
        load_to_duckdb(db, tables, show_progress=False)
        with pytest.raises(DatabaseReadError):
            query_database(db, "SELECT * FROM no_such_table")

    def test_reload_replaces(self, tmp_path, tables):
        """Loading the same table again replaces it."""
        db = tmp_path / "legislink.duckdb"
        load_to_duckdb(db, tables, show_progress=False)
        load_to_duckdb(db, {"pairwise": tables["pairwise"]}, show_progress=False)
        summary = {s.name: s for s in summarize_database(db)}["pairwise"]
        assert summary.row_count == tables["pairwise"].num_rows
        assert ("sum_flag", "BIGINT") in summary.columns
        assert summary.is_complete


class TestSummarizeDatabase:
    """Tests for summarize_database."""

    def test_output_tables_in_load_order(self, tmp_path, tables):
        """Only output tables are listed, in load order."""
        db = tmp_path / "legislink.duckdb"
        loaded = {
            "scratch": tables["pairwise"],
            "pairwise": tables["pairwise"],
            "canonical_parties": tables["canonical_parties"],
        }
        load_to_duckdb(db, loaded, show_progress=False)
        summaries = summarize_database(db)
        assert [s.name for s in summaries] == ["canonical_parties", "pairwise"]
        assert summaries[0].row_count == 2

    def test_missing_columns(self, tmp_path, tables):
        """A table lacking expected columns is reported incomplete."""
        db = tmp_path / "legislink.duckdb"
        load_to_duckdb(db, {"pairwise": tables["canonical_parties"]}, show_progress=False)
        (summary,) = summarize_database(db)
        assert not summary.is_complete
        assert summary.missing_columns == [
            "a_name",
            "b_name",
            "sum_flag",
            "percent",
            "a_latest_party",
            "b_latest_party",
        ]

    def test_empty_database(self, tmp_path):
        """A database without output tables gives no summaries."""
        db = tmp_path / "empty.duckdb"
        load_to_duckdb(db, {}, show_progress=False)
        assert summarize_database(db) == []
