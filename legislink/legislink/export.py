"""Export pipeline results as Arrow tables, Parquet files and DuckDB tables.

Results are converted to pyarrow tables with the schemas in ``schema.py``.
Tables can be written to ZSTD-compressed Parquet or loaded into a local DuckDB
database via DuckDB's native Arrow scan.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import duckdb
import pyarrow as pa
import pyarrow.parquet as pq
from tqdm import tqdm

from .covote import ComparisonRow
from .exceptions import DatabaseReadError, OutputWriteError
from .linker import LinkResult
from .schema import (
    CANONICAL_PARTY_SCHEMA,
    LINKED_EVENTS_SCHEMA,
    OUTPUT_TABLES,
    PAIRWISE_SCHEMA,
    TIMELINE_SCHEMA,
)
from .timeline import ProfileIndex

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Result of a DuckDB load operation."""

    rows_loaded: int
    database_path: str
    tables_loaded: list[str] = field(default_factory=list)


# =============================================================================
# TABLE BUILDERS
# =============================================================================


def linked_events_table(result: LinkResult) -> pa.Table:
    """One row per (law, linked vote event)."""
    laws_by_title = {}
    for law in result.laws:
        laws_by_title.setdefault(law.title, law)

    rows = []
    for title, events in result.linked.items():
        law = laws_by_title.get(title)
        for event in events:
            rows.append(
                {
                    "law_title": title,
                    "law_start_date": law.start_date if law else None,
                    "law_end_date": law.end_date if law else None,
                    "event_id": event.id,
                    "event_title": event.title,
                    "event_start_date": event.start_date,
                    "event_end_date": event.end_date,
                    "vote_count": len(event.votes),
                }
            )
    return pa.Table.from_pylist(rows, schema=LINKED_EVENTS_SCHEMA)


def canonical_parties_table(canonical: Mapping[str, str]) -> pa.Table:
    rows = [{"voter_name": name, "party": party} for name, party in canonical.items()]
    return pa.Table.from_pylist(rows, schema=CANONICAL_PARTY_SCHEMA)


def pairwise_table(rows: list[ComparisonRow]) -> pa.Table:
    records = [
        {
            "a_name": row.a_name,
            "b_name": row.b_name,
            "sum_flag": row.sum_flag,
            "percent": row.percent,
            "a_latest_party": row.a_latest_party,
            "b_latest_party": row.b_latest_party,
        }
        for row in rows
    ]
    return pa.Table.from_pylist(records, schema=PAIRWISE_SCHEMA)


def timeline_table(profiles: ProfileIndex) -> pa.Table:
    """Party intervals of every indexed person; open intervals are current."""
    records = [
        {
            "person": summary.name,
            "party_th": interval.party_th,
            "party_en": interval.party_en,
            "start_date": interval.start,
            "end_date": interval.end,
            "is_current": interval.is_open,
        }
        for summary in profiles.summaries
        for interval in summary.timeline
    ]
    return pa.Table.from_pylist(records, schema=TIMELINE_SCHEMA)


# =============================================================================
# WRITERS
# =============================================================================


def write_parquet(table: pa.Table, output_path: Path | str) -> Path:
    """Write a table to ZSTD-compressed Parquet, creating parent directories."""
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        pq.write_table(table, output_path, compression="zstd")
    except (OSError, pa.ArrowException) as e:
        raise OutputWriteError(message=str(e), output_path=output_path) from e
    logger.info("Wrote %d rows to %s", table.num_rows, output_path)
    return output_path


def write_tables(tables: Mapping[str, pa.Table], output_dir: Path | str) -> list[Path]:
    """Write every table as ``<output_dir>/<name>.parquet``."""
    output_dir = Path(output_dir)
    return [write_parquet(table, output_dir / f"{name}.parquet") for name, table in tables.items()]


def load_to_duckdb(
    database_path: str | Path,
    tables: Mapping[str, pa.Table],
    *,
    show_progress: bool = True,
) -> LoadResult:
    """Load Arrow tables into a DuckDB database, replacing same-named tables.

    Args:
        database_path: Path to the DuckDB database file (created if not exists)
        tables: Table name -> Arrow table, loaded in iteration order
        show_progress: Show progress bar

    Returns:
        LoadResult with the total row count and loaded table names

    Raises:
        OutputWriteError: If the database cannot be opened or written.

    Example:
        >>> result = load_to_duckdb("legislink.duckdb", {"canonical_parties": table})
        >>> print(f"Loaded {result.rows_loaded:,} rows")
    """
    database_path = Path(database_path)
    try:
        conn = duckdb.connect(str(database_path))
    except duckdb.Error as e:
        raise OutputWriteError(message=str(e), output_path=database_path) from e

    names = list(tables)
    items = tqdm(names, desc="Loading tables", unit=" table") if show_progress else names
    rows_loaded = 0
    loaded: list[str] = []

    try:
        for name in items:
            arrow_table = tables[name]
            conn.register("arrow_source", arrow_table)
            try:
                conn.execute(f'CREATE OR REPLACE TABLE "{name}" AS SELECT * FROM arrow_source')
            finally:
                conn.unregister("arrow_source")
            rows_loaded += arrow_table.num_rows
            loaded.append(name)
            logger.debug("Loaded %d rows into %s", arrow_table.num_rows, name)
    except duckdb.Error as e:
        raise OutputWriteError(message=str(e), output_path=database_path) from e
    finally:
        if isinstance(items, tqdm):
            items.close()
        conn.close()

    logger.info("Loaded %d rows into %d tables in %s", rows_loaded, len(loaded), database_path)
    return LoadResult(
        rows_loaded=rows_loaded,
        database_path=str(database_path),
        tables_loaded=loaded,
    )


@dataclass
class TableSummary:
    """Row count and columns of one output table found in a database."""

    name: str
    row_count: int
    columns: list[tuple[str, str]] = field(default_factory=list)
    missing_columns: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.missing_columns


def _connect_read_only(database_path: str | Path) -> duckdb.DuckDBPyConnection:
    try:
        return duckdb.connect(str(database_path), read_only=True)
    except duckdb.Error as e:
        raise DatabaseReadError(message=str(e), database_path=Path(database_path)) from e


def summarize_database(database_path: str | Path) -> list[TableSummary]:
    """
    Describe the output tables present in a database, in load order.

    Tables that are not output tables are ignored. Columns an output schema
    expects but the stored table lacks are reported in ``missing_columns``,
    which flags databases written by an older export.
    """
    conn = _connect_read_only(database_path)
    try:
        present = {
            row[0]
            for row in conn.execute(
                "SELECT table_name FROM information_schema.tables WHERE table_schema = 'main'"
            ).fetchall()
        }
        summaries = []
        for name, schema in OUTPUT_TABLES.items():
            if name not in present:
                continue
            row_count = conn.execute(f'SELECT COUNT(*) FROM "{name}"').fetchone()[0]
            columns = [(col[0], col[1]) for col in conn.execute(f'DESCRIBE "{name}"').fetchall()]
            stored = {column for column, _ in columns}
            summaries.append(
                TableSummary(
                    name=name,
                    row_count=row_count,
                    columns=columns,
                    missing_columns=[n for n in schema.names if n not in stored],
                )
            )
    except duckdb.Error as e:
        raise DatabaseReadError(message=str(e), database_path=Path(database_path)) from e
    finally:
        conn.close()

    logger.debug("Found %d output tables in %s", len(summaries), database_path)
    return summaries


def query_database(database_path: str | Path, sql: str) -> tuple[list[str], list[tuple]]:
    """Run a read-only query and return the column names with the rows.

    Raises:
        DatabaseReadError: If the database cannot be opened or the query fails.

    Example:
        >>> columns, rows = query_database(
        ...     "legislink.duckdb",
        ...     "SELECT party, COUNT(*) AS voters FROM canonical_parties GROUP BY party",
        ... )
    """
    conn = _connect_read_only(database_path)
    try:
        cursor = conn.execute(sql)
        rows = cursor.fetchall()
        columns = [d[0] for d in cursor.description or []]
    except duckdb.Error as e:
        raise DatabaseReadError(message=str(e), database_path=Path(database_path)) from e
    finally:
        conn.close()
    return columns, rows
