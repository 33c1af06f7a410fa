"""Command-line interface for linking vote events to laws and comparing voters."""

import functools
import logging
from dataclasses import replace
from datetime import date, datetime

import click

from .covote import compare_focal
from .exceptions import LegislinkError
from .export import (
    canonical_parties_table,
    linked_events_table,
    load_to_duckdb,
    pairwise_table,
    query_database,
    summarize_database,
    timeline_table,
    write_tables,
)
from .filters import TitleSearchFilter
from .ingest import (
    load_snapshot,
    parse_compare_events,
    parse_law_records,
    parse_profiles,
    parse_vote_events,
)
from .linker import laws_in_range, link_records
from .parties import canonicalize_parties
from .peers import party_peers
from .schema import DATE_BONUS, DATE_SLACK_DAYS, SIMILARITY_THRESHOLD, TOP_ALLIES_LIMIT
from .timeline import ProfileIndex, tenure_years

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value else None


def _report_errors(func):
    """Print pipeline errors as ``ERROR: ...`` and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except LegislinkError as e:
            click.echo(f"ERROR: {e}", err=True)
            raise SystemExit(1)

    return wrapper


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Link parliamentary vote events to enacted laws and compare voting records."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.argument("output_dir", type=click.Path(file_okay=False))
@click.option(
    "--threshold",
    type=float,
    default=SIMILARITY_THRESHOLD,
    show_default=True,
    help="Minimum match score",
)
@click.option(
    "--date-bonus",
    type=float,
    default=DATE_BONUS,
    show_default=True,
    help="Score bonus for close dates",
)
@click.option(
    "--slack-days",
    type=int,
    default=DATE_SLACK_DAYS,
    show_default=True,
    help="Day tolerance for the date bonus",
)
@click.option("--start", type=DATE_TYPE, default=None, help="Only export laws ending on/after")
@click.option("--end", type=DATE_TYPE, default=None, help="Only export laws ending on/before")
@click.option("--search", "-s", default=None, help="Only export laws whose title contains this")
@click.option(
    "--duckdb",
    "duckdb_path",
    envvar="LEGISLINK_DUCKDB",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also load the tables into this DuckDB file",
)
@_report_errors
def link(
    snapshot: str,
    output_dir: str,
    threshold: float,
    date_bonus: float,
    slack_days: int,
    start: datetime | None,
    end: datetime | None,
    search: str | None,
    duckdb_path: str | None,
):
    """Link vote events to enacted laws and resolve canonical parties.

    SNAPSHOT is a JSON file with ``billEnforceEvents`` and ``voteEvents``.
    Writes linked_events.parquet and canonical_parties.parquet to OUTPUT_DIR.

    Examples:

        # Link with default settings
        legislink link combined.json out/

        # Only export laws enacted in 2023, also load into DuckDB
        legislink link combined.json out/ --start 2023-01-01 --end 2023-12-31 --duckdb laws.duckdb
    """
    data = load_snapshot(snapshot)
    laws = parse_law_records(data.get("billEnforceEvents"))
    events = parse_vote_events(data.get("voteEvents"))
    click.echo(f"Read {len(laws):,} laws and {len(events):,} vote events from {snapshot}")

    result = link_records(
        laws,
        events,
        threshold=threshold,
        date_bonus=date_bonus,
        slack_days=slack_days,
    )
    canonical = canonicalize_parties(result.matched)

    filters = [TitleSearchFilter(search)] if search else []
    if start or end or filters:
        selected = laws_in_range(result.laws, _as_date(start), _as_date(end), filters)
        titles = {law.title for law in selected}
        result = replace(
            result,
            laws=selected,
            linked={t: evs for t, evs in result.linked.items() if t in titles},
        )
        click.echo(f"Selected {len(selected):,} laws for export")

    tables = {
        "linked_events": linked_events_table(result),
        "canonical_parties": canonical_parties_table(canonical),
    }
    for path in write_tables(tables, output_dir):
        click.echo(f"Wrote {path}")

    if duckdb_path:
        loaded = load_to_duckdb(duckdb_path, tables)
        click.echo(f"Loaded {loaded.rows_loaded:,} rows into {loaded.database_path}")

    click.echo()
    click.echo(f"Matched {len(result.matched):,} of {result.event_count:,} vote events")
    click.echo(f"Canonical parties for {len(canonical):,} voters")


@main.command()
@click.argument("compare_snapshot", type=click.Path(exists=True, dir_okay=False))
@click.argument("profiles_snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--focal", "-f", default="", help="Focal person (default: first A-side name)")
@click.option("--limit", "-l", type=int, default=TOP_ALLIES_LIMIT, show_default=True)
@click.option("--today", type=DATE_TYPE, default=None, help="End date for open memberships")
@click.option(
    "--output",
    "-o",
    "output_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Write pairwise.parquet and party_timeline.parquet here",
)
@_report_errors
def compare(
    compare_snapshot: str,
    profiles_snapshot: str,
    focal: str,
    limit: int,
    today: datetime | None,
    output_dir: str | None,
):
    """Compare one person's votes with everyone else's.

    COMPARE_SNAPSHOT holds ``events`` with A (focal) and B (others) votes;
    PROFILES_SNAPSHOT holds ``people``.

    Example:

        legislink compare compare_person.json profiles.json --focal "ชื่อ นามสกุล"
    """
    events = parse_compare_events(load_snapshot(compare_snapshot).get("events"))
    profiles = ProfileIndex(parse_profiles(load_snapshot(profiles_snapshot).get("people")))

    comparison = compare_focal(events, profiles, focal, limit=limit)
    click.echo(f"Focal: {comparison.focal_name or '-'}")
    click.echo(f"Vote events: {comparison.total_events:,}")
    if not comparison.has_data:
        click.echo("No voting comparison data available")
        return

    click.echo(f"Top {len(comparison.allies)} allies:")
    for row in comparison.allies:
        party = row.b_latest_party or "-"
        click.echo(f"  {row.percent:>7}  {row.b_name} ({party})")

    peers = party_peers(comparison.rows, profiles, comparison.focal_name, _as_date(today))
    if peers.peers:
        b = peers.band
        click.echo()
        click.echo(f"Same-party peers in {peers.party}: {len(peers.peers)}")
        click.echo(f"  mean {b.mean:.1f}%  sd {b.sd:.1f}  band [{b.lower:.1f}, {b.upper:.1f}]")

    if output_dir:
        tables = {
            "pairwise": pairwise_table(comparison.rows),
            "party_timeline": timeline_table(profiles),
        }
        for path in write_tables(tables, output_dir):
            click.echo(f"Wrote {path}")


@main.command()
@click.argument("profiles_snapshot", type=click.Path(exists=True, dir_okay=False))
@click.argument("name")
@click.option("--party", "-p", default=None, help="Party for tenure (default: current party)")
@click.option("--today", type=DATE_TYPE, default=None, help="End date for open memberships")
@_report_errors
def timeline(profiles_snapshot: str, name: str, party: str | None, today: datetime | None):
    """Show a person's party timeline and tenure.

    Example:

        legislink timeline profiles.json "ชื่อ นามสกุล" --party "พรรคตัวอย่าง"
    """
    profiles = ProfileIndex(parse_profiles(load_snapshot(profiles_snapshot).get("people")))
    summary = profiles.get(name)
    if summary is None:
        click.echo(f"Error: no profile named {name!r}", err=True)
        raise SystemExit(1)

    click.echo(f"{summary.name}")
    click.echo(f"Current party: {summary.latest_party or '-'}")
    for interval in summary.timeline:
        start = interval.start.isoformat() if interval.start else "?"
        end = interval.end.isoformat() if interval.end else "now"
        click.echo(f"  {start} .. {end}  {interval.party_label}")

    target = party or summary.latest_party
    if target:
        years = tenure_years(summary.profile, target, _as_date(today))
        click.echo(f"Tenure in {target}: {years:.1f} years")


@main.command()
@click.argument("database", type=click.Path(exists=True, dir_okay=False))
@click.option("--table", "-t", default=None, help="Show the columns of one output table")
@_report_errors
def info(database: str, table: str | None):
    """Summarize the output tables loaded into a database.

    Example:
        legislink info laws.duckdb -t canonical_parties
    """
    summaries = summarize_database(database)
    if table:
        summaries = [s for s in summaries if s.name == table]
        if not summaries:
            click.echo(f"ERROR: No output table named {table} in {database}", err=True)
            raise SystemExit(1)

    click.echo(f"Database: {database}")
    if not summaries:
        click.echo("No output tables loaded")
        return
    for summary in summaries:
        click.echo(f"{summary.name}: {summary.row_count:,} rows")
        if summary.missing_columns:
            click.echo(f"  missing columns: {', '.join(summary.missing_columns)}")
        if table:
            for name, dtype in summary.columns:
                click.echo(f"  {name}: {dtype}")


@main.command()
@click.argument("database", type=click.Path(exists=True, dir_okay=False))
@click.argument("sql")
@click.option("--header/--no-header", default=True, show_default=True, help="Print column names")
@_report_errors
def query(database: str, sql: str, header: bool):
    """Run a read-only SQL query on an exported database.

    Example:
        legislink query laws.duckdb "SELECT party, COUNT(*) FROM canonical_parties GROUP BY party"
    """
    columns, rows = query_database(database, sql)
    if header and columns:
        click.echo("\t".join(columns))
    for row in rows:
        click.echo("\t".join("" if v is None else str(v) for v in row))


if __name__ == "__main__":
    main()
