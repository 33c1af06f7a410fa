"""Link parliamentary vote events to enacted laws and analyse voting records."""

from .context import PipelineContext
from .covote import (
    Comparison,
    ComparisonRow,
    PairwiseRow,
    aggregate_pairs,
    compare_focal,
    join_profiles,
    orient_to_focal,
    top_allies,
)
from .exceptions import (
    DatabaseReadError,
    LegislinkError,
    OutputWriteError,
    RecordShapeError,
    SnapshotReadError,
)
from .export import LoadResult, TableSummary, load_to_duckdb, summarize_database, write_parquet
from .filters import (
    CompositeFilter,
    Filter,
    LawDateFilter,
    PartyFilter,
    TitleSearchFilter,
    VoterFilter,
    since,
)
from .ingest import (
    load_snapshot,
    parse_compare_events,
    parse_law_records,
    parse_profiles,
    parse_vote_events,
)
from .linker import LinkResult, filter_event_votes, laws_in_range, link, link_records
from .models import (
    CompareEvent,
    LawRecord,
    PersonProfile,
    SideVote,
    VoteClass,
    VoteEvent,
    VoteRow,
)
from .parties import canonical_party_for, canonicalize_parties, voter_positions
from .peers import PeerBand, band, party_peers
from .text import dates_close, jaro_winkler, normalize_title, similarity, title_similarity
from .timeline import (
    MembershipInterval,
    ProfileIndex,
    current_party,
    party_timeline,
    tenure_years,
)
from .votes import classify_vote, is_valid_name, normalize_party_name, party_breakdown

__all__ = [
    # Records
    "LawRecord",
    "VoteRow",
    "VoteEvent",
    "VoteClass",
    "SideVote",
    "CompareEvent",
    "PersonProfile",
    # Ingestion
    "load_snapshot",
    "parse_law_records",
    "parse_vote_events",
    "parse_compare_events",
    "parse_profiles",
    # Text and votes
    "normalize_title",
    "jaro_winkler",
    "similarity",
    "title_similarity",
    "dates_close",
    "classify_vote",
    "is_valid_name",
    "normalize_party_name",
    "party_breakdown",
    # Linking
    "link",
    "link_records",
    "LinkResult",
    "laws_in_range",
    "filter_event_votes",
    # Parties
    "canonicalize_parties",
    "canonical_party_for",
    "voter_positions",
    # Co-voting
    "aggregate_pairs",
    "join_profiles",
    "orient_to_focal",
    "top_allies",
    "compare_focal",
    "PairwiseRow",
    "ComparisonRow",
    "Comparison",
    # Timelines and peers
    "MembershipInterval",
    "ProfileIndex",
    "party_timeline",
    "current_party",
    "tenure_years",
    "PeerBand",
    "band",
    "party_peers",
    # Context and export
    "PipelineContext",
    "LoadResult",
    "TableSummary",
    "load_to_duckdb",
    "summarize_database",
    "write_parquet",
    # Filters
    "Filter",
    "LawDateFilter",
    "TitleSearchFilter",
    "PartyFilter",
    "VoterFilter",
    "CompositeFilter",
    "since",
    # Errors
    "LegislinkError",
    "SnapshotReadError",
    "OutputWriteError",
    "RecordShapeError",
    "DatabaseReadError",
]
