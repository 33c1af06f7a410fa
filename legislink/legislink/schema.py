"""Constants and Arrow table schemas for legislink outputs."""

from typing import Final

import pyarrow as pa

# =============================================================================
# LINKING CONFIGURATION
# =============================================================================

# Minimum composite score (similarity + date bonus) for a vote event to be
# assigned to an enacted law
SIMILARITY_THRESHOLD: Final[float] = 0.75

# Added to the title similarity when the law and vote event dates are close
DATE_BONUS: Final[float] = 0.03

# Maximum calendar-day distance for two dates to count as "close"
DATE_SLACK_DAYS: Final[int] = 7

# Jaro-Winkler prefix boost
WINKLER_PREFIX_SCALE: Final[float] = 0.1
WINKLER_MAX_PREFIX: Final[int] = 4

# =============================================================================
# VOTER / PARTY CONFIGURATION
# =============================================================================

MIN_NAME_LENGTH: Final[int] = 3

# Organization classification marking a political party in profile records
PARTY_CLASSIFICATION: Final[str] = "POLITICAL_PARTY"

# Label used when a vote row carries no party ("others")
UNKNOWN_PARTY: Final[str] = "อื่นๆ"

# =============================================================================
# COMPARISON CONFIGURATION
# =============================================================================

TOP_ALLIES_LIMIT: Final[int] = 10

# Rendered in place of a percentage when no events were considered
NO_DATA: Final[str] = "—"

# =============================================================================
# OUTPUT SCHEMAS
# =============================================================================

LINKED_EVENTS_SCHEMA = pa.schema(
    [
        pa.field("law_title", pa.string(), nullable=False),
        pa.field("law_start_date", pa.date32()),
        pa.field("law_end_date", pa.date32()),
        pa.field("event_id", pa.string(), nullable=False),
        pa.field("event_title", pa.string()),
        pa.field("event_start_date", pa.date32()),
        pa.field("event_end_date", pa.date32()),
        pa.field("vote_count", pa.int64()),
    ]
)

CANONICAL_PARTY_SCHEMA = pa.schema(
    [
        pa.field("voter_name", pa.string(), nullable=False),
        pa.field("party", pa.string(), nullable=False),
    ]
)

PAIRWISE_SCHEMA = pa.schema(
    [
        pa.field("a_name", pa.string(), nullable=False),
        pa.field("b_name", pa.string(), nullable=False),
        pa.field("sum_flag", pa.int64(), nullable=False),
        pa.field("percent", pa.string()),
        pa.field("a_latest_party", pa.string()),
        pa.field("b_latest_party", pa.string()),
    ]
)

TIMELINE_SCHEMA = pa.schema(
    [
        pa.field("person", pa.string(), nullable=False),
        pa.field("party_th", pa.string()),
        pa.field("party_en", pa.string()),
        pa.field("start_date", pa.date32()),
        pa.field("end_date", pa.date32()),
        pa.field("is_current", pa.bool_(), nullable=False),
    ]
)

# Table name -> schema, in load order
OUTPUT_TABLES: Final[dict[str, pa.Schema]] = {
    "linked_events": LINKED_EVENTS_SCHEMA,
    "canonical_parties": CANONICAL_PARTY_SCHEMA,
    "pairwise": PAIRWISE_SCHEMA,
    "party_timeline": TIMELINE_SCHEMA,
}
