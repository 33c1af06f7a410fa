"""Exception hierarchy for the legislink pipeline."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class LegislinkError(Exception):
    """Base exception for legislink errors."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class SnapshotReadError(LegislinkError):
    """Raised when a JSON snapshot cannot be read or decoded."""

    source_path: Path

    def __str__(self) -> str:
        return f"Failed to read snapshot: {self.source_path}\n{self.message}"


@dataclass
class OutputWriteError(LegislinkError):
    """Raised when an export cannot be written."""

    output_path: Path

    def __str__(self) -> str:
        return f"Failed to write output: {self.output_path}\n{self.message}"


@dataclass
class RecordShapeError(LegislinkError):
    """Raised when a caller passes a batch that is not a sequence of records.

    Individual malformed records are skipped, never raised. This error is
    reserved for contract violations such as passing a dict or a string
    where a list of records is expected.
    """

    record_kind: str
    received_type: str

    def __str__(self) -> str:
        return (
            f"Expected a list of {self.record_kind} records, "
            f"got {self.received_type}\n{self.message}"
        )


@dataclass
class DatabaseReadError(LegislinkError):
    """Raised when an exported DuckDB database cannot be opened or queried."""

    database_path: Path

    def __str__(self) -> str:
        return f"Failed to read database: {self.database_path}\n{self.message}"
