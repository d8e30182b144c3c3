"""
Import/Export Result Models

These carry the outcome of moving data in and out of the ledger:
what a parser salvaged, which rows it had to drop, what an import
changed, and what an export produced.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from billbook.models.ledger import Month


class ImportFormat(str, Enum):
    """Formats accepted by the importer."""
    JSON = "json"
    CSV = "csv"


class ExportFormat(str, Enum):
    """Formats produced by the exporter."""
    JSON = "json"
    CSV = "csv"
    REPORT = "report"


class CsvDialect(str, Enum):
    """CSV layouts the importer can read."""
    STANDARD = "standard"  # date,name,amount table with a header row
    LEGACY = "legacy"      # free text, one marker line per month


class SkipReason(str, Enum):
    """Why a row was dropped during a CSV import."""
    TOO_FEW_FIELDS = "too_few_fields"
    INVALID_DATE = "invalid_date"
    EMPTY_NAME = "empty_name"
    MALFORMED_MARKER = "malformed_marker"


class RowIssue(BaseModel):
    """A single recoverable problem found while parsing."""
    model_config = ConfigDict(frozen=True)

    line_number: int = Field(..., ge=1, description="1-based line in the source")
    line: str = Field(..., description="The offending line, trimmed")
    reason: SkipReason


class ImportResult(BaseModel):
    """
    What a parser salvaged from one file.

    CSV imports are best effort: `months` holds everything that parsed,
    `skipped` explains what did not.
    """
    model_config = ConfigDict(frozen=True)

    months: tuple[Month, ...] = Field(default_factory=tuple)
    skipped: tuple[RowIssue, ...] = Field(default_factory=tuple)
    dialect: Optional[CsvDialect] = None

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def bill_count(self) -> int:
        return sum(len(month.bills) for month in self.months)


class ImportSummary(BaseModel):
    """Outcome of an import after reconciliation and persistence."""

    format: ImportFormat
    months_created: int = Field(default=0, ge=0)
    months_merged: int = Field(default=0, ge=0)
    bills_added: int = Field(default=0, ge=0)
    rows_skipped: int = Field(default=0, ge=0)
    issues: list[RowIssue] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when nothing at all was imported."""
        return self.months_created == 0 and self.months_merged == 0


class ExportArtifact(BaseModel):
    """A text payload ready to be saved as a file."""

    content: str
    filename: str = Field(..., min_length=1)
    mime_type: str = Field(..., min_length=1)
