"""
Core Ledger Models for billbook

These models define the strict schemas for the bill ledger.
They are designed to:
1. Enforce type safety at runtime (imported JSON is validated here)
2. Provide clear validation error messages
3. Be immutable snapshots the import core can pass around freely
4. Carry the wire names used by earlier exports (categoryId, autoAdd)

DESIGN DECISION: A Month is identified by its month key, the first day of
its calendar month. The opaque id exists for references from bills and
for the storage backend, but two months with the same key are never
allowed in one ledger.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_id() -> str:
    """Generate an opaque client-side identifier."""
    return str(uuid4())


def month_key(value: dt.date) -> dt.date:
    """Truncate a date to the first day of its month."""
    return dt.date(value.year, value.month, 1)


def coerce_month_date(value: Any) -> Any:
    """
    Turn timestamps into calendar dates.

    Earlier exports wrote local midnight as a UTC timestamp, so
    "2024-10-31T23:00:00.000Z" means 1 November in Warsaw. UTC times
    after noon are rounded up to the next day, which recovers the local
    date for any offset east of Greenwich. Timestamps with another offset,
    or none, keep the date they were written with.
    """
    if isinstance(value, str):
        text = value.strip()
        if "T" not in text and " " not in text:
            return text
        value = dt.datetime.fromisoformat(text)
    if isinstance(value, dt.datetime):
        day = value.date()
        if value.utcoffset() == dt.timedelta(0) and value.time() > dt.time(12, 0):
            day += dt.timedelta(days=1)
        return day
    return value


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


# =============================================================================
# CORE LEDGER MODELS
# =============================================================================

class Bill(BaseModel):
    """
    One expense line inside a month.

    An amount of None means "unknown / not entered yet", which is
    different from zero.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Opaque bill ID, stable across sync"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display label"
    )
    amount: Optional[Decimal] = Field(
        default=None,
        description="Amount paid; None when unspecified"
    )
    category_id: Optional[str] = Field(
        default=None,
        alias="categoryId",
        description="Default or user category id; None means uncategorized"
    )
    comment: Optional[str] = Field(
        default=None,
        description="Free text annotation"
    )

    @field_validator('category_id', 'comment')
    @classmethod
    def empty_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator('name')
    @classmethod
    def single_line_name(cls, v: str) -> str:
        # Both CSV dialects are line based
        return " ".join(part.strip() for part in v.splitlines() if part.strip())


class Month(BaseModel):
    """
    One billing period.

    `date` keeps the day that was entered (often the payment date);
    identity within the ledger comes from `key`.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Opaque month ID, independent of the month key"
    )
    date: dt.date = Field(
        ...,
        description="Billing date; only year and month identify the record"
    )
    bills: tuple[Bill, ...] = Field(
        default_factory=tuple,
        description="Bills in display order"
    )
    notes: Optional[str] = Field(
        default=None,
        description="Notes for the whole period"
    )

    @field_validator('date', mode='before')
    @classmethod
    def hydrate_date(cls, v: Any) -> Any:
        return coerce_month_date(v)

    @field_validator('bills', mode='before')
    @classmethod
    def missing_bills(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator('notes')
    @classmethod
    def empty_notes(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @property
    def key(self) -> dt.date:
        """Month key: first day of the calendar month."""
        return month_key(self.date)


class BillTemplate(BaseModel):
    """
    Reusable bill blueprint.

    Templates live outside the ledger; a Bill created from a template
    gets its own id and keeps no reference back.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(default_factory=new_id, min_length=1)
    name: str = Field(..., min_length=1)
    amount: Optional[Decimal] = None
    category_id: Optional[str] = Field(default=None, alias="categoryId")
    auto_add: bool = Field(
        default=False,
        alias="autoAdd",
        description="Add automatically to newly created months"
    )

    @field_validator('category_id')
    @classmethod
    def empty_category(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)
