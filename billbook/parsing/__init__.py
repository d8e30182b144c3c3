"""Amount and date parsers shared by every codec."""

from billbook.parsing.amounts import NO_AMOUNT, parse_amount, parse_legacy_amount
from billbook.parsing.dates import parse_date

__all__ = [
    "NO_AMOUNT",
    "parse_amount",
    "parse_date",
    "parse_legacy_amount",
]
