"""Localization package."""

from billbook.i18n.catalogs import CATALOGS, DATE_FORMATS, FALLBACK_LOCALE
from billbook.i18n.localizer import Localizer, get_localizer

__all__ = [
    "CATALOGS",
    "DATE_FORMATS",
    "FALLBACK_LOCALE",
    "Localizer",
    "get_localizer",
]
