"""
Localizer

Resolves message keys, month names and display formats for one locale.
Lookups never fail: a key missing from the active catalog falls back to
the Polish catalog, then to the last segment of the key itself.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from billbook.i18n.catalogs import CATALOGS, DATE_FORMATS, FALLBACK_LOCALE

MONTH_KEYS = (
    "months.january",
    "months.february",
    "months.march",
    "months.april",
    "months.may",
    "months.june",
    "months.july",
    "months.august",
    "months.september",
    "months.october",
    "months.november",
    "months.december",
)


class Localizer:
    """Translate keys and format values for a single display locale."""

    def __init__(self, locale: str = FALLBACK_LOCALE):
        self.locale = locale if locale in CATALOGS else FALLBACK_LOCALE
        self._messages = CATALOGS[self.locale]
        self._fallback = CATALOGS[FALLBACK_LOCALE]

    def t(self, key: str, **params: object) -> str:
        """Translate a key, substituting {placeholders} from params."""
        text = self._messages.get(key) or self._fallback.get(key)
        if text is None:
            return key.rsplit(".", 1)[-1]
        for name, value in params.items():
            text = text.replace("{" + name + "}", str(value))
        return text

    __call__ = t

    def month_name(self, value: date) -> str:
        return self.t(MONTH_KEYS[value.month - 1])

    def format_date(self, value: date) -> str:
        """Date in the locale's display layout, e.g. 15.11.2024."""
        return value.strftime(DATE_FORMATS[self.locale])

    @property
    def currency(self) -> str:
        return self.t("bills.currency")

    def format_money(self, amount: Optional[Decimal]) -> str:
        """Two decimals plus currency, or "-" when the amount is unknown."""
        if amount is None:
            return "-"
        return f"{amount:.2f} {self.currency}"


def get_localizer(locale: Optional[str] = None) -> Localizer:
    """Localizer for the given locale, or the configured one."""
    if locale is None:
        from billbook.config import get_settings
        locale = get_settings().app.locale
    return Localizer(locale)
