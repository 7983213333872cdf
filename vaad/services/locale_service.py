"""Centralized locale service for currency, month names and number formatting.

Single source of truth for all locale-related operations.
Uses babel library.

Configuration:
    LOCALE env var (default: he_IL) - determines currency, month names and number formatting

Example:
    >>> from vaad.services.locale_service import month_label
    >>> month_label(3, 2024)
    'מרץ 2024'
"""

import logging
import os
from decimal import Decimal

from babel import Locale, UnknownLocaleError
from babel.dates import get_month_names
from babel.numbers import format_currency as babel_format_currency
from babel.numbers import format_decimal as babel_format_decimal
from babel.numbers import get_currency_symbol as babel_get_currency_symbol
from babel.numbers import get_territory_currencies

logger = logging.getLogger(__name__)

# Default locale if LOCALE env var is invalid or missing
DEFAULT_LOCALE = "he_IL"
DEFAULT_CURRENCY = "ILS"


def _get_locale() -> str:
    """Get locale from environment with validation and fallback.

    Returns:
        Valid locale string (e.g., 'he_IL')
    """
    locale_str = os.getenv("LOCALE", DEFAULT_LOCALE)
    try:
        Locale.parse(locale_str)
        return locale_str
    except (UnknownLocaleError, ValueError) as e:
        logger.warning("Invalid LOCALE '%s': %s. Falling back to '%s'", locale_str, e, DEFAULT_LOCALE)
        return DEFAULT_LOCALE


def _get_currency_from_locale(locale_str: str) -> str:
    """Derive currency code from locale territory.

    Args:
        locale_str: Locale string (e.g., 'he_IL')

    Returns:
        Currency code (e.g., 'ILS')
    """
    try:
        locale = Locale.parse(locale_str)
        territory = locale.territory
        if territory:
            currencies = get_territory_currencies(territory)
            if currencies:
                return currencies[0]
    except (UnknownLocaleError, ValueError) as e:
        logger.warning("Could not derive currency from locale '%s': %s", locale_str, e)

    return DEFAULT_CURRENCY


def _build_month_names(locale_str: str) -> tuple[str, ...]:
    """Build the fixed 12-entry month-name table, January first."""
    names = get_month_names("wide", locale=locale_str)
    return tuple(names[month] for month in range(1, 13))


# Module-level constants (computed once at import)
LOCALE = _get_locale()
CURRENCY = _get_currency_from_locale(LOCALE)
MONTH_NAMES = _build_month_names(LOCALE)


def is_valid_month(month: object) -> bool:
    """Check that a value can index the month-name table (int in 1..12)."""
    return isinstance(month, int) and not isinstance(month, bool) and 1 <= month <= 12


def month_name(month: int) -> str:
    """Localized name of a 1-indexed month.

    Raises:
        ValueError: If month is outside 1..12
    """
    if not is_valid_month(month):
        raise ValueError(f"Month out of range: {month!r}")
    return MONTH_NAMES[month - 1]


def month_label(month: int, year: int) -> str:
    """Label for an obligation period, e.g. 'מרץ 2024'."""
    return f"{month_name(month)} {year}"


def get_currency_code() -> str:
    """Get currency code derived from locale.

    Returns:
        ISO 4217 currency code (e.g., 'ILS')
    """
    return CURRENCY


def get_currency_symbol() -> str:
    """Get currency symbol for current locale (e.g., '₪')."""
    return babel_get_currency_symbol(CURRENCY, locale=LOCALE)


def format_amount(amount: float | Decimal, include_symbol: bool = True) -> str:
    """Format monetary amount according to locale.

    Args:
        amount: Numeric amount to format
        include_symbol: Whether to include currency symbol (default True)

    Returns:
        Formatted currency string
    """
    if include_symbol:
        return babel_format_currency(amount, CURRENCY, locale=LOCALE)
    return babel_format_decimal(amount, locale=LOCALE)


def get_locale_info() -> dict:
    """Get current locale configuration for debugging/display."""
    return {
        "locale": LOCALE,
        "currency_code": CURRENCY,
        "currency_symbol": get_currency_symbol(),
        "month_names": list(MONTH_NAMES),
    }


__all__ = [
    "LOCALE",
    "CURRENCY",
    "MONTH_NAMES",
    "is_valid_month",
    "month_name",
    "month_label",
    "get_currency_code",
    "get_currency_symbol",
    "format_amount",
    "get_locale_info",
]
