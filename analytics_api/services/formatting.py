"""
Locale helpers for month labels, counters and timestamps.

Only the languages the dashboard is published in are supported; unknown
locales fall back to Spanish.
"""

from __future__ import annotations

from datetime import date, datetime

DEFAULT_LANGUAGE = "es"

MONTHS_LONG = {
    "es": (
        "enero", "febrero", "marzo", "abril", "mayo", "junio",
        "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
    ),
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}

MONTHS_SHORT = {
    "es": ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"),
    "en": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
}

# (thousands separator, datetime format, day label format)
_FORMATS = {
    "es": (".", "%d/%m/%Y, %H:%M:%S", "{day} {month}"),
    "en": (",", "%m/%d/%Y, %H:%M:%S", "{month} {day}"),
}


def language_of(locale: str) -> str:
    """``es-CO`` → ``es``; unsupported languages → default."""
    lang = (locale or "").replace("_", "-").split("-")[0].lower()
    return lang if lang in MONTHS_SHORT else DEFAULT_LANGUAGE


def month_abbr(month_index: int, locale: str = DEFAULT_LANGUAGE) -> str:
    """Abbreviated month name for a 0-indexed month."""
    return MONTHS_SHORT[language_of(locale)][month_index % 12]


def month_name(month_index: int, locale: str = DEFAULT_LANGUAGE) -> str:
    """Full month name for a 0-indexed month."""
    return MONTHS_LONG[language_of(locale)][month_index % 12]


def format_period(year: int, month: int, locale: str = DEFAULT_LANGUAGE) -> str:
    """``(2025, 1)`` → ``"ene 2025"``. ``month`` is GA4's 1–12."""
    return f"{month_abbr(month - 1, locale)} {year:04d}"


def format_number(value: int, locale: str = DEFAULT_LANGUAGE) -> str:
    sep = _FORMATS[language_of(locale)][0]
    return f"{int(value):,}".replace(",", sep)


def format_timestamp(moment: datetime, locale: str = DEFAULT_LANGUAGE) -> str:
    return moment.strftime(_FORMATS[language_of(locale)][1])


def format_day_label(day: date, locale: str = DEFAULT_LANGUAGE) -> str:
    """Short axis label, e.g. ``"5 oct"``."""
    lang = language_of(locale)
    return _FORMATS[lang][2].format(day=day.day, month=MONTHS_SHORT[lang][day.month - 1])
