"""
Text Utilities

Helper functions for text processing and cleanup.
"""

import re
import unicodedata
from decimal import Decimal

# Thousands separators (incl. non-breaking spaces) and stray quotes
_THOUSANDS_SEPARATORS = re.compile(r'[\s"]')

# Plain decimal notation only: no exponent, underscores, NaN or Infinity
_PLAIN_NUMBER = re.compile(r'^-?(?:\d+(?:\.\d*)?|\.\d+)$')


def strip_accents(text: str) -> str:
    """
    Remove diacritics using NFD decomposition.

    Example:
        >>> strip_accents("Intégration")
        'Integration'
    """
    decomposed = unicodedata.normalize('NFD', text)
    return ''.join(char for char in decomposed if not unicodedata.combining(char))


def parse_french_number(raw: str) -> Decimal:
    """
    Parse a number written with French conventions.

    Spaces are thousands separators and the comma is the decimal
    separator ("1 234,50" -> 1234.50). Unparsable or empty text gives 0.

    Args:
        raw: Numeric text from the export

    Returns:
        Parsed value as Decimal
    """
    if not raw:
        return Decimal(0)

    cleaned = _THOUSANDS_SEPARATORS.sub('', raw).replace(',', '.')
    if not _PLAIN_NUMBER.match(cleaned):
        return Decimal(0)
    return Decimal(cleaned)


def format_number(value: Decimal) -> str:
    """
    Format a Decimal without exponent or trailing zeros.

    Example:
        >>> format_number(Decimal("5.0"))
        '5'
        >>> format_number(Decimal("100"))
        '100'
    """
    return format(value.normalize(), 'f')


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return re.sub(r'\s+', ' ', text).strip()
