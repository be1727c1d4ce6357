"""
Supplier Row Parser

Turns the raw supplier export ("BI liste article + stock réel") into
ParsedVariant rows.

Column layout (header line is discarded):
    0 family label | 1 SKU | 2 designation | 3 supplier reference |
    4 supplier reference (duplicate, ignored) | 5 supplier code |
    6 stock | 7 sale price

The tokenizer only understands a toggled quote state: a '"' flips it and the
delimiter splits fields outside quotes. Doubled quotes are not unescaped.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional

from ..common.constants import INVALID_FAMILY_MARKERS, SUPPLIER_EXPORT_COLUMNS
from ..common.text_utils import parse_french_number
from ..models import ParsedVariant

logger = logging.getLogger(__name__)


def split_line(line: str, delimiter: str = ',') -> List[str]:
    """
    Split one export line into stripped fields, honouring quotes.

    Example:
        >>> split_line('BALLONS,B200,"Ballon, 200L","1 234,50"')
        ['BALLONS', 'B200', 'Ballon, 200L', '1 234,50']
    """
    values = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            values.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
    values.append(''.join(current).strip())

    return values


class SupplierRowParser:
    """
    Parses supplier exports into ParsedVariant rows.

    Usage:
        parser = SupplierRowParser()
        for row in parser.iter_rows(text):
            ...
        print(parser.rows_rejected)
    """

    def __init__(self, delimiter: str = ',', invalid_families: Optional[Iterable[str]] = None):
        """
        Initialize the parser.

        Args:
            delimiter: Field delimiter (',' or ';' for French Excel exports)
            invalid_families: Family values that mark a row as garbage
        """
        if len(delimiter) != 1 or delimiter == '"':
            raise ValueError(f"Invalid delimiter: {delimiter!r}")
        self.delimiter = delimiter
        if invalid_families is None:
            invalid_families = INVALID_FAMILY_MARKERS
        self.invalid_families = frozenset(invalid_families)

        self.rows_accepted = 0
        self.rows_rejected = 0

    def iter_rows(self, text: str) -> Iterator[ParsedVariant]:
        """
        Yield accepted rows from the export text.

        Counters are reset at the start of each pass, so parsing the same
        text again restarts from the first data line.
        """
        self.rows_accepted = 0
        self.rows_rejected = 0

        lines = [line.rstrip('\r') for line in text.split('\n')]
        for line_number, raw_line in enumerate(lines[1:], start=2):
            line = raw_line.strip()
            if not line:
                continue

            row = self.parse_line(line)
            if row is None:
                self.rows_rejected += 1
                logger.debug("Rejected line %d: %s", line_number, line[:80])
                continue

            self.rows_accepted += 1
            yield row

    def parse(self, text: str) -> List[ParsedVariant]:
        """Parse the whole export into a list of rows."""
        rows = list(self.iter_rows(text))
        logger.info("Parsed %d rows (%d rejected)", self.rows_accepted, self.rows_rejected)
        return rows

    def parse_line(self, line: str) -> Optional[ParsedVariant]:
        """
        Parse one data line.

        Returns:
            ParsedVariant, or None if the row is incomplete or invalid
        """
        values = split_line(line, self.delimiter)
        if len(values) < SUPPLIER_EXPORT_COLUMNS:
            return None

        family, sku, designation, supplier_ref, _, supplier_code, stock, price = values[:SUPPLIER_EXPORT_COLUMNS]

        if not family or not sku or not designation:
            return None
        if family in self.invalid_families:
            return None

        return ParsedVariant(
            family=family,
            sku=sku,
            designation=designation,
            supplier_reference=supplier_ref,
            supplier_code=supplier_code,
            stock=parse_french_number(stock),
            price=parse_french_number(price),
        )
