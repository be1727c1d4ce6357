"""
Attribute Extractor

Derives technical attributes (power, capacity, phase, amperage) from the
free-text designation of a supplier row.

Each extractor walks an ordered list of (pattern, converter) rules and stops
at the first match, so the list order is the priority.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, NamedTuple, Optional

from ..common.constants import (
    ATTR_AMPERAGE,
    ATTR_CAPACITY,
    ATTR_PHASE,
    ATTR_POWER,
    PHASE_SINGLE,
    PHASE_THREE,
)
from ..common.text_utils import format_number
from ..models import VariantAttribute

UNIT_KW = "kW"
UNIT_LITER = "L"
UNIT_KWH = "kWh"
UNIT_AMPERE = "A"

_NUMBER = r'(\d+(?:[.,]\d+)?)'


def _to_decimal(raw: str) -> Decimal:
    return Decimal(raw.replace(',', '.'))


def _watts_to_kw(raw: str) -> Decimal:
    return _to_decimal(raw) / 1000


@dataclass(frozen=True)
class PatternRule:
    """Named regex paired with the converter applied to its first group."""
    name: str
    pattern: re.Pattern
    convert: Callable[[str], Decimal] = _to_decimal
    unit: Optional[str] = None

    def apply(self, text: str) -> Optional[Decimal]:
        match = self.pattern.search(text)
        if match is None:
            return None
        return self.convert(match.group(1))


class Capacity(NamedTuple):
    value: Decimal
    unit: str


POWER_RULES: List[PatternRule] = [
    PatternRule('kw', re.compile(_NUMBER + r'\s*KWC?\b', re.IGNORECASE)),
    PatternRule('ktl', re.compile(_NUMBER + r'\s*KTL', re.IGNORECASE)),
    PatternRule('k_suffix', re.compile(r'-' + _NUMBER + r'K(?:TL)?(?:-|$)', re.IGNORECASE)),
    PatternRule('sun2000', re.compile(r'SUN2000-(\d+)K', re.IGNORECASE)),
    PatternRule('watts', re.compile(r'\b' + _NUMBER + r'\s*W\b', re.IGNORECASE), convert=_watts_to_kw),
]

# Litres first: "200L" on a water heater must not be read as battery energy
CAPACITY_RULES: List[PatternRule] = [
    PatternRule('liters', re.compile(r'(\d+)\s*L(?:\s|$)', re.IGNORECASE), unit=UNIT_LITER),
    PatternRule('kwh', re.compile(_NUMBER + r'\s*KWH', re.IGNORECASE), unit=UNIT_KWH),
]

_SINGLE_PHASE = re.compile(r'\bMONO(?:PHAS[EÉ])?\b', re.IGNORECASE)
_THREE_PHASE = re.compile(r'\bTRI(?:PHAS[EÉ])?\b', re.IGNORECASE)
_AMPERAGE = re.compile(r'\((\d+)\s*A\)', re.IGNORECASE)


def first_match(rules: List[PatternRule], text: str) -> Optional[tuple]:
    """
    Return (rule, value) for the first rule matching text, or None.
    """
    for rule in rules:
        value = rule.apply(text)
        if value is not None:
            return rule, value
    return None


def extract_power(designation: str) -> Optional[Decimal]:
    """
    Extract the nominal power in kW.

    Example:
        >>> extract_power("SUN2000-10KTL")
        Decimal('10')
    """
    found = first_match(POWER_RULES, designation)
    return found[1] if found else None


def extract_capacity(designation: str) -> Optional[Capacity]:
    """
    Extract a storage capacity (litres for tanks, kWh for batteries).

    Example:
        >>> extract_capacity("Ballon 200L")
        Capacity(value=Decimal('200'), unit='L')
    """
    found = first_match(CAPACITY_RULES, designation)
    if found is None:
        return None
    rule, value = found
    return Capacity(value, rule.unit)


def extract_phase(designation: str) -> Optional[str]:
    """Return 'Monophasé' or 'Triphasé' when the designation names a phase."""
    if _SINGLE_PHASE.search(designation):
        return PHASE_SINGLE
    if _THREE_PHASE.search(designation):
        return PHASE_THREE
    return None


def extract_amperage(designation: str) -> Optional[int]:
    """Return the amperage written as '(NNA)', e.g. 'Boitier AC (32A)' -> 32."""
    match = _AMPERAGE.search(designation)
    return int(match.group(1)) if match else None


def extract_attributes(designation: str) -> List[VariantAttribute]:
    """
    Build the full attribute list for a variant designation.

    Power, capacity, phase and amperage are independent: a designation can
    yield any combination of them.
    """
    attributes = []

    power = extract_power(designation)
    if power is not None:
        attributes.append(VariantAttribute(ATTR_POWER, format_number(power), UNIT_KW))

    capacity = extract_capacity(designation)
    if capacity is not None:
        attributes.append(VariantAttribute(ATTR_CAPACITY, format_number(capacity.value), capacity.unit))

    phase = extract_phase(designation)
    if phase is not None:
        attributes.append(VariantAttribute(ATTR_PHASE, phase))

    amperage = extract_amperage(designation)
    if amperage is not None:
        attributes.append(VariantAttribute(ATTR_AMPERAGE, str(amperage), UNIT_AMPERE))

    return attributes
