"""
Brand Matcher

Detects the manufacturer of a supplier row from its designation and family
label using an ordered list of brand regexes.

The pattern list is loaded from config/brands.yaml. Order is priority: the
first pattern matching "<designation> <family>" wins.
"""

import re
from typing import Dict, List, Optional, Tuple

from ..common.config_loader import load_brand_patterns


class BrandMatcher:
    """
    Matches supplier rows to known brand names.

    Usage:
        matcher = BrandMatcher()
        brand = matcher.match(
            designation="Onduleur SUN2000-10KTL-M1",
            family="ONDULEURS HUAWEI",
        )
        # Returns: "Huawei"
    """

    def __init__(self, patterns: Optional[List[Dict[str, str]]] = None):
        """
        Initialize the brand matcher.

        Args:
            patterns: Optional ordered list of {'name', 'pattern'} entries.
                If None, loads from config.
        """
        if patterns is None:
            patterns = load_brand_patterns()

        self.rules: List[Tuple[str, re.Pattern]] = [
            (entry['name'], re.compile(entry['pattern'], re.IGNORECASE))
            for entry in patterns
        ]

    def match(self, designation: str, family: str = "") -> Optional[str]:
        """
        Detect the brand of a row.

        Args:
            designation: Free-text designation
            family: Supplier family label

        Returns:
            Canonical brand name, or None if no pattern matches
        """
        text = f"{designation} {family}"
        for name, pattern in self.rules:
            if pattern.search(text):
                return name
        return None
