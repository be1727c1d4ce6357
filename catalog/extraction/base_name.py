"""
Base-Name Reducer

Strips variable tokens (capacities, powers, amperages, reference codes,
cable dimensions) from a designation so that every variant of a product
family reduces to the same canonical name.

The rule set is versioned configuration (config/base_name_rules.yaml).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..common.config_loader import load_base_name_rules
from ..common.text_utils import collapse_whitespace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReductionRule:
    name: str
    pattern: re.Pattern


class BaseNameReducer:
    """
    Reduces designations to canonical product base names.

    Usage:
        reducer = BaseNameReducer()
        reducer.reduce("Ballon thermodynamique NUOS 200L")
        # Returns: "BALLON THERMODYNAMIQUE NUOS"
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the reducer.

        Args:
            config: Rule set with 'version', 'min_length', 'rules' and
                'fallback' keys. If None, loads from config.
        """
        if config is None:
            config = load_base_name_rules()

        self.version = config['version']
        self.min_length = int(config.get('min_length', 5))
        self.rules: List[ReductionRule] = [
            ReductionRule(rule['name'], re.compile(rule['pattern'], re.IGNORECASE))
            for rule in config['rules']
        ]

        fallback = (config.get('fallback') or {}).get('pattern')
        self.fallback: Optional[re.Pattern] = re.compile(fallback, re.IGNORECASE) if fallback else None

        logger.debug("Loaded %d base-name rules (version %s)", len(self.rules), self.version)

    def reduce(self, designation: str) -> str:
        """
        Reduce a designation to its base name.

        Args:
            designation: Raw designation from the export

        Returns:
            Upper-cased base name. If stripping leaves fewer than
            `min_length` characters, the designation itself is kept with
            only its trailing reference suffix removed.
        """
        original = designation.upper()

        name = original
        for rule in self.rules:
            name = rule.pattern.sub('', name)
        name = self._clean(name)

        if len(name) < self.min_length:
            name = original
            if self.fallback is not None:
                name = self.fallback.sub('', name)
            name = self._clean(name)

        return name

    @staticmethod
    def _clean(name: str) -> str:
        name = re.sub(r'-+', '-', name)
        name = collapse_whitespace(name)
        return name.strip(' -')
