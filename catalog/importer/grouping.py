"""
Variant Grouping

Groups parsed rows into products: rows whose designations reduce to the same
base name (same brand, same category) become variants of one product.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Tuple

from ..common.config_loader import load_category_defaults, load_family_categories
from ..extraction.base_name import BaseNameReducer
from ..extraction.brand_matcher import BrandMatcher
from ..extraction.group_key import generate_group_key
from ..models import ParsedVariant, ProductGroup

logger = logging.getLogger(__name__)


class ProductGrouper:
    """
    Builds ProductGroups from ParsedVariant rows.

    Usage:
        grouper = ProductGrouper()
        groups = grouper.group(rows)
        # {('HUAWEI_ONDULEUR_SUN2000_M1_TRI', 'Solaire'): ProductGroup(...), ...}
    """

    def __init__(
        self,
        brand_matcher: Optional[BrandMatcher] = None,
        reducer: Optional[BaseNameReducer] = None,
        family_categories: Optional[Dict[str, str]] = None,
        default_category: Optional[str] = None,
    ):
        """
        Initialize the grouper.

        Args:
            brand_matcher: Brand detection (loads config if None)
            reducer: Base-name reducer (loads config if None)
            family_categories: Family label -> category name (loads config if None)
            default_category: Category for unmapped families (loads config if None)
        """
        self.brand_matcher = brand_matcher or BrandMatcher()
        self.reducer = reducer or BaseNameReducer()
        if family_categories is None:
            family_categories = load_family_categories()
        self.family_categories = family_categories
        if default_category is None:
            default_category = load_category_defaults()['category']
        self.default_category = default_category

    def category_for(self, family: str) -> str:
        """Return the category name of a supplier family."""
        return self.family_categories.get(family, self.default_category)

    def group(self, rows: Iterable[ParsedVariant]) -> Dict[Tuple[str, str], ProductGroup]:
        """
        Group rows by (group key, category), keeping first-seen order.

        The first row of a group sets its base name, family and brand.
        """
        groups: Dict[Tuple[str, str], ProductGroup] = {}
        categories_by_key: Dict[str, str] = {}
        total = 0

        for row in rows:
            total += 1
            base_name = self.reducer.reduce(row.designation)
            brand_name = self.brand_matcher.match(row.designation, row.family)
            category_name = self.category_for(row.family)
            group_key = generate_group_key(base_name, brand_name)

            identity = (group_key, category_name)
            group = groups.get(identity)
            if group is None:
                group = ProductGroup(
                    base_name=base_name,
                    group_key=group_key,
                    family=row.family,
                    brand_name=brand_name,
                    category_name=category_name,
                )
                groups[identity] = group

                seen_category = categories_by_key.setdefault(group_key, category_name)
                if seen_category != category_name:
                    logger.warning(
                        "Group key %s appears in categories %s and %s, importing as separate products",
                        group_key, seen_category, category_name,
                    )

            group.variants.append(row)

        logger.info("Grouped %d rows into %d products", total, len(groups))
        return groups
