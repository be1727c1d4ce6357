"""
Group Key Generator

Turns a base name and a brand into the stable key identifying a Product
across imports, e.g. HUAWEI_ONDULEUR_SUN2000_M1_TRI.

The key ignores whitespace, accents, casing and punctuation, but keeps the
brand and every word of the base name.
"""

import re
from typing import Optional

from ..common.text_utils import strip_accents

MAX_GROUP_KEY_LENGTH = 60


def brand_token(brand_name: str) -> str:
    """Brand as it appears in group keys ('AP Systems' -> 'AP_SYSTEMS')."""
    return re.sub(r'\s+', '_', brand_name.upper())


def generate_group_key(base_name: str, brand_name: Optional[str] = None) -> str:
    """
    Generate the group key of a product.

    Args:
        base_name: Reduced designation
        brand_name: Detected brand, if any

    Returns:
        Upper-case key made of A-Z, 0-9 and underscores

    Example:
        >>> generate_group_key("Câble solaire", None)
        'CABLE_SOLAIRE'
        >>> generate_group_key("MICRO-ONDULEUR IQ7", "Enphase")
        'ENPHASE_MICRO_ONDULEUR_IQ7'
    """
    key = strip_accents(base_name.upper())
    key = re.sub(r'[^A-Z0-9]', '_', key)
    key = re.sub(r'_+', '_', key)
    key = key.strip('_')
    key = key[:MAX_GROUP_KEY_LENGTH]

    if brand_name:
        token = brand_token(brand_name)
        if not key.startswith(token):
            key = f"{token}_{key}"

    return key
