"""
Slug Utilities

Converts French product and category names to URL-safe slugs.
"""

import re
from typing import Callable

from .text_utils import strip_accents

MAX_SLUG_LENGTH = 80


def generate_slug(name: str, prefix: str = '') -> str:
    """
    Generate URL-friendly slug from a name.

    Lowercases, strips accents and replaces every run of
    non-alphanumeric characters with a single hyphen.

    Args:
        name: Product, brand or category name
        prefix: Optional prefix (e.g., 'marque-' for brand pages)

    Returns:
        URL-friendly slug (at most 80 characters)

    Example:
        >>> generate_slug("Pompes à chaleur")
        'pompes-a-chaleur'
        >>> generate_slug("Keba", prefix="marque-")
        'marque-keba'
    """
    text = f"{prefix}{name}" if prefix else name

    slug = strip_accents(text.lower())
    slug = re.sub(r'[^a-z0-9]+', '-', slug)

    # Remove leading/trailing hyphens
    return slug.strip('-')[:MAX_SLUG_LENGTH]


def unique_slug(name: str, is_taken: Callable[[str], bool], fallback: str = 'produit') -> str:
    """
    Generate a slug that is not yet taken, appending -1, -2, ... on collision.

    Args:
        name: Name to derive the slug from
        is_taken: Predicate telling whether a slug is already used
        fallback: Slug base used when the name has no alphanumeric character

    Returns:
        First free slug
    """
    base = generate_slug(name) or fallback
    slug = base
    counter = 1
    while is_taken(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug
