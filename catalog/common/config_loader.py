"""
Configuration Loader

Loads YAML configuration files for family/category mapping, supplier names,
brand detection patterns, base-name reduction rules, import settings and
pricing settings.
"""

import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .constants import DEFAULT_CATEGORY, DEFAULT_CATEGORY_COLOR, DEFAULT_VAT_RATE, INVALID_FAMILY_MARKERS

CONFIG_DIR_ENV = 'CATALOG_CONFIG_DIR'


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Explicit override wins
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir)

    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'categories.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_family_categories() -> Dict[str, str]:
    """
    Load the supplier family to category mapping.

    Returns:
        Dictionary mapping family label to category name

    Example:
        {
            'ONDULEURS HUAWEI': 'Solaire',
            'BALLONS': 'Pompes à chaleur',
            ...
        }
    """
    config = load_config('categories.yaml')
    return config.get('family_to_category', {})


def load_category_colors() -> Dict[str, str]:
    """
    Load category display colours.

    Returns:
        Dictionary mapping category name to hex colour
    """
    config = load_config('categories.yaml')
    return config.get('category_colors', {})


def load_category_defaults() -> Dict[str, str]:
    """
    Load fallback category name and colour.

    Returns:
        {'category': 'Autres', 'color': '#283084'} unless overridden
    """
    config = load_config('categories.yaml')
    return {
        'category': config.get('default_category', DEFAULT_CATEGORY),
        'color': config.get('default_color', DEFAULT_CATEGORY_COLOR),
    }


def load_supplier_names() -> Dict[str, str]:
    """
    Load supplier code to supplier name mapping.

    Example:
        {'SYAPSYSTEMS': 'AP Systems', 'SYMADEP': 'Madep', ...}
    """
    config = load_config('suppliers.yaml')
    return config.get('suppliers', {})


def load_brand_patterns() -> List[Dict[str, str]]:
    """
    Load ordered brand detection patterns.

    Order matters: the first matching pattern wins.

    Returns:
        List of {'name': ..., 'pattern': ...} entries

    Raises:
        ValueError: If an entry lacks a name or a pattern
    """
    config = load_config('brands.yaml')
    entries = config.get('brands', [])
    for entry in entries:
        if not entry.get('name') or not entry.get('pattern'):
            raise ValueError(f"Brand entry needs 'name' and 'pattern': {entry!r}")
    return entries


def load_base_name_rules() -> Dict[str, Any]:
    """
    Load the versioned base-name reduction rule set.

    Returns:
        Dictionary with 'version', 'min_length', 'rules' (ordered list of
        {'name', 'pattern'}) and 'fallback' (pattern)

    Raises:
        ValueError: If the rule set has no version or no rules
    """
    config = load_config('base_name_rules.yaml')
    if 'version' not in config:
        raise ValueError("base_name_rules.yaml must declare a 'version'")
    if not config.get('rules'):
        raise ValueError("base_name_rules.yaml must declare at least one rule")
    return config


def load_import_settings() -> Dict[str, Any]:
    """
    Load supplier export settings (delimiter, invalid family markers).
    """
    config = load_config('import.yaml')
    return {
        'delimiter': config.get('delimiter', ','),
        'invalid_families': config.get('invalid_families', list(INVALID_FAMILY_MARKERS)),
    }


def load_pricing_settings() -> Dict[str, Any]:
    """
    Load pricing settings.

    Returns:
        Dictionary with 'vat_rate' as a string (e.g., '0.20')
    """
    config = load_config('pricing.yaml')
    return {
        'vat_rate': str(config.get('vat_rate', DEFAULT_VAT_RATE)),
    }
