# Common utilities
from .config_loader import (
    load_base_name_rules,
    load_brand_patterns,
    load_category_colors,
    load_category_defaults,
    load_config,
    load_family_categories,
    load_import_settings,
    load_pricing_settings,
    load_supplier_names,
)
from .log_config import setup_logging
from .slugs import generate_slug, unique_slug
from .text_utils import collapse_whitespace, format_number, parse_french_number, strip_accents
