"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Category used when a supplier family has no mapping
DEFAULT_CATEGORY = "Autres"

# Display colour for categories without a configured colour
DEFAULT_CATEGORY_COLOR = "#283084"

# Family labels that mark a row as garbage (spreadsheet errors, repeated headers)
INVALID_FAMILY_MARKERS = ("#NAME?", "Libellé Famille")

# Supplier export layout: family, SKU, designation, supplier ref (x2), supplier code, stock, price
SUPPLIER_EXPORT_COLUMNS = 8

# French VAT standard rate (TVA 20%)
DEFAULT_VAT_RATE = "0.20"

# Variant attribute names as displayed on product pages
ATTR_POWER = "Puissance"
ATTR_CAPACITY = "Capacité"
ATTR_PHASE = "Phase"
ATTR_AMPERAGE = "Intensité"

PHASE_SINGLE = "Monophasé"
PHASE_THREE = "Triphasé"
