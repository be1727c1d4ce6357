"""
Import data models.

Transient rows and groups built while reading a supplier export,
plus the run result and the persisted import history record.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


@dataclass
class ParsedVariant:
    """One accepted row of the supplier export."""
    family: str
    sku: str
    designation: str
    supplier_reference: str = ""
    supplier_code: str = ""
    stock: Decimal = Decimal(0)
    price: Decimal = Decimal(0)

    def __post_init__(self):
        """Validate required fields and clamp stock."""
        if not self.family:
            raise ValueError("Row family is required")
        if not self.sku:
            raise ValueError("Row SKU is required")
        if not self.designation:
            raise ValueError("Row designation is required")
        # Supplier exports carry negative stock for back-orders
        if self.stock < 0:
            self.stock = Decimal(0)

    @property
    def active(self) -> bool:
        """A variant is shown when it is in stock or has a price."""
        return self.stock > 0 or self.price > 0


@dataclass
class ProductGroup:
    """Variants sharing one product identity (group key + category)."""
    base_name: str
    group_key: str
    family: str
    brand_name: Optional[str]
    category_name: str
    variants: List[ParsedVariant] = field(default_factory=list)

    @property
    def identity(self) -> tuple:
        return (self.group_key, self.category_name)


@dataclass
class ImportResult:
    """Aggregate outcome of one import run."""
    rows_processed: int = 0
    rows_rejected: int = 0
    products_created: int = 0
    variants_created: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @classmethod
    def failed(cls, message: str) -> "ImportResult":
        """Result of a run aborted before processing anything."""
        return cls(errors=[message])

    def to_dict(self) -> dict:
        return {
            'rows_processed': self.rows_processed,
            'rows_rejected': self.rows_rejected,
            'products_created': self.products_created,
            'variants_created': self.variants_created,
            'errors': list(self.errors),
            'success': self.success,
        }


class ImportStatus(str, Enum):
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass
class ImportRecord:
    """Import history entry kept by the store."""
    filename: str
    status: ImportStatus = ImportStatus.PROCESSING
    rows_processed: int = 0
    products_created: int = 0
    variants_created: int = 0
    errors: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    id: str = ""

    def complete(self, result: ImportResult) -> None:
        """Copy the run outcome into the record."""
        self.status = ImportStatus.COMPLETED if result.success else ImportStatus.FAILED
        self.rows_processed = result.rows_processed
        self.products_created = result.products_created
        self.variants_created = result.variants_created
        self.errors = "\n".join(result.errors)
        self.completed_at = datetime.now()
