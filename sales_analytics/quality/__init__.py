"""
Data Quality Module
"""
from .validators import (
    DataValidator,
    ValidationCheck,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
    create_customers_validator,
    create_order_items_validator,
    create_orders_validator,
    create_products_validator,
    raise_for_result,
)

__all__ = [
    "DataValidator",
    "ValidationCheck",
    "ValidationResult",
    "ValidationSeverity",
    "ValidationStatus",
    "create_customers_validator",
    "create_order_items_validator",
    "create_orders_validator",
    "create_products_validator",
    "raise_for_result",
]
