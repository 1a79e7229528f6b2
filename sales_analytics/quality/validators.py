"""
Data Validation Module

Rule-based integrity checks for the base entity tables before they are
converted into domain entities.

Features:
- Required column checks
- Null and uniqueness checks
- Numeric range and integer type checks
- Referential integrity checks
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import polars as pl
import structlog

from sales_analytics.exceptions import ReferenceIntegrityError, ValidationError

logger = structlog.get_logger(__name__)


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"  # Critical - blocks ingestion
    WARNING = "warning"  # Non-critical - logged, fails only in strict mode
    INFO = "info"


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_rows: int = 0
    total_rows: int = 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ValidationResult:
    """Complete validation suite result"""
    table: str
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Percentage of passed checks"""
        if self.total_checks == 0:
            return 100.0
        return (self.passed_checks / self.total_checks) * 100

    @property
    def failures(self) -> List[ValidationCheck]:
        return [c for c in self.checks if not c.passed and c.severity != ValidationSeverity.INFO]


class DataValidator:
    """
    Data validator for one entity table.

    Example:
        validator = DataValidator("products")
        validator.add_not_null_check("product_id")
        validator.add_range_check("price", min_value=0)
        result = validator.validate(df)
    """

    def __init__(self, table: str = "data", strict_mode: bool = False):
        self.table = table
        self.strict_mode = strict_mode  # Fail on any warning
        self._checks: List[Callable[[pl.DataFrame], ValidationCheck]] = []

    def reset(self) -> None:
        """Reset validator state"""
        self._checks = []

    def _missing_column(self, name: str, column: str, severity: ValidationSeverity) -> ValidationCheck:
        return ValidationCheck(
            name=name,
            passed=False,
            severity=severity,
            message=f"Column '{column}' not found",
        )

    def add_required_columns_check(
        self,
        columns: List[str],
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check that all required columns are present"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            missing = [c for c in columns if c not in df.columns]
            return ValidationCheck(
                name="required_columns",
                passed=not missing,
                severity=severity,
                message=f"Missing columns: {missing}" if missing else "All required columns present",
                details={"missing": missing},
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def add_not_null_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for null values in column"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return self._missing_column(f"not_null_{column}", column, severity)

            null_count = df[column].null_count()
            total = len(df)
            passed = null_count == 0

            return ValidationCheck(
                name=f"not_null_{column}",
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {null_count} null values" if not passed else f"Column '{column}' has no null values",
                details={"null_count": null_count, "null_percentage": (null_count / total) * 100 if total > 0 else 0},
                failed_rows=null_count,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_unique_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for uniqueness of column values"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return self._missing_column(f"unique_{column}", column, severity)

            total = len(df)
            unique_count = df[column].n_unique()
            duplicate_count = total - unique_count
            passed = duplicate_count == 0

            return ValidationCheck(
                name=f"unique_{column}",
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {duplicate_count} duplicate values" if not passed else f"Column '{column}' values are unique",
                details={"unique_count": unique_count, "duplicate_count": duplicate_count},
                failed_rows=duplicate_count,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_range_check(
        self,
        column: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for numeric values within specified range"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return self._missing_column(f"range_{column}", column, severity)

            if not df.schema[column].is_numeric():
                return ValidationCheck(
                    name=f"range_{column}",
                    passed=False,
                    severity=severity,
                    message=f"Column '{column}' is not numeric ({df.schema[column]})",
                    total_rows=len(df),
                )

            conditions = []
            if min_value is not None:
                conditions.append(pl.col(column) < min_value)
            if max_value is not None:
                conditions.append(pl.col(column) > max_value)

            if not conditions:
                return ValidationCheck(
                    name=f"range_{column}",
                    passed=True,
                    severity=severity,
                    message="No range specified",
                )

            # Combine conditions with OR
            combined = conditions[0]
            for cond in conditions[1:]:
                combined = combined | cond

            out_of_range = df.filter(combined).height
            total = len(df)
            passed = out_of_range == 0

            return ValidationCheck(
                name=f"range_{column}",
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {out_of_range} values outside range [{min_value}, {max_value}]" if not passed else "All values in range",
                details={"min": min_value, "max": max_value, "out_of_range_count": out_of_range},
                failed_rows=out_of_range,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_positive_check(
        self,
        column: str,
        allow_zero: bool = True,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for non-negative (or strictly positive) values"""
        if allow_zero:
            return self.add_range_check(column, min_value=0, severity=severity)

        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return self._missing_column(f"positive_{column}", column, severity)

            if not df.schema[column].is_numeric():
                return ValidationCheck(
                    name=f"positive_{column}",
                    passed=False,
                    severity=severity,
                    message=f"Column '{column}' is not numeric ({df.schema[column]})",
                    total_rows=len(df),
                )

            non_positive = df.filter(pl.col(column) <= 0).height
            total = len(df)
            passed = non_positive == 0

            return ValidationCheck(
                name=f"positive_{column}",
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {non_positive} non-positive values" if not passed else "All values positive",
                details={"non_positive_count": non_positive},
                failed_rows=non_positive,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_integer_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check that a column has an integer dtype"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return self._missing_column(f"integer_{column}", column, severity)

            dtype = df.schema[column]
            passed = dtype.is_integer()

            return ValidationCheck(
                name=f"integer_{column}",
                passed=passed,
                severity=severity,
                message=f"Column '{column}' must be integer, got {dtype}" if not passed else f"Column '{column}' is integer",
                details={"dtype": str(dtype)},
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def add_custom_check(
        self,
        name: str,
        check_func: Callable[[pl.DataFrame], bool],
        message_on_fail: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add custom validation check"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            passed = bool(check_func(df))
            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message="Check passed" if passed else message_on_fail,
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def add_referential_integrity_check(
        self,
        column: str,
        reference_df: pl.DataFrame,
        reference_column: str,
        entity: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check that every value in `column` exists in the reference table"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return self._missing_column(f"ref_integrity_{column}", column, severity)

            ref_values = reference_df[reference_column].unique().to_list()

            orphans = df.filter(
                ~pl.col(column).is_in(ref_values) & pl.col(column).is_not_null()
            )[column]
            total = len(df)
            passed = orphans.len() == 0

            return ValidationCheck(
                name=f"ref_integrity_{column}",
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {orphans.len()} orphan records" if not passed else "Referential integrity maintained",
                details={
                    "entity": entity,
                    "orphan_count": orphans.len(),
                    "orphan_keys": orphans.head(5).to_list(),
                },
                failed_rows=orphans.len(),
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """
        Run all validation checks on DataFrame.

        Args:
            df: DataFrame to validate

        Returns:
            ValidationResult with all check results
        """
        started_at = _utcnow()
        results = []

        logger.info(f"Running {len(self._checks)} validation checks on {len(df)} rows", table=self.table)

        for check_func in self._checks:
            result = check_func(df)
            results.append(result)

            if not result.passed:
                logger.warning(
                    f"Validation failed: {result.name}",
                    table=self.table,
                    message=result.message,
                    severity=result.severity.value,
                )

        completed_at = _utcnow()

        passed_checks = sum(1 for r in results if r.passed)
        failed_checks = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.ERROR)
        warning_count = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.WARNING)

        if failed_checks > 0:
            status = ValidationStatus.FAILED
        elif warning_count > 0 and self.strict_mode:
            status = ValidationStatus.FAILED
        elif warning_count > 0:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.PASSED

        validation_result = ValidationResult(
            table=self.table,
            status=status,
            total_checks=len(results),
            passed_checks=passed_checks,
            failed_checks=failed_checks,
            warning_count=warning_count,
            checks=results,
            started_at=started_at,
            completed_at=completed_at,
        )

        logger.info(
            f"Validation complete: {status.value}",
            table=self.table,
            passed=passed_checks,
            failed=failed_checks,
            warnings=warning_count,
        )

        return validation_result


def raise_for_result(result: ValidationResult) -> None:
    """
    Raise if a validation result failed.

    Referential integrity failures surface as ReferenceIntegrityError,
    every other failure as ValidationError.
    """
    if result.status != ValidationStatus.FAILED:
        return

    failures = result.failures
    for check in failures:
        if check.name.startswith("ref_integrity_") and check.details:
            raise ReferenceIntegrityError(
                check.details["entity"],
                check.details["orphan_keys"][0],
                referenced_by=f"{result.table}.{check.name[len('ref_integrity_'):]}",
            )

    messages = "; ".join(check.message for check in failures)
    raise ValidationError(f"Validation failed for {result.table}: {messages}", checks=failures)


# Pre-built validators for the base entity tables
def create_products_validator(strict_mode: bool = False) -> DataValidator:
    """Create pre-configured validator for products data"""
    return (
        DataValidator("products", strict_mode=strict_mode)
        .add_required_columns_check(["product_id", "name", "category", "price"])
        .add_not_null_check("product_id")
        .add_unique_check("product_id")
        .add_not_null_check("name")
        .add_not_null_check("price")
        .add_positive_check("price")
        .add_not_null_check("category")
    )


def create_customers_validator(strict_mode: bool = False) -> DataValidator:
    """Create pre-configured validator for customers data"""
    return (
        DataValidator("customers", strict_mode=strict_mode)
        .add_required_columns_check(["customer_id", "name", "city"])
        .add_not_null_check("customer_id")
        .add_unique_check("customer_id")
        .add_not_null_check("name")
        .add_not_null_check("city")
    )


def create_orders_validator(
    customers_df: Optional[pl.DataFrame] = None,
    strict_mode: bool = False,
) -> DataValidator:
    """Create pre-configured validator for orders data"""
    validator = (
        DataValidator("orders", strict_mode=strict_mode)
        .add_required_columns_check(["order_id", "customer_id", "order_date"])
        .add_not_null_check("order_id")
        .add_unique_check("order_id")
        .add_not_null_check("customer_id")
        .add_not_null_check("order_date")
    )
    if customers_df is not None:
        validator.add_referential_integrity_check(
            "customer_id", customers_df, "customer_id", entity="customer"
        )
    return validator


def create_order_items_validator(
    orders_df: Optional[pl.DataFrame] = None,
    products_df: Optional[pl.DataFrame] = None,
    strict_mode: bool = False,
) -> DataValidator:
    """Create pre-configured validator for order items data"""
    validator = (
        DataValidator("order_items", strict_mode=strict_mode)
        .add_required_columns_check(["order_id", "product_id", "quantity"])
        .add_not_null_check("order_id")
        .add_not_null_check("product_id")
        .add_not_null_check("quantity")
        .add_integer_check("quantity")
        .add_positive_check("quantity", allow_zero=False)
    )
    if orders_df is not None:
        validator.add_referential_integrity_check("order_id", orders_df, "order_id", entity="order")
    if products_df is not None:
        validator.add_referential_integrity_check("product_id", products_df, "product_id", entity="product")
    return validator
