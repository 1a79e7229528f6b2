"""
Domain Exceptions

Errors raised by the analytics pipeline. None of them is recovered
locally: bad input is reported to the caller, never dropped.
"""


class AnalyticsError(Exception):
    """Base exception for all sales analytics errors."""


class ReferenceIntegrityError(AnalyticsError):
    """Raised when a foreign key does not resolve.

    Raised when:
    - an order item references a missing order or product
    - an order references a missing customer
    - an order total belongs to a customer absent from the customer list
    """

    def __init__(self, entity: str, key, referenced_by: str = ""):
        self.entity = entity
        self.key = key
        self.referenced_by = referenced_by
        message = f"{entity} {key!r} does not exist"
        if referenced_by:
            message = f"{message} (referenced by {referenced_by})"
        super().__init__(message)


class ConsistencyError(AnalyticsError):
    """Raised when grouped records disagree on a field that must be
    invariant within the group, or when an identifier is duplicated."""


class ValidationError(AnalyticsError):
    """Raised when ingested data breaks numeric or schema integrity.

    Raised when:
    - a product price is negative
    - an order item quantity is not a positive integer
    - an input table is missing required columns
    """

    def __init__(self, message: str, checks=None):
        self.checks = list(checks or [])
        super().__init__(message)
