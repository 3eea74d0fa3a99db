"""
Custom exceptions for the Storefront project
"""


class StorefrontException(Exception):
    """Base exception for all Storefront errors"""
    status_code = 500

    def __init__(self, message: str, code: str = "STOREFRONT_ERROR", status_code: int = None):
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(StorefrontException):
    """Raised when a requested record does not exist"""
    status_code = 404

    def __init__(self, resource: str, identifier):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND"
        )


class ConflictError(StorefrontException):
    """Raised when a unique value is already taken"""
    status_code = 409

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message=message, code="CONFLICT")


class ReferentialIntegrityError(StorefrontException):
    """Raised when deleting a record that other records still reference"""
    status_code = 409

    def __init__(self, resource: str, dependents: str):
        self.resource = resource
        self.dependents = dependents
        super().__init__(
            message=f"Cannot delete {resource}: it is still referenced by {dependents}",
            code="REFERENTIAL_INTEGRITY"
        )


class ValidationException(StorefrontException):
    """Exception raised for validation errors"""
    status_code = 400

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(
            message=message,
            code="VALIDATION_ERROR"
        )


class InsufficientStockError(StorefrontException):
    """Raised when an order asks for more units than a product has"""
    status_code = 400

    def __init__(self, product_name: str, available: int, requested: int):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            message=(
                f"Insufficient stock for {product_name}. "
                f"Available: {available}, Requested: {requested}"
            ),
            code="INSUFFICIENT_STOCK"
        )


class InvalidStatusTransitionError(StorefrontException):
    """Raised when an order is moved to a status it cannot reach"""
    status_code = 400

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            message=f"Cannot change order status from '{current}' to '{requested}'",
            code="INVALID_STATUS_TRANSITION"
        )


class ImmutableRecordError(StorefrontException):
    """Raised on attempts to rewrite or delete placed order history"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message=message, code="IMMUTABLE_RECORD")


class ListingFetchError(StorefrontException):
    """Raised inside the listing client when a fetch cannot be completed"""

    def __init__(self, message: str, outcome: str):
        self.outcome = outcome
        super().__init__(
            message=f"Listing fetch failed: {message}",
            code="LISTING_FETCH_ERROR"
        )
