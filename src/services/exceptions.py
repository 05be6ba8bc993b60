"""Service layer exception classes for Cake Costing.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   └── InvalidTierError
    ├── DecorationTechniqueNotFound
    ├── TierSizeNotFound
    ├── DeliveryZoneNotFound
    ├── CatalogEmptyError
    └── DatabaseError
"""

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        correlation_id: Optional ID for tracing a request across log lines
        context: Arbitrary structured context (entity IDs etc.)
        http_status_code: Status code a web caller should map this error to
    """

    http_status_code = 500

    def __init__(self, message: str, correlation_id: Optional[str] = None, **context: Any):
        self.message = message
        self.correlation_id = correlation_id
        self.context = context
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for API responses and logs."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "correlation_id": self.correlation_id,
            "http_status_code": self.http_status_code,
        }


class ValidationError(ServiceError):
    """Raised when data validation fails."""

    http_status_code = 400

    def __init__(self, errors: list, correlation_id: Optional[str] = None):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}", correlation_id=correlation_id)


class InvalidTierError(ValidationError):
    """Raised when a tier cannot be priced (no size, negative volume or servings)."""

    def __init__(self, tier_index: int, errors: list):
        self.tier_index = tier_index
        super().__init__([f"Tier {tier_index}: {error}" for error in errors])


class DecorationTechniqueNotFound(ServiceError):
    """Raised when a decoration line references an unknown technique."""

    http_status_code = 404

    def __init__(self, technique_id: int):
        self.technique_id = technique_id
        super().__init__(
            f"Decoration technique with ID {technique_id} not found",
            technique_id=technique_id,
        )


class TierSizeNotFound(ServiceError):
    """Raised when an order or quote payload references an unknown tier size."""

    http_status_code = 404

    def __init__(self, tier_size_id: int):
        self.tier_size_id = tier_size_id
        super().__init__(
            f"Tier size with ID {tier_size_id} not found", tier_size_id=tier_size_id
        )


class DeliveryZoneNotFound(ServiceError):
    """Raised when a delivery order names a zone that does not exist."""

    http_status_code = 404

    def __init__(self, delivery_zone_id: int):
        self.delivery_zone_id = delivery_zone_id
        super().__init__(
            f"Delivery zone with ID {delivery_zone_id} not found",
            delivery_zone_id=delivery_zone_id,
        )


class CatalogEmptyError(ServiceError):
    """Raised when the CLI is asked to price against an empty catalog."""

    http_status_code = 422

    def __init__(self, message: str = "Costing catalog is empty; run init-db --seed first"):
        super().__init__(message)


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    http_status_code = 500

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
