"""Services package - Business logic layer for Cake Costing.

Architecture:
- Services: Stateless functions organized by concern
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Validation: Input validation before any arithmetic

Service Modules:
- catalog_service: Load the costing catalog snapshot, seed defaults
- costing_service: Order and quote entry points (payload -> CostingResult)
- costing: The pure costing engine (geometry, recipes, labor, pricing)

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Service logger and structured operation logging
- dto_utils: Decimal money helpers and string formatting
"""

# Service modules
from . import (
    database,
    catalog_service,
    costing_service,
)

# Exceptions
from .exceptions import (
    ServiceError,
    ValidationError,
    InvalidTierError,
    DecorationTechniqueNotFound,
    TierSizeNotFound,
    DeliveryZoneNotFound,
    CatalogEmptyError,
    DatabaseError,
)

__all__ = [
    # Service modules
    "database",
    "catalog_service",
    "costing_service",
    # Exceptions
    "ServiceError",
    "ValidationError",
    "InvalidTierError",
    "DecorationTechniqueNotFound",
    "TierSizeNotFound",
    "DeliveryZoneNotFound",
    "CatalogEmptyError",
    "DatabaseError",
]
