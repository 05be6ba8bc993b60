"""Unit tests for exception hierarchy.

Validates that all exceptions inherit from ServiceError and carry the
attributes callers rely on (http_status_code, entity ids, error lists).
"""

import inspect
import pytest

from src.services.exceptions import ServiceError


def get_all_exception_classes():
    """Dynamically discover all exception classes in services."""
    exceptions = []

    from src.services import exceptions as exc_module
    for name, obj in inspect.getmembers(exc_module, inspect.isclass):
        if issubclass(obj, Exception) and obj.__module__ == exc_module.__name__:
            exceptions.append((name, obj))

    return exceptions


class TestExceptionHierarchy:
    """Verify all exceptions inherit from ServiceError."""

    @pytest.fixture
    def all_exceptions(self):
        return get_all_exception_classes()

    def test_discovers_exceptions(self, all_exceptions):
        """The exceptions module defines the full hierarchy."""
        names = {name for name, _cls in all_exceptions}
        assert {
            "ServiceError",
            "ValidationError",
            "InvalidTierError",
            "DecorationTechniqueNotFound",
            "TierSizeNotFound",
            "DeliveryZoneNotFound",
            "CatalogEmptyError",
            "DatabaseError",
        } <= names

    def test_all_domain_exceptions_inherit_from_service_error(self, all_exceptions):
        """All domain exceptions must inherit from ServiceError."""
        failures = []
        for name, exc_class in all_exceptions:
            # Skip ServiceError itself
            if exc_class is ServiceError:
                continue
            if not issubclass(exc_class, ServiceError):
                failures.append(f"{name} does not inherit from ServiceError")

        assert not failures, "Exceptions not inheriting from ServiceError:\n" + "\n".join(failures)

    def test_http_status_codes_are_valid(self, all_exceptions):
        """HTTP status codes must be valid (4xx or 5xx)."""
        valid_codes = [400, 404, 409, 422, 500]
        failures = []
        for name, exc_class in all_exceptions:
            code = exc_class.http_status_code
            if code not in valid_codes:
                failures.append(f"{name} has invalid http_status_code: {code}")

        assert not failures, "Invalid http_status_codes:\n" + "\n".join(failures)


class TestServiceErrorBase:
    """Test ServiceError base class functionality."""

    def test_correlation_id_support(self):
        """ServiceError should accept correlation_id."""
        error = ServiceError("test", correlation_id="abc-123")
        assert error.correlation_id == "abc-123"

    def test_context_support(self):
        """ServiceError should accept context kwargs."""
        error = ServiceError("test", tier_index=2, recipe_id=7)
        assert error.context.get("tier_index") == 2
        assert error.context.get("recipe_id") == 7

    def test_to_dict(self):
        """ServiceError should serialize to dict."""
        error = ServiceError("test message", correlation_id="abc")
        d = error.to_dict()
        assert d["type"] == "ServiceError"
        assert d["message"] == "test message"
        assert d["correlation_id"] == "abc"
        assert d["http_status_code"] == 500

    def test_default_http_status_code(self):
        """ServiceError should default to 500."""
        assert ServiceError.http_status_code == 500

    def test_str_representation(self):
        """ServiceError string representation is the message."""
        error = ServiceError("error occurred")
        assert str(error) == "error occurred"
        assert error.message == "error occurred"


class TestSpecificExceptions:
    """Test specific exception classes."""

    def test_validation_error(self):
        """ValidationError includes all error messages."""
        from src.services.exceptions import ValidationError
        error = ValidationError(["Baker hours: Value must be zero or greater", "Markup bad"])
        assert "Baker hours" in str(error)
        assert "Markup bad" in str(error)
        assert error.http_status_code == 400
        assert len(error.errors) == 2

    def test_invalid_tier_error(self):
        """InvalidTierError prefixes each error with the tier number."""
        from src.services.exceptions import InvalidTierError, ValidationError
        error = InvalidTierError(3, ["Servings: Value must be zero or greater"])
        assert isinstance(error, ValidationError)
        assert error.tier_index == 3
        assert error.errors == ["Tier 3: Servings: Value must be zero or greater"]
        assert error.http_status_code == 400

    def test_decoration_technique_not_found(self):
        """DecorationTechniqueNotFound includes the id."""
        from src.services.exceptions import DecorationTechniqueNotFound
        error = DecorationTechniqueNotFound(42)
        assert "42" in str(error)
        assert error.technique_id == 42
        assert error.context == {"technique_id": 42}
        assert error.http_status_code == 404

    def test_tier_size_not_found(self):
        """TierSizeNotFound includes the id."""
        from src.services.exceptions import TierSizeNotFound
        error = TierSizeNotFound(9)
        assert "Tier size with ID 9 not found" == str(error)
        assert error.tier_size_id == 9
        assert error.http_status_code == 404

    def test_delivery_zone_not_found(self):
        """DeliveryZoneNotFound includes the id."""
        from src.services.exceptions import DeliveryZoneNotFound
        error = DeliveryZoneNotFound(5)
        assert error.delivery_zone_id == 5
        assert error.to_dict()["type"] == "DeliveryZoneNotFound"

    def test_catalog_empty_error(self):
        """CatalogEmptyError points at the seed command."""
        from src.services.exceptions import CatalogEmptyError
        error = CatalogEmptyError()
        assert "init-db --seed" in str(error)
        assert error.http_status_code == 422

    def test_database_error(self):
        """DatabaseError wraps original error."""
        from src.services.exceptions import DatabaseError
        original = Exception("Connection lost")
        error = DatabaseError("Connection failed", original_error=original)
        assert error.http_status_code == 500
        assert error.original_error == original
        assert str(error) == "Database error: Connection failed"
