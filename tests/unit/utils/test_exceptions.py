"""
Tests for custom exceptions.
"""

import pytest

from storage_trait.utils.exceptions import (
    ConfigurationError,
    InvalidReferenceError,
    NoDataError,
    StorageTraitError,
    TransportError,
    UnsupportedOperationError,
    as_storage_error,
)


@pytest.mark.unit
class TestExceptions:
    """Test custom exceptions."""

    def test_base_exception(self):
        """Test base StorageTraitError."""
        exc = StorageTraitError(
            message="Test error",
            code="TEST_ERROR",
            details=["Detail 1", "Detail 2"]
        )

        assert str(exc) == "Test error"
        assert exc.message == "Test error"
        assert exc.code == "TEST_ERROR"
        assert exc.details == ["Detail 1", "Detail 2"]

    def test_base_exception_defaults(self):
        """Test StorageTraitError with default values."""
        exc = StorageTraitError("Simple error")

        assert exc.code == "UNKNOWN_ERROR"
        assert exc.details == []

    def test_configuration_error(self):
        """Test ConfigurationError."""
        exc = ConfigurationError(details=["Collection: users"])

        assert exc.code == "CONFIGURATION_ERROR"
        assert exc.details == ["Collection: users"]

    def test_unsupported_operation_error(self):
        """Test UnsupportedOperationError details."""
        exc = UnsupportedOperationError(model_name="Ticket", operation="fetch")

        assert exc.code == "UNSUPPORTED_OPERATION"
        assert exc.details == ["Model: Ticket", "Operation: fetch"]

    def test_unsupported_operation_error_defaults(self):
        """Test UnsupportedOperationError without context."""
        exc = UnsupportedOperationError()

        assert exc.message == "Operation not supported for this model"
        assert exc.details == []

    def test_invalid_reference_error(self):
        """Test InvalidReferenceError default and custom code."""
        assert InvalidReferenceError().code == "INVALID_COLLECTION_REFERENCE"
        assert InvalidReferenceError(code="RECORD_DELETED").code == "RECORD_DELETED"

    def test_no_data_error(self):
        """Test NoDataError."""
        exc = NoDataError(path="tickets")

        assert exc.message == "Data Error"
        assert exc.code == "NO_DATA"
        assert exc.details == ["Path: tickets"]

    def test_transport_error_keeps_original(self):
        """Test TransportError wraps the vendor exception."""
        original = RuntimeError("socket closed")
        exc = TransportError(message="Failed to query documents", original=original)

        assert exc.code == "TRANSPORT_ERROR"
        assert exc.original is original
        assert exc.details == ["socket closed"]

    def test_all_errors_share_base(self):
        """Test the taxonomy has a single base class."""
        for exc in [
            ConfigurationError(),
            UnsupportedOperationError(),
            InvalidReferenceError(),
            NoDataError(),
            TransportError(),
        ]:
            assert isinstance(exc, StorageTraitError)

    def test_as_storage_error_passes_package_errors(self):
        """Test package errors are returned unchanged."""
        exc = NoDataError(path="tickets")

        assert as_storage_error(exc) is exc

    def test_as_storage_error_wraps_vendor_errors(self):
        """Test other exceptions become a TransportError."""
        original = ValueError("Malformed path")
        exc = as_storage_error(original)

        assert isinstance(exc, TransportError)
        assert exc.code == "BACKEND_ERROR"
        assert exc.original is original
