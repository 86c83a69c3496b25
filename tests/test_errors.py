"""Tests for error types."""

from dbdrive.errors import (
    BackendError,
    DriveError,
    InvalidPathError,
    NameRejectedError,
    NotFoundError,
    PathTooDeepError,
    UnsupportedParameterTypeError,
    UnsupportedProviderError,
)


class TestErrorCodes:
    """Tests for error codes and serialization."""

    def test_to_dict(self):
        """Test errors serialize code, message and details."""
        error = NotFoundError("db:\\SALES")

        assert error.to_dict() == {
            "code": "NOT_FOUND",
            "message": "Item not found: db:\\SALES",
            "details": {"path": "db:\\SALES"},
        }

    def test_all_derive_from_drive_error(self):
        """Test every error can be caught as DriveError."""
        errors = [
            InvalidPathError("x"),
            PathTooDeepError("a\\b\\c\\d\\e", 5),
            NameRejectedError("a;b"),
            NotFoundError("x"),
            BackendError("boom"),
            UnsupportedProviderError("mysql"),
            UnsupportedParameterTypeError("p", list),
        ]

        assert all(isinstance(e, DriveError) for e in errors)
        assert len({e.code for e in errors}) == len(errors)

    def test_path_too_deep_is_invalid_path(self):
        """Test too-deep paths are a kind of invalid path with their own code."""
        error = PathTooDeepError("a\\b\\c\\d\\e", 5)

        assert isinstance(error, InvalidPathError)
        assert error.code == "PATH_TOO_DEEP"
        assert error.details["segments"] == 5

    def test_invalid_path_reason(self):
        """Test the reason is appended to the message."""
        error = InvalidPathError("SALES\\INDEX", reason="unknown object type")

        assert error.message.endswith("(unknown object type)")
        assert error.details == {"path": "SALES\\INDEX", "reason": "unknown object type"}

    def test_backend_error_keeps_source(self):
        """Test the underlying library exception is kept."""
        source = RuntimeError("ORA-12541: TNS:no listener")
        error = BackendError(f"Failed to execute query: {source}", source=source)

        assert error.source is source
        assert "ORA-12541" in str(error)

    def test_unsupported_provider_message(self):
        """Test the provider is named in the message."""
        error = UnsupportedProviderError("mysql", supported=["oracle", "postgres"])

        assert error.message == "mysql provider is not supported yet"
        assert error.details["supported"] == ["oracle", "postgres"]
