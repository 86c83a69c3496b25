"""Error types for db-drive."""

from typing import Optional, Dict, Any, List


class DriveError(Exception):
    """Base exception for db-drive errors."""

    def __init__(self, message: str, code: str = "DRIVE_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialized output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidPathError(DriveError):
    """Path does not match the path grammar."""

    def __init__(self, path: Optional[str], reason: Optional[str] = None):
        message = f"Path must represent a schema, an object type, an object or a row: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message,
            code="INVALID_PATH",
            details={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


class PathTooDeepError(InvalidPathError):
    """Path has more segments than the grammar supports."""

    def __init__(self, path: str, segments: int):
        super().__init__(path, reason="path has too many segments")
        self.code = "PATH_TOO_DEEP"
        self.details["segments"] = segments
        self.segments = segments


class NameRejectedError(DriveError):
    """A schema or object name failed name validation.

    Raised before the name reaches any SQL text, catalog filter or
    outgoing path. Names are never sanitized.
    """

    def __init__(self, name: str, path: Optional[str] = None):
        super().__init__(
            f"Name not valid: {name!r}",
            code="NAME_REJECTED",
            details={"name": name, "path": path},
        )
        self.name = name
        self.path = path


class NotFoundError(DriveError):
    """Schema, table or view does not exist."""

    def __init__(self, path: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Item not found: {path}",
            code="NOT_FOUND",
            details=details or {"path": path},
        )
        self.path = path


class BackendError(DriveError):
    """Error surfaced by the underlying database library."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[BaseException] = None,
    ):
        super().__init__(message, code="BACKEND_ERROR", details=details)
        self.source = source


class UnsupportedProviderError(DriveError):
    """Driver factory was given an unknown provider identifier."""

    def __init__(self, provider: str, supported: Optional[List[str]] = None):
        super().__init__(
            f"{provider} provider is not supported yet",
            code="UNSUPPORTED_PROVIDER",
            details={"provider": provider, "supported": supported or []},
        )
        self.provider = provider


class UnsupportedParameterTypeError(DriveError):
    """Query parameter value has no entry in the parameter type map."""

    def __init__(self, parameter: str, value_type: type):
        super().__init__(
            f"Unsupported type {value_type.__name__} for parameter '{parameter}'",
            code="UNSUPPORTED_PARAMETER_TYPE",
            details={"parameter": parameter, "type": value_type.__name__},
        )
        self.parameter = parameter
        self.value_type = value_type
