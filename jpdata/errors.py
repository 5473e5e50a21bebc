"""Error types raised by the export schema toolkit."""

from typing import Any, Optional


class ExportSchemaError(Exception):
    """Base class for all export schema errors."""

    @property
    def reason(self) -> str:
        """Error kind name reported by validators."""
        return type(self).__name__


class InvalidTimestamp(ExportSchemaError, ValueError):
    """Raised when a value cannot be parsed as a date."""

    def __init__(self, value: Any, detail: Optional[str] = None):
        self.value = value
        message = f"Invalid timestamp: {value!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnknownTestType(ExportSchemaError, ValueError):
    """Raised when a test type label has no canonical mapping."""

    def __init__(self, label: Any):
        self.label = label
        super().__init__(f"Unknown test type: {label!r}")


class UnknownApplication(ExportSchemaError, ValueError):
    """Raised when a consumer id has no declared vocabulary."""

    def __init__(self, application: Any):
        self.application = application
        super().__init__(f"Unknown application: {application!r}")


class UnsupportedVersion(ExportSchemaError):
    """Raised when the document version is missing or unrecognized."""

    def __init__(self, version: Any):
        self.version = version
        super().__init__(f"Unsupported export version: {version!r}")


class StructuralViolation(ExportSchemaError):
    """Raised when a required field is missing or has the wrong type."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class ReferentialViolation(ExportSchemaError):
    """Raised when an attempt references a test missing from the document."""

    def __init__(self, path: str, test_id: Any):
        self.path = path
        self.test_id = test_id
        super().__init__(f"{path}: references unknown test {test_id!r}")
