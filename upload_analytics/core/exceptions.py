# core/exceptions.py

from typing import Any, Dict, Optional


class AnalyticsError(Exception):
    """Base class for every error raised by the analytics core"""

    category = "analytics_error"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        payload = {"type": self.category, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class IngestionError(AnalyticsError):
    """The uploaded file could not be turned into a table"""

    category = "ingestion_error"
    status_code = 400


class UnsupportedFileTypeError(IngestionError):
    category = "unsupported_file_type"
    status_code = 415


class FileTooLargeError(IngestionError):
    category = "file_too_large"
    status_code = 413


class EmptyTableError(AnalyticsError):
    """Table has no records or no columns after cleaning"""

    category = "empty_table"
    status_code = 422


class EmptyColumnError(AnalyticsError):
    """A single column has no valid numeric values"""

    category = "empty_column"
    status_code = 422

    def __init__(self, column: str, message: Optional[str] = None):
        super().__init__(message or f"No valid data for {column}", {"column": column})
        self.column = column


class ConfigurationError(AnalyticsError):
    category = "configuration_error"
    status_code = 400


class RenderingError(AnalyticsError):
    """Chart configuration could not be produced for one plan"""

    category = "rendering_error"
    status_code = 500

    def __init__(self, chart_id: str, message: str):
        super().__init__(message, {"chart_id": chart_id})
        self.chart_id = chart_id


class SessionNotFoundError(AnalyticsError):
    category = "session_not_found"
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(f"Session '{session_id}' not found or expired", {"session_id": session_id})
        self.session_id = session_id


class NoNumericColumnsWarning(UserWarning):
    """Classification succeeded but no column is numeric"""
