"""
Error types for the zenmanage client.
"""

from typing import Dict, Any, Optional


class ZenmanageError(Exception):
    """Base exception for the zenmanage client."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Render the error for logs and responses."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ZenmanageError):
    """Invalid or missing client setup."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class EvaluationError(ZenmanageError):
    """Requested flag is unknown and no default is available."""

    def __init__(self, message: str = "Flag evaluation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("EVALUATION_ERROR", message, details)


class FetchRulesError(ZenmanageError):
    """Rules could not be fetched from the remote service."""

    def __init__(self, message: str = "Failed to fetch rules", status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status_code", status_code)
        self.status_code = status_code
        super().__init__("FETCH_RULES_ERROR", message, details)


class InvalidRulesError(ZenmanageError):
    """Remote response does not have the expected shape."""

    def __init__(self, message: str = "Invalid rules response", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_RULES_ERROR", message, details)
