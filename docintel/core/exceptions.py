"""
Custom exceptions for the document intelligence pipeline.
"""
from typing import Any, Dict, Optional


class DocIntelException(Exception):
    """Base exception for all docintel exceptions."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DocIntelException):
    """Invalid request data."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, details=details)
