"""
Domain errors

Only raised for hard failures at the edges (importing documents). Bad
pattern data inside the engine is reported as False/None instead.
"""

from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class PatternImportError(DomainError):
    """Imported sequence document is malformed or out of range"""
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(
            code="PATTERN_IMPORT_FAILED",
            message=message,
            details={"errors": errors or []}
        )
        self.errors = errors or []
