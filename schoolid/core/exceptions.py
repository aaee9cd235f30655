"""Identifier Error Taxonomy

Every error derives from ValueError so callers that already treat bad input
from a service as ValueError keep working. Each class carries a stable
machine-readable ``code`` used by the API error envelope.
"""

from typing import Any, Dict


class IdentifierError(ValueError):
    """Base class for all identifier generation failures"""

    code = "IDENTIFIER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def details(self) -> Dict[str, Any]:
        """Structured context for the error envelope"""
        return {}


class ConfigurationError(IdentifierError):
    """Tenant scope config is missing or malformed"""

    code = "CONFIGURATION_ERROR"


class FormatError(IdentifierError):
    """A component fails its shape constraint"""

    code = "INVALID_COMPONENTS"


class ParseError(IdentifierError):
    """A string does not match the fixed layout for its kind"""

    code = "INVALID_IDENTIFIER"


class CapacityExceededError(IdentifierError):
    """The next sequence in a scope no longer fits its fixed-width field"""

    code = "CAPACITY_EXCEEDED"

    def __init__(self, message: str, prefix: str = "", capacity: int = 0):
        super().__init__(message)
        self.prefix = prefix
        self.capacity = capacity

    @property
    def details(self) -> Dict[str, Any]:
        return {"prefix": self.prefix, "capacity": self.capacity}


class AllocationExhaustedError(IdentifierError):
    """Random-suffix allocation ran out of attempts"""

    code = "ALLOCATION_EXHAUSTED"

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts

    @property
    def details(self) -> Dict[str, Any]:
        return {"attempts": self.attempts}


class DuplicateIdentifierError(IdentifierError):
    """A scope-determined identifier already exists"""

    code = "DUPLICATE_IDENTIFIER"

    def __init__(self, message: str, identifier: str = ""):
        super().__init__(message)
        self.identifier = identifier

    @property
    def details(self) -> Dict[str, Any]:
        return {"identifier": self.identifier}
