# -*- coding: utf-8 -*-
"""Provenance Registry Exception Hierarchy.

Every rejected operation raises one of the exceptions below. A rejected
operation never leaves partial writes behind, so callers can surface the
error kind directly to their own users.

Exception Hierarchy:
    ProvenanceRegistryError (base)
    ├── MissingRecord
    ├── DuplicateRegistration
    ├── InvalidMetadataFormat
    ├── SizeConstraintViolated
    ├── MetadataValidationError
    ├── OwnershipMismatch
    ├── UnauthorizedOperation
    ├── AdminPrivilegesRequired
    └── AccessDenied

All exceptions include:
- kind: ErrorKind member naming the failure
- error_code: Unique error identifier (e.g. "PR_MISSING_RECORD")
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Example:
    >>> from provenance_registry.exceptions import MissingRecord
    >>> raise MissingRecord(
    ...     message="Record 7 not found",
    ...     context={"record_identifier": 7},
    ... )

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Terminal failure kinds of a registry operation."""

    MISSING_RECORD = "MissingRecord"
    DUPLICATE_REGISTRATION = "DuplicateRegistration"
    INVALID_METADATA_FORMAT = "InvalidMetadataFormat"
    SIZE_CONSTRAINT_VIOLATED = "SizeConstraintViolated"
    METADATA_VALIDATION_ERROR = "MetadataValidationError"
    OWNERSHIP_MISMATCH = "OwnershipMismatch"
    UNAUTHORIZED_OPERATION = "UnauthorizedOperation"
    ADMIN_PRIVILEGES_REQUIRED = "AdminPrivilegesRequired"
    ACCESS_DENIED = "AccessDenied"


# ==============================================================================
# Base Exception
# ==============================================================================

class ProvenanceRegistryError(Exception):
    """Base exception for all provenance registry errors.

    Attributes:
        message: Human-readable error message
        kind: ErrorKind of the failure
        error_code: Unique error identifier
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    ERROR_PREFIX = "PR"
    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (derived from the class if omitted)
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def _generate_error_code(self) -> str:
        """Generate an error code like ``PR_OWNERSHIP_MISMATCH``."""
        class_name = self.__class__.__name__
        error_type = re.sub(r"(?<!^)(?=[A-Z])", "_", class_name).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value if self.kind else None,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        return f"[{self.error_code}] - {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}')"
        )


# ==============================================================================
# Lookup
# ==============================================================================

class MissingRecord(ProvenanceRegistryError):
    """Referenced record identifier is not in the record store."""

    kind = ErrorKind.MISSING_RECORD

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        record_identifier: Optional[int] = None,
    ):
        if record_identifier is not None:
            context = context or {}
            context["record_identifier"] = record_identifier
        super().__init__(message, context=context)


class DuplicateRegistration(ProvenanceRegistryError):
    """Identifier collision on registration.

    Cannot occur while the identifier sequence is strictly increasing;
    kept so that callers can match on the full set of kinds.
    """

    kind = ErrorKind.DUPLICATE_REGISTRATION


# ==============================================================================
# Validation
# ==============================================================================

class InvalidMetadataFormat(ProvenanceRegistryError):
    """A text field is outside its length bounds.

    Example:
        >>> raise InvalidMetadataFormat(
        ...     message="asset_designation must be 1-64 characters",
        ...     field="asset_designation",
        ...     context={"length": 0},
        ... )
    """

    kind = ErrorKind.INVALID_METADATA_FORMAT

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        if field:
            context = context or {}
            context["field"] = field
        super().__init__(message, context=context)


class SizeConstraintViolated(ProvenanceRegistryError):
    """A numeric field is outside its bounds."""

    kind = ErrorKind.SIZE_CONSTRAINT_VIOLATED

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        if field:
            context = context or {}
            context["field"] = field
        super().__init__(message, context=context)


class MetadataValidationError(ProvenanceRegistryError):
    """Label list is malformed or exceeds capacity after a merge."""

    kind = ErrorKind.METADATA_VALIDATION_ERROR


# ==============================================================================
# Authorization
# ==============================================================================

class OwnershipMismatch(ProvenanceRegistryError):
    """Caller is not the custodian on a custodian-only operation."""

    kind = ErrorKind.OWNERSHIP_MISMATCH

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        caller: Optional[str] = None,
    ):
        if caller is not None:
            context = context or {}
            context["caller"] = caller
        super().__init__(message, context=context)


class UnauthorizedOperation(ProvenanceRegistryError):
    """Caller has no custodian, grant or administrator standing on a read."""

    kind = ErrorKind.UNAUTHORIZED_OPERATION


class AdminPrivilegesRequired(ProvenanceRegistryError):
    """Caller is not the administrator (or custodian, where allowed)."""

    kind = ErrorKind.ADMIN_PRIVILEGES_REQUIRED


class AccessDenied(ProvenanceRegistryError):
    """Reserved for access-matrix specific denials."""

    kind = ErrorKind.ACCESS_DENIED


__all__ = [
    "ErrorKind",
    "ProvenanceRegistryError",
    "MissingRecord",
    "DuplicateRegistration",
    "InvalidMetadataFormat",
    "SizeConstraintViolated",
    "MetadataValidationError",
    "OwnershipMismatch",
    "UnauthorizedOperation",
    "AdminPrivilegesRequired",
    "AccessDenied",
]
