# -*- coding: utf-8 -*-
"""
Provenance Registry
===================

Records metadata about assets, tracks which principal holds custody of
each record, and grants or revokes read access for other principals.

- Strictly increasing, never-reused record identifiers
- Custodian-only revision, custody transfer, label augmentation and deletion
- Per-record access matrix for read-only analytics and verification
- Administrator diagnostics and security gate
- SHA-256 chain-hashed audit ledger of every committed mutation
- Prometheus metrics
- FastAPI REST API
- Configuration with the PROVENANCE_REGISTRY_ env prefix

Key Components:
    - registry: ProvenanceRegistry operation layer
    - store: RecordStore and IdentifierSequence
    - access: AccessMatrix
    - validator: field validation rules
    - labels: BoundedLabelList
    - audit: AuditLedger
    - config: ProvenanceRegistryConfig
    - metrics: Prometheus metrics
    - setup: ProvenanceRegistryService facade and API router

Example:
    >>> from provenance_registry import ProvenanceRegistry, CallContext
    >>> registry = ProvenanceRegistry()
    >>> record_id = registry.register(
    ...     CallContext(caller="alice", now=1), "dataset.tar", 500, "x", ["a"],
    ... )
"""

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from provenance_registry.config import (
    ProvenanceRegistryConfig,
    get_config,
    set_config,
    reset_config,
)

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from provenance_registry.exceptions import (
    ErrorKind,
    ProvenanceRegistryError,
    MissingRecord,
    DuplicateRegistration,
    InvalidMetadataFormat,
    SizeConstraintViolated,
    MetadataValidationError,
    OwnershipMismatch,
    UnauthorizedOperation,
    AdminPrivilegesRequired,
    AccessDenied,
)

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
from provenance_registry.models import (
    CallContext,
    ProvenanceRecord,
    RecordAnalytics,
    AuthenticityVerification,
    Diagnostics,
)

# ---------------------------------------------------------------------------
# Core engines
# ---------------------------------------------------------------------------
from provenance_registry.access import AccessMatrix
from provenance_registry.audit import AuditLedger, LedgerAction, LedgerEntry
from provenance_registry.labels import ARCHIVAL_LABEL, BoundedLabelList
from provenance_registry.registry import ProvenanceRegistry
from provenance_registry.store import IdentifierSequence, RecordStore

# ---------------------------------------------------------------------------
# Service setup facade
# ---------------------------------------------------------------------------
from provenance_registry.setup import (
    BlockClock,
    ProvenanceRegistryService,
    configure_provenance_registry,
    get_provenance_registry,
    get_router,
)

__all__ = [
    "__version__",
    # Configuration
    "ProvenanceRegistryConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Errors
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
    # Models
    "CallContext",
    "ProvenanceRecord",
    "RecordAnalytics",
    "AuthenticityVerification",
    "Diagnostics",
    # Core engines
    "AccessMatrix",
    "AuditLedger",
    "LedgerAction",
    "LedgerEntry",
    "ARCHIVAL_LABEL",
    "BoundedLabelList",
    "ProvenanceRegistry",
    "IdentifierSequence",
    "RecordStore",
    # Service setup facade
    "BlockClock",
    "ProvenanceRegistryService",
    "configure_provenance_registry",
    "get_provenance_registry",
    "get_router",
]
