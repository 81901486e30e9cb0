# -*- coding: utf-8 -*-
"""
Provenance Registry Data Models

Pydantic v2 data models for the provenance registry.

Models:
    - Invocation: CallContext
    - Core: ProvenanceRecord
    - Results: RecordAnalytics, AuthenticityVerification, Diagnostics
    - API bodies: RegisterRequest, ReviseRequest, TransferCustodyRequest,
                  GrantAccessRequest, AugmentLabelsRequest
    - API responses: RegisterResponse, LabelsResponse, OperationResponse

Field bounds are enforced by ``provenance_registry.validator`` before a
model is built, so that each violation maps to its own error kind.

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import hashlib
import json
from typing import List

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Invocation context
# =============================================================================


class CallContext(BaseModel):
    """Environment-supplied inputs of a single operation.

    ``caller`` is the principal authenticated by the host and ``now`` the
    host's opaque, non-decreasing timestamp (e.g. a block height).
    """

    model_config = ConfigDict(frozen=True)

    caller: str = Field(..., description="Authenticated invoking principal")
    now: int = Field(..., ge=0, description="Host timestamp for this call")


# =============================================================================
# Core record
# =============================================================================


class ProvenanceRecord(BaseModel):
    """Metadata held for one registered asset.

    ``record_identifier`` and ``genesis_timestamp`` never change after
    registration; ``custodian`` changes only on custody transfer.
    """

    record_identifier: int = Field(..., gt=0, description="Never-reused record ID")
    asset_designation: str = Field(..., description="Asset name (1-64 chars)")
    custodian: str = Field(..., description="Principal currently holding custody")
    binary_footprint: int = Field(..., description="Declared asset size in bytes")
    genesis_timestamp: int = Field(..., ge=0, description="Timestamp at registration")
    descriptive_summary: str = Field(..., description="Summary (1-128 chars)")
    classification_labels: List[str] = Field(
        ..., description="Ordered labels (1-10, each 1-32 chars)",
    )

    @property
    def data_hash(self) -> str:
        """SHA-256 hash of the canonical JSON form of the record."""
        serialized = json.dumps(self.model_dump(mode="json"), sort_keys=True)
        return hashlib.sha256(serialized.encode()).hexdigest()


# =============================================================================
# Read results
# =============================================================================


class RecordAnalytics(BaseModel):
    """Derived figures for a record."""

    age: int = Field(..., description="now - genesis_timestamp")
    footprint: int = Field(..., description="Declared size in bytes")
    label_count: int = Field(..., description="Number of classification labels")


class AuthenticityVerification(BaseModel):
    """Outcome of checking a claimed custodian against the record.

    A mismatch is a normal result, not an error.
    """

    matches: bool = Field(..., description="Claimed custodian is the custodian")
    checked_at: int = Field(..., description="Timestamp of the check")
    age: int = Field(..., description="now - genesis_timestamp")
    matches_dup: bool = Field(..., description="Duplicate of ``matches``")


class Diagnostics(BaseModel):
    """Administrator view of registry health."""

    total_records: int = Field(
        ..., description="Current identifier sequence (upper bound, not live count)",
    )
    healthy: bool = Field(default=True, description="Registry health flag")
    timestamp: int = Field(..., description="Timestamp of the diagnostic call")


# =============================================================================
# API request bodies
# =============================================================================


class RegisterRequest(BaseModel):
    """Body of ``POST /records``."""

    asset_designation: str
    binary_footprint: int
    descriptive_summary: str
    classification_labels: List[str]


class ReviseRequest(RegisterRequest):
    """Body of ``PUT /records/{id}``; same fields as registration."""


class TransferCustodyRequest(BaseModel):
    """Body of ``POST /records/{id}/custody``."""

    successor: str


class GrantAccessRequest(BaseModel):
    """Body of ``POST /records/{id}/grants``."""

    accessor: str


class AugmentLabelsRequest(BaseModel):
    """Body of ``POST /records/{id}/labels``."""

    labels: List[str]


# =============================================================================
# API responses
# =============================================================================


class RegisterResponse(BaseModel):
    record_identifier: int


class LabelsResponse(BaseModel):
    record_identifier: int
    classification_labels: List[str]


class OperationResponse(BaseModel):
    record_identifier: int
    status: str = "ok"


__all__ = [
    "CallContext",
    "ProvenanceRecord",
    "RecordAnalytics",
    "AuthenticityVerification",
    "Diagnostics",
    "RegisterRequest",
    "ReviseRequest",
    "TransferCustodyRequest",
    "GrantAccessRequest",
    "AugmentLabelsRequest",
    "RegisterResponse",
    "LabelsResponse",
    "OperationResponse",
]
