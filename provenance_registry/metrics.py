# -*- coding: utf-8 -*-
"""
Prometheus Metrics - Provenance Registry

Metrics:
    1. provenance_registry_operations_total (Counter)
    2. provenance_registry_operation_duration_seconds (Histogram)
    3. provenance_registry_registrations_total (Counter)
    4. provenance_registry_eliminations_total (Counter)
    5. provenance_registry_custody_transfers_total (Counter)
    6. provenance_registry_access_changes_total (Counter)
    7. provenance_registry_rejections_total (Counter)
    8. provenance_registry_records_live (Gauge)
    9. provenance_registry_identifier_sequence (Gauge)

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# 1. Operations count
provenance_registry_operations_total = Counter(
    "provenance_registry_operations_total",
    "Total provenance registry operations performed",
    labelnames=["operation", "result"],
)

# 2. Operation duration
provenance_registry_operation_duration_seconds = Histogram(
    "provenance_registry_operation_duration_seconds",
    "Provenance registry operation duration in seconds",
    labelnames=["operation"],
    buckets=(0.00005, 0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
)

# 3. Registrations count
provenance_registry_registrations_total = Counter(
    "provenance_registry_registrations_total",
    "Total records registered",
)

# 4. Eliminations count
provenance_registry_eliminations_total = Counter(
    "provenance_registry_eliminations_total",
    "Total records permanently deleted",
)

# 5. Custody transfers count
provenance_registry_custody_transfers_total = Counter(
    "provenance_registry_custody_transfers_total",
    "Total custody transfers performed",
)

# 6. Access matrix changes
provenance_registry_access_changes_total = Counter(
    "provenance_registry_access_changes_total",
    "Total access grants and revocations",
    labelnames=["change"],
)

# 7. Rejected operations by error kind
provenance_registry_rejections_total = Counter(
    "provenance_registry_rejections_total",
    "Total rejected operations by error kind",
    labelnames=["operation", "kind"],
)

# 8. Live records gauge
provenance_registry_records_live = Gauge(
    "provenance_registry_records_live",
    "Current number of records in the record store",
)

# 9. Identifier sequence gauge
provenance_registry_identifier_sequence = Gauge(
    "provenance_registry_identifier_sequence",
    "Current value of the record identifier sequence",
)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def record_operation(operation: str, result: str, duration_seconds: float) -> None:
    """Record a registry operation.

    Args:
        operation: Operation name (register, revise, get_analytics, etc.).
        result: "success" or "error".
        duration_seconds: Operation duration in seconds.
    """
    provenance_registry_operations_total.labels(
        operation=operation, result=result,
    ).inc()
    provenance_registry_operation_duration_seconds.labels(
        operation=operation,
    ).observe(duration_seconds)


def record_registration() -> None:
    provenance_registry_registrations_total.inc()


def record_elimination() -> None:
    provenance_registry_eliminations_total.inc()


def record_custody_transfer() -> None:
    provenance_registry_custody_transfers_total.inc()


def record_access_change(change: str) -> None:
    """Record an access matrix change.

    Args:
        change: "grant" or "revoke".
    """
    provenance_registry_access_changes_total.labels(change=change).inc()


def record_rejection(operation: str, kind: str) -> None:
    """Record a rejected operation.

    Args:
        operation: Operation name.
        kind: Error kind value (e.g. "OwnershipMismatch").
    """
    provenance_registry_rejections_total.labels(
        operation=operation, kind=kind,
    ).inc()


def update_records_live(count: int) -> None:
    provenance_registry_records_live.set(count)


def update_identifier_sequence(value: int) -> None:
    provenance_registry_identifier_sequence.set(value)


__all__ = [
    # Metric objects
    "provenance_registry_operations_total",
    "provenance_registry_operation_duration_seconds",
    "provenance_registry_registrations_total",
    "provenance_registry_eliminations_total",
    "provenance_registry_custody_transfers_total",
    "provenance_registry_access_changes_total",
    "provenance_registry_rejections_total",
    "provenance_registry_records_live",
    "provenance_registry_identifier_sequence",
    # Helper functions
    "record_operation",
    "record_registration",
    "record_elimination",
    "record_custody_transfer",
    "record_access_change",
    "record_rejection",
    "update_records_live",
    "update_identifier_sequence",
]
