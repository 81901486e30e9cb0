# -*- coding: utf-8 -*-
"""
Provenance Registry - Operation Layer

Thread-safe in-memory provenance registry. Owns the record store, the
access matrix and the identifier sequence, and exposes every state
transition as a method taking the caller's ``CallContext``.

Every operation runs under a single re-entrant lock. Validation and
authorization complete before the first write, so a rejected operation
raises a ``ProvenanceRegistryError`` subclass and leaves state untouched.

Authorization:
    - Custodian only: revise, transfer_custody, grant_access,
      revoke_access, delete, augment_labels, mark_archival
    - Custodian, grant holder or administrator: get_record,
      get_analytics, verify_authenticity
    - Administrator only: diagnostics
    - Administrator or custodian: security_protocol

Example:
    >>> from provenance_registry import ProvenanceRegistry, CallContext
    >>> registry = ProvenanceRegistry()
    >>> ctx = CallContext(caller="alice", now=100)
    >>> record_id = registry.register(ctx, "dataset.tar", 500, "x", ["a"])
    >>> registry.get_analytics(CallContext(caller="alice", now=150), record_id).age
    50

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from provenance_registry.access import AccessMatrix
from provenance_registry.audit import AuditLedger, LedgerAction
from provenance_registry.config import ProvenanceRegistryConfig, get_config
from provenance_registry.exceptions import (
    AdminPrivilegesRequired,
    OwnershipMismatch,
    ProvenanceRegistryError,
    UnauthorizedOperation,
)
from provenance_registry.labels import ARCHIVAL_LABEL, BoundedLabelList
from provenance_registry.metrics import (
    record_access_change,
    record_custody_transfer,
    record_elimination,
    record_operation,
    record_registration,
    record_rejection,
    update_identifier_sequence,
    update_records_live,
)
from provenance_registry.models import (
    AuthenticityVerification,
    CallContext,
    Diagnostics,
    ProvenanceRecord,
    RecordAnalytics,
)
from provenance_registry.store import IdentifierSequence, RecordStore
from provenance_registry.validator import validate_metadata

logger = logging.getLogger(__name__)


class ProvenanceRegistry:
    """Record store, access matrix and identifier sequence behind one lock.

    Attributes:
        config: Registry configuration.
        administrator: Principal with diagnostic and security-gate standing.
        ledger: Audit ledger of committed mutations.
    """

    def __init__(
        self,
        config: Optional[ProvenanceRegistryConfig] = None,
        administrator: Optional[str] = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            config: Optional config. Uses global singleton if None.
            administrator: Overrides ``config.administrator`` if given.
        """
        self.config = config or get_config()
        self.administrator = administrator or self.config.administrator

        self._records = RecordStore()
        self._grants = AccessMatrix()
        self._sequence = IdentifierSequence()
        self.ledger = AuditLedger()

        self._lock = threading.RLock()
        self._operation_counts: Dict[str, int] = defaultdict(int)
        self._rejection_counts: Dict[str, int] = defaultdict(int)

        logger.info(
            "ProvenanceRegistry initialized (administrator=%s, audit=%s)",
            self.administrator, self.config.enable_audit,
        )

    # ------------------------------------------------------------------
    # Record lifecycle
    # ------------------------------------------------------------------

    def register(
        self,
        ctx: CallContext,
        asset_designation: str,
        binary_footprint: int,
        descriptive_summary: str,
        classification_labels: Sequence[str],
    ) -> int:
        """Register a new asset with the caller as custodian.

        Returns:
            The new record identifier (previous sequence value + 1).

        Raises:
            InvalidMetadataFormat: Designation or summary length out of bounds.
            SizeConstraintViolated: Footprint out of bounds.
            MetadataValidationError: Malformed label list.
        """
        with self._operation("register", ctx):
            validate_metadata(
                asset_designation,
                binary_footprint,
                descriptive_summary,
                classification_labels,
            )
            labels = BoundedLabelList(classification_labels)

            record_id = self._sequence.peek_next()
            record = ProvenanceRecord(
                record_identifier=record_id,
                asset_designation=asset_designation,
                custodian=ctx.caller,
                binary_footprint=binary_footprint,
                genesis_timestamp=ctx.now,
                descriptive_summary=descriptive_summary,
                classification_labels=labels.to_list(),
            )
            self._records.insert(record)
            self._grants.grant(record_id, ctx.caller)
            self._sequence.advance_to(record_id)

            self._audit(ctx, record, LedgerAction.REGISTER)
            record_registration()
            logger.info(
                "Registered record %d for custodian %s (hash=%s)",
                record_id, ctx.caller, record.data_hash[:16],
            )
            return record_id

    def revise(
        self,
        ctx: CallContext,
        record_id: int,
        asset_designation: str,
        binary_footprint: int,
        descriptive_summary: str,
        classification_labels: Sequence[str],
    ) -> None:
        """Overwrite the four mutable fields of a record.

        ``custodian`` and ``genesis_timestamp`` are left untouched.

        Raises:
            MissingRecord: Record not found.
            OwnershipMismatch: Caller is not the custodian.
            InvalidMetadataFormat, SizeConstraintViolated,
            MetadataValidationError: Field validation failed.
        """
        with self._operation("revise", ctx):
            record = self._records.require(record_id)
            self._require_custodian(record, ctx)
            validate_metadata(
                asset_designation,
                binary_footprint,
                descriptive_summary,
                classification_labels,
            )

            updated = record.model_copy(update={
                "asset_designation": asset_designation,
                "binary_footprint": binary_footprint,
                "descriptive_summary": descriptive_summary,
                "classification_labels": BoundedLabelList(
                    classification_labels,
                ).to_list(),
            })
            self._records.replace(updated)

            self._audit(ctx, updated, LedgerAction.REVISE)
            logger.info("Revised record %d", record_id)

    def transfer_custody(
        self, ctx: CallContext, record_id: int, successor: str,
    ) -> None:
        """Hand custody of a record to ``successor``.

        The successor is not validated and may equal the caller.
        """
        with self._operation("transfer_custody", ctx):
            record = self._records.require(record_id)
            self._require_custodian(record, ctx)

            updated = record.model_copy(update={"custodian": successor})
            self._records.replace(updated)

            self._audit(
                ctx, updated, LedgerAction.TRANSFER_CUSTODY,
                {"previous_custodian": record.custodian, "successor": successor},
            )
            record_custody_transfer()
            logger.info(
                "Transferred custody of record %d: %s -> %s",
                record_id, record.custodian, successor,
            )

    def delete(self, ctx: CallContext, record_id: int) -> None:
        """Permanently remove a record.

        Access grants for the record are left in place; the identifier is
        never handed out again so they can no longer authorize anything.
        """
        with self._operation("delete", ctx):
            record = self._records.require(record_id)
            self._require_custodian(record, ctx)

            self._records.remove(record_id)

            self._audit(ctx, record, LedgerAction.DELETE)
            record_elimination()
            logger.info("Deleted record %d", record_id)

    # ------------------------------------------------------------------
    # Access matrix
    # ------------------------------------------------------------------

    def grant_access(self, ctx: CallContext, record_id: int, accessor: str) -> None:
        """Give ``accessor`` read access to a record (custodian only)."""
        with self._operation("grant_access", ctx):
            record = self._records.require(record_id)
            self._require_custodian(record, ctx)

            self._grants.grant(record_id, accessor)

            self._audit(
                ctx, record, LedgerAction.GRANT_ACCESS, {"accessor": accessor},
            )
            record_access_change("grant")
            logger.info("Granted %s access to record %d", accessor, record_id)

    def revoke_access(self, ctx: CallContext, record_id: int, accessor: str) -> None:
        """Remove ``accessor``'s read access to a record.

        Revoking an absent grant succeeds. A custodian can never revoke
        their own grant.

        Raises:
            AdminPrivilegesRequired: ``accessor`` is the caller (checked first).
            MissingRecord: Record not found.
            OwnershipMismatch: Caller is not the custodian.
        """
        with self._operation("revoke_access", ctx):
            if accessor == ctx.caller:
                raise AdminPrivilegesRequired(
                    "A caller cannot revoke their own access",
                    context={"record_identifier": record_id, "accessor": accessor},
                )
            record = self._records.require(record_id)
            self._require_custodian(record, ctx)

            removed = self._grants.revoke(record_id, accessor)

            self._audit(
                ctx, record, LedgerAction.REVOKE_ACCESS,
                {"accessor": accessor, "removed": removed},
            )
            record_access_change("revoke")
            logger.info(
                "Revoked %s access to record %d (present=%s)",
                accessor, record_id, removed,
            )

    def has_access(self, record_id: int, principal: str) -> bool:
        """Return the raw access matrix flag for ``(record_id, principal)``."""
        with self._lock:
            return self._grants.is_authorized(record_id, principal)

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def augment_labels(
        self, ctx: CallContext, record_id: int, extra_labels: Sequence[str],
    ) -> List[str]:
        """Append ``extra_labels`` to a record's labels.

        Returns:
            The merged label list.

        Raises:
            MetadataValidationError: ``extra_labels`` is malformed or the
                merged list would hold more than 10 labels.
        """
        with self._operation("augment_labels", ctx):
            record = self._records.require(record_id)
            self._require_custodian(record, ctx)

            merged = BoundedLabelList(record.classification_labels).extended(
                extra_labels,
            )
            updated = record.model_copy(
                update={"classification_labels": merged.to_list()},
            )
            self._records.replace(updated)

            self._audit(
                ctx, updated, LedgerAction.AUGMENT_LABELS,
                {"added": len(merged) - len(record.classification_labels)},
            )
            logger.info(
                "Augmented labels of record %d (%d total)", record_id, len(merged),
            )
            return merged.to_list()

    def mark_archival(self, ctx: CallContext, record_id: int) -> None:
        """Append the ``HISTORICAL-RECORD`` label to a record."""
        with self._operation("mark_archival", ctx):
            record = self._records.require(record_id)
            self._require_custodian(record, ctx)

            labels = BoundedLabelList(record.classification_labels).appended(
                ARCHIVAL_LABEL,
            )
            updated = record.model_copy(
                update={"classification_labels": labels.to_list()},
            )
            self._records.replace(updated)

            self._audit(ctx, updated, LedgerAction.MARK_ARCHIVAL)
            logger.info("Marked record %d as archival", record_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_record(self, ctx: CallContext, record_id: int) -> ProvenanceRecord:
        """Return a copy of a record for any authorized reader."""
        with self._operation("get_record", ctx):
            record = self._records.require(record_id)
            self._require_reader(record, ctx)
            logger.debug("Record %d read by %s", record_id, ctx.caller)
            return record.model_copy(deep=True)

    def get_analytics(self, ctx: CallContext, record_id: int) -> RecordAnalytics:
        """Return age, footprint and label count of a record.

        Raises:
            MissingRecord: Record not found.
            UnauthorizedOperation: Caller is not custodian, grant holder
                or administrator.
        """
        with self._operation("get_analytics", ctx):
            record = self._records.require(record_id)
            self._require_reader(record, ctx)
            logger.debug("Analytics of record %d read by %s", record_id, ctx.caller)
            return RecordAnalytics(
                age=self._age(record, ctx),
                footprint=record.binary_footprint,
                label_count=len(record.classification_labels),
            )

    def verify_authenticity(
        self, ctx: CallContext, record_id: int, claimed_custodian: str,
    ) -> AuthenticityVerification:
        """Check ``claimed_custodian`` against the record's custodian.

        A mismatch is returned as ``matches=False``, never raised.
        """
        with self._operation("verify_authenticity", ctx):
            record = self._records.require(record_id)
            self._require_reader(record, ctx)
            matches = claimed_custodian == record.custodian
            logger.debug(
                "Authenticity check on record %d by %s: matches=%s",
                record_id, ctx.caller, matches,
            )
            return AuthenticityVerification(
                matches=matches,
                checked_at=ctx.now,
                age=self._age(record, ctx),
                matches_dup=matches,
            )

    def diagnostics(self, ctx: CallContext) -> Diagnostics:
        """Administrator-only health summary.

        ``total_records`` is the identifier sequence value, an upper bound
        on records ever created rather than the live count.
        """
        with self._operation("diagnostics", ctx):
            if ctx.caller != self.administrator:
                raise AdminPrivilegesRequired(
                    "Diagnostics require the administrator",
                    context={"caller": ctx.caller},
                )
            healthy = not self.config.enable_audit or self.ledger.verify_chain()
            return Diagnostics(
                total_records=self._sequence.current,
                healthy=healthy,
                timestamp=ctx.now,
            )

    def security_protocol(self, ctx: CallContext, record_id: int) -> None:
        """Administrator-or-custodian gate on a record; no effect beyond the check."""
        with self._operation("security_protocol", ctx):
            record = self._records.require(record_id)
            if ctx.caller not in (self.administrator, record.custodian):
                raise AdminPrivilegesRequired(
                    "Security protocol requires the administrator or custodian",
                    context={"record_identifier": record_id, "caller": ctx.caller},
                )
            logger.info(
                "Security protocol passed for record %d by %s", record_id, ctx.caller,
            )

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    def can_read(self, record: ProvenanceRecord, caller: str) -> bool:
        """Return True if ``caller`` is custodian, grant holder or administrator."""
        return (
            caller == record.custodian
            or self._grants.is_authorized(record.record_identifier, caller)
            or caller == self.administrator
        )

    def _require_reader(self, record: ProvenanceRecord, ctx: CallContext) -> None:
        if not self.can_read(record, ctx.caller):
            raise UnauthorizedOperation(
                f"{ctx.caller} may not read record {record.record_identifier}",
                context={
                    "record_identifier": record.record_identifier,
                    "caller": ctx.caller,
                },
            )

    @staticmethod
    def _require_custodian(record: ProvenanceRecord, ctx: CallContext) -> None:
        if ctx.caller != record.custodian:
            raise OwnershipMismatch(
                f"Only the custodian may modify record {record.record_identifier}",
                caller=ctx.caller,
                context={"record_identifier": record.record_identifier},
            )

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    @property
    def sequence_value(self) -> int:
        """Return the current identifier sequence value."""
        with self._lock:
            return self._sequence.current

    @property
    def count(self) -> int:
        """Return the number of live records."""
        with self._lock:
            return len(self._records)

    def get_statistics(self) -> Dict[str, Any]:
        """Get registry statistics summary."""
        with self._lock:
            return {
                "live_records": len(self._records),
                "identifier_sequence": self._sequence.current,
                "grant_entries": self._grants.count,
                "ledger_entries": self.ledger.entry_count,
                "operations": dict(self._operation_counts),
                "rejections": dict(self._rejection_counts),
            }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _operation(self, name: str, ctx: CallContext) -> Iterator[None]:
        """Serialize one operation and record its outcome."""
        with self._lock:
            start = time.perf_counter()
            try:
                yield
            except ProvenanceRegistryError as exc:
                self._rejection_counts[exc.kind.value] += 1
                record_operation(name, "error", time.perf_counter() - start)
                record_rejection(name, exc.kind.value)
                logger.warning(
                    "%s rejected for caller %s: %s", name, ctx.caller, exc,
                )
                raise
            self._operation_counts[name] += 1
            record_operation(name, "success", time.perf_counter() - start)
            update_records_live(len(self._records))
            update_identifier_sequence(self._sequence.current)

    def _audit(
        self,
        ctx: CallContext,
        record: ProvenanceRecord,
        action: LedgerAction,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not self.config.enable_audit:
            return
        self.ledger.append(
            record.record_identifier,
            action,
            actor=ctx.caller,
            timestamp=ctx.now,
            data_hash=record.data_hash,
            details=details,
        )

    @staticmethod
    def _age(record: ProvenanceRecord, ctx: CallContext) -> int:
        return max(0, ctx.now - record.genesis_timestamp)


__all__ = [
    "ProvenanceRegistry",
]
