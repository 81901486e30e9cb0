# -*- coding: utf-8 -*-
"""
Audit Ledger

SHA-256 chain-hashed log of every committed registry mutation. Each
entry hashes the record state it produced and links to the previous
entry, so rewriting any entry breaks verification of every later one.

Entries are keyed by record identifier and outlive the record itself:
the ledger of a deleted record still ends with its ``delete`` entry.

Example:
    >>> ledger = AuditLedger()
    >>> ledger.append(1, "register", actor="alice", timestamp=100,
    ...               data_hash=record.data_hash)
    >>> assert ledger.verify_chain(1)

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class LedgerAction(str, Enum):
    """Mutations recorded in the audit ledger."""

    REGISTER = "register"
    REVISE = "revise"
    TRANSFER_CUSTODY = "transfer_custody"
    GRANT_ACCESS = "grant_access"
    REVOKE_ACCESS = "revoke_access"
    DELETE = "delete"
    AUGMENT_LABELS = "augment_labels"
    MARK_ARCHIVAL = "mark_archival"


class LedgerEntry(BaseModel):
    """A single audit ledger entry.

    Attributes:
        entry_id: Unique entry identifier.
        record_identifier: Record the mutation applied to.
        action: Mutation performed.
        actor: Principal that performed it.
        timestamp: Host timestamp of the call.
        data_hash: SHA-256 of the record state after the mutation.
        chain_hash: SHA-256 linking this entry to the previous one.
        details: Additional context (e.g. successor, accessor).
    """

    entry_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    record_identifier: int
    action: LedgerAction
    actor: str
    timestamp: int
    data_hash: str
    chain_hash: str = ""
    details: Dict[str, Any] = Field(default_factory=dict)

    def hashable_payload(self) -> Dict[str, Any]:
        return {
            "record_identifier": self.record_identifier,
            "action": self.action.value,
            "actor": self.actor,
            "timestamp": self.timestamp,
            "data_hash": self.data_hash,
            "details": self.details,
        }


class AuditLedger:
    """Append-only chain-hashed ledger of registry mutations."""

    _GENESIS_HASH = hashlib.sha256(b"provenance-registry-genesis").hexdigest()

    def __init__(self) -> None:
        self._entries: List[LedgerEntry] = []
        self._last_chain_hash: str = self._GENESIS_HASH
        self._record_index: Dict[int, List[int]] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def append(
        self,
        record_identifier: int,
        action: LedgerAction,
        actor: str,
        timestamp: int,
        data_hash: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Append an entry and return its chain hash."""
        entry = LedgerEntry(
            record_identifier=record_identifier,
            action=LedgerAction(action),
            actor=actor,
            timestamp=timestamp,
            data_hash=data_hash,
            details=details or {},
        )
        entry.chain_hash = self._link(self._last_chain_hash, entry)

        self._record_index.setdefault(record_identifier, []).append(
            len(self._entries),
        )
        self._entries.append(entry)
        self._last_chain_hash = entry.chain_hash

        logger.debug(
            "Ledger entry: %s record=%d actor=%s (%s)",
            entry.action.value, record_identifier, actor, entry.chain_hash[:16],
        )
        return entry.chain_hash

    def get_chain(self, record_identifier: int) -> List[LedgerEntry]:
        """Return the entries for one record in commit order."""
        indices = self._record_index.get(record_identifier, [])
        return [self._entries[i] for i in indices]

    def verify_chain(self, record_identifier: Optional[int] = None) -> bool:
        """Recompute the chain from genesis.

        Args:
            record_identifier: If given, only that record's entries are
                compared; otherwise every entry is.

        Returns:
            True if the stored hashes match the recomputed ones.
        """
        wanted = None
        if record_identifier is not None:
            wanted = set(self._record_index.get(record_identifier, []))

        current = self._GENESIS_HASH
        for idx, entry in enumerate(self._entries):
            expected = self._link(current, entry)
            if (wanted is None or idx in wanted) and entry.chain_hash != expected:
                logger.warning(
                    "Ledger verification failed at entry %s (index %d)",
                    entry.entry_id, idx,
                )
                return False
            current = expected
        return True

    def get_all_entries(self) -> List[LedgerEntry]:
        return list(self._entries)

    def export_json(self) -> str:
        """Export every entry as a JSON array."""
        records = [entry.model_dump(mode="json") for entry in self._entries]
        return json.dumps(records, indent=2, default=str)

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def head(self) -> str:
        """Chain hash of the latest entry (genesis hash when empty)."""
        return self._last_chain_hash

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _link(previous_hash: str, entry: LedgerEntry) -> str:
        serialized = json.dumps(entry.hashable_payload(), sort_keys=True, default=str)
        entry_hash = hashlib.sha256(serialized.encode()).hexdigest()
        return hashlib.sha256(f"{previous_hash}:{entry_hash}".encode()).hexdigest()


__all__ = [
    "LedgerAction",
    "LedgerEntry",
    "AuditLedger",
]
