# -*- coding: utf-8 -*-
"""
Record Store and Identifier Sequence

In-memory storage for provenance records keyed by record identifier,
and the strictly increasing counter that hands those identifiers out.

Neither class locks on its own; ``ProvenanceRegistry`` serializes every
operation that touches them.

Example:
    >>> sequence = IdentifierSequence()
    >>> store = RecordStore()
    >>> record_id = sequence.peek_next()
    >>> store.insert(record)
    >>> sequence.advance_to(record_id)

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
from typing import Dict

from provenance_registry.exceptions import DuplicateRegistration, MissingRecord
from provenance_registry.models import ProvenanceRecord

logger = logging.getLogger(__name__)


class IdentifierSequence:
    """Monotonically increasing record identifier counter.

    Starts at 0; the first record receives 1. Deleting a record never
    moves the counter back, so identifiers are never reused.
    """

    def __init__(self) -> None:
        self._current = 0

    @property
    def current(self) -> int:
        """Return the last identifier handed out (0 before any registration)."""
        return self._current

    def peek_next(self) -> int:
        """Return the identifier the next registration will receive."""
        return self._current + 1

    def advance_to(self, value: int) -> None:
        """Move the counter to ``value``.

        Raises:
            ValueError: If ``value`` does not move the counter forward.
        """
        if value <= self._current:
            raise ValueError(
                f"Identifier sequence must increase: {value} <= {self._current}"
            )
        self._current = value


class RecordStore:
    """Mapping of record identifier to ProvenanceRecord."""

    def __init__(self) -> None:
        self._records: Dict[int, ProvenanceRecord] = {}

    def require(self, record_id: int) -> ProvenanceRecord:
        """Return the record or raise MissingRecord."""
        record = self._records.get(record_id)
        if record is None:
            raise MissingRecord(
                f"Record {record_id} not found",
                record_identifier=record_id,
            )
        return record

    def insert(self, record: ProvenanceRecord) -> None:
        """Insert a new record.

        Raises:
            DuplicateRegistration: If the identifier is already stored.
        """
        record_id = record.record_identifier
        if record_id in self._records:
            raise DuplicateRegistration(
                f"Record {record_id} already registered",
                context={"record_identifier": record_id},
            )
        self._records[record_id] = record

    def replace(self, record: ProvenanceRecord) -> None:
        """Overwrite an existing record with an updated copy."""
        self.require(record.record_identifier)
        self._records[record.record_identifier] = record

    def remove(self, record_id: int) -> ProvenanceRecord:
        """Remove and return a record.

        Raises:
            MissingRecord: If the identifier is not stored.
        """
        record = self.require(record_id)
        del self._records[record_id]
        return record

    def __len__(self) -> int:
        return len(self._records)


__all__ = [
    "IdentifierSequence",
    "RecordStore",
]
