# -*- coding: utf-8 -*-
"""
Access Matrix

Per ``(record identifier, principal)`` read-access flags. A missing entry
means "not authorized". Entries are not swept when a record is deleted;
since identifiers are never reused such orphans can never authorize
anything again.

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

GrantKey = Tuple[int, str]


class AccessMatrix:
    """Mapping of ``(record_id, principal)`` to an authorization flag."""

    def __init__(self) -> None:
        self._grants: Dict[GrantKey, bool] = {}

    def grant(self, record_id: int, principal: str) -> None:
        """Insert or overwrite ``(record_id, principal) -> True``."""
        self._grants[(record_id, principal)] = True
        logger.debug("Access granted: record=%d principal=%s", record_id, principal)

    def revoke(self, record_id: int, principal: str) -> bool:
        """Delete the entry if present.

        Returns:
            True if an entry was removed, False if there was none.
        """
        removed = self._grants.pop((record_id, principal), None) is not None
        logger.debug(
            "Access revoked: record=%d principal=%s (present=%s)",
            record_id, principal, removed,
        )
        return removed

    def is_authorized(self, record_id: int, principal: str) -> bool:
        return self._grants.get((record_id, principal), False)

    @property
    def count(self) -> int:
        """Return the number of stored entries, orphans included."""
        return len(self._grants)


__all__ = [
    "AccessMatrix",
]
