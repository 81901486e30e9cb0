# -*- coding: utf-8 -*-
"""
Bounded classification label list.

Labels are an ordered, fixed-capacity sequence. Appending or merging
past capacity raises instead of truncating, and every operation returns
a new list so a failed merge never touches the original.

Example:
    >>> labels = BoundedLabelList(["public", "audited"])
    >>> merged = labels.extended(["q3"])
    >>> merged.to_list()
    ['public', 'audited', 'q3']
"""

from __future__ import annotations

from typing import Iterator, List, Sequence

from provenance_registry.exceptions import MetadataValidationError
from provenance_registry.validator import (
    LABEL_MAX_LENGTH,
    MAX_LABELS,
    is_valid_label,
    require_labels,
)

ARCHIVAL_LABEL = "HISTORICAL-RECORD"


class BoundedLabelList:
    """Ordered label list with a hard capacity of ``MAX_LABELS``."""

    capacity = MAX_LABELS

    def __init__(self, labels: Sequence[str]) -> None:
        self._labels: List[str] = require_labels(labels)

    def appended(self, label: str) -> BoundedLabelList:
        """Return a copy with ``label`` added at the end.

        Raises:
            MetadataValidationError: If the label is malformed or the list
                is already full.
        """
        if not is_valid_label(label):
            raise MetadataValidationError(
                f"label must be 1-{LABEL_MAX_LENGTH} characters",
                context={"label": label},
            )
        return self._merge([label])

    def extended(self, extra: Sequence[str]) -> BoundedLabelList:
        """Return a copy with ``extra`` concatenated after the current labels.

        ``extra`` must itself be a valid label list; strings and unordered
        collections are rejected rather than iterated.
        """
        return self._merge(require_labels(extra))

    def _merge(self, extra: List[str]) -> BoundedLabelList:
        total = len(self._labels) + len(extra)
        if total > self.capacity:
            raise MetadataValidationError(
                f"label capacity exceeded: {total} > {self.capacity}",
                context={"existing": len(self._labels), "added": len(extra)},
            )
        return BoundedLabelList(self._labels + extra)

    def to_list(self) -> List[str]:
        return list(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BoundedLabelList):
            return self._labels == other._labels
        if isinstance(other, list):
            return self._labels == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"BoundedLabelList({self._labels!r})"


__all__ = [
    "ARCHIVAL_LABEL",
    "BoundedLabelList",
]
