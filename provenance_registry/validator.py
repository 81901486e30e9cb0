# -*- coding: utf-8 -*-
"""
Metadata Validator

Pure predicates for the provenance record fields, plus ``require_*``
helpers that raise the matching error kind. Every write path (register,
revise, augment, archival marking) goes through this single rule set.

Rules:
    - asset_designation: 1-64 characters
    - binary_footprint: 0 < value < 1,000,000,000
    - descriptive_summary: 1-128 characters
    - classification_labels: 1-10 labels, each 1-32 characters

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

from typing import Any, Sequence

from provenance_registry.exceptions import (
    InvalidMetadataFormat,
    MetadataValidationError,
    SizeConstraintViolated,
)

# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

DESIGNATION_MAX_LENGTH = 64
SUMMARY_MAX_LENGTH = 128
LABEL_MAX_LENGTH = 32
MAX_LABELS = 10
FOOTPRINT_LOWER_BOUND = 0
FOOTPRINT_UPPER_BOUND = 1_000_000_000


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_valid_length(value: Any, max_length: int, min_length: int = 1) -> bool:
    """Return True if ``value`` is a string of ``min_length``..``max_length`` chars."""
    if not isinstance(value, str):
        return False
    return min_length <= len(value) < max_length + 1


def is_within_bounds(value: Any, lower: int, upper: int) -> bool:
    """Return True if ``value`` is an integer strictly between the bounds."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return lower < value < upper


def is_valid_label(label: Any) -> bool:
    """Return True if a single classification label is well formed."""
    return is_valid_length(label, LABEL_MAX_LENGTH)


def is_valid_label_list(labels: Any) -> bool:
    """Return True for a non-empty list of at most 10 well-formed labels."""
    if isinstance(labels, (str, bytes)) or not isinstance(labels, Sequence):
        return False
    if not 0 < len(labels) <= MAX_LABELS:
        return False
    return all(is_valid_label(label) for label in labels)


# ---------------------------------------------------------------------------
# Raising helpers
# ---------------------------------------------------------------------------


def require_designation(value: Any) -> str:
    if not is_valid_length(value, DESIGNATION_MAX_LENGTH):
        raise InvalidMetadataFormat(
            f"asset_designation must be 1-{DESIGNATION_MAX_LENGTH} characters",
            field="asset_designation",
        )
    return value


def require_footprint(value: Any) -> int:
    if not is_within_bounds(value, FOOTPRINT_LOWER_BOUND, FOOTPRINT_UPPER_BOUND):
        raise SizeConstraintViolated(
            f"binary_footprint must be greater than {FOOTPRINT_LOWER_BOUND} "
            f"and less than {FOOTPRINT_UPPER_BOUND}",
            field="binary_footprint",
            context={"value": value},
        )
    return value


def require_summary(value: Any) -> str:
    if not is_valid_length(value, SUMMARY_MAX_LENGTH):
        raise InvalidMetadataFormat(
            f"descriptive_summary must be 1-{SUMMARY_MAX_LENGTH} characters",
            field="descriptive_summary",
        )
    return value


def require_labels(labels: Any) -> list:
    """Validate a label list and return it as a new list.

    Raises:
        MetadataValidationError: If the list is empty, longer than 10, or
            holds a label outside 1-32 characters.
    """
    if not is_valid_label_list(labels):
        raise MetadataValidationError(
            f"classification_labels must hold 1-{MAX_LABELS} labels "
            f"of 1-{LABEL_MAX_LENGTH} characters each",
            context={"count": len(labels) if isinstance(labels, Sequence) else None},
        )
    return list(labels)


def validate_metadata(
    asset_designation: Any,
    binary_footprint: Any,
    descriptive_summary: Any,
    classification_labels: Any,
) -> None:
    """Validate all four mutable record fields in a fixed order.

    Order is designation, footprint, summary, labels; the first failure
    is raised.
    """
    require_designation(asset_designation)
    require_footprint(binary_footprint)
    require_summary(descriptive_summary)
    require_labels(classification_labels)


__all__ = [
    "DESIGNATION_MAX_LENGTH",
    "SUMMARY_MAX_LENGTH",
    "LABEL_MAX_LENGTH",
    "MAX_LABELS",
    "FOOTPRINT_LOWER_BOUND",
    "FOOTPRINT_UPPER_BOUND",
    "is_valid_length",
    "is_within_bounds",
    "is_valid_label",
    "is_valid_label_list",
    "require_designation",
    "require_footprint",
    "require_summary",
    "require_labels",
    "validate_metadata",
]
