# -*- coding: utf-8 -*-
"""Tests for the bounded classification label list."""

import pytest

from provenance_registry.exceptions import MetadataValidationError
from provenance_registry.labels import ARCHIVAL_LABEL, BoundedLabelList


class TestBoundedLabelList:
    """Capacity-checked append and extend."""

    def test_preserves_order(self):
        labels = BoundedLabelList(["b", "a", "c"])
        assert labels.to_list() == ["b", "a", "c"]

    def test_rejects_invalid_initial_list(self):
        with pytest.raises(MetadataValidationError):
            BoundedLabelList([])

    def test_extended_returns_new_list(self):
        labels = BoundedLabelList(["a"])
        merged = labels.extended(["b", "c"])
        assert merged.to_list() == ["a", "b", "c"]
        assert labels.to_list() == ["a"]

    def test_extended_to_capacity(self):
        merged = BoundedLabelList(["a"] * 5).extended(["b"] * 5)
        assert len(merged) == 10

    def test_extended_over_capacity_fails(self):
        labels = BoundedLabelList(["a"] * 5)
        with pytest.raises(MetadataValidationError) as exc_info:
            labels.extended(["b"] * 6)
        assert exc_info.value.context == {"existing": 5, "added": 6}
        assert len(labels) == 5

    def test_extended_requires_valid_extra(self):
        with pytest.raises(MetadataValidationError):
            BoundedLabelList(["a"]).extended([])
        with pytest.raises(MetadataValidationError):
            BoundedLabelList(["a"]).extended(["x" * 33])

    @pytest.mark.parametrize("labels", ["abc", {"a"}])
    def test_rejects_string_and_set(self, labels):
        with pytest.raises(MetadataValidationError):
            BoundedLabelList(labels)
        with pytest.raises(MetadataValidationError):
            BoundedLabelList(["a"]).extended(labels)

    def test_accepts_tuple(self):
        assert BoundedLabelList(("a", "b")).to_list() == ["a", "b"]

    def test_appended(self):
        labels = BoundedLabelList(["a"]).appended(ARCHIVAL_LABEL)
        assert labels.to_list() == ["a", "HISTORICAL-RECORD"]

    def test_appended_when_full_fails(self):
        with pytest.raises(MetadataValidationError):
            BoundedLabelList(["a"] * 10).appended(ARCHIVAL_LABEL)

    def test_equality_with_list(self):
        assert BoundedLabelList(["a", "b"]) == ["a", "b"]
        assert BoundedLabelList(["a"]) == BoundedLabelList(["a"])
