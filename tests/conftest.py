# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

import pytest

from provenance_registry.config import ProvenanceRegistryConfig, reset_config
from provenance_registry.models import CallContext
from provenance_registry.registry import ProvenanceRegistry

ADMIN = "admin"


@pytest.fixture(autouse=True)
def _reset_config():
    """Keep the config singleton from leaking between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config():
    """Registry config with a fixed administrator and auditing on."""
    return ProvenanceRegistryConfig(administrator=ADMIN, enable_audit=True)


@pytest.fixture
def registry(config):
    """Fresh, empty registry."""
    return ProvenanceRegistry(config=config)


@pytest.fixture
def ctx():
    """Factory for call contexts: ``ctx("alice", now=10)``."""
    def _make(caller: str, now: int = 100) -> CallContext:
        return CallContext(caller=caller, now=now)
    return _make


@pytest.fixture
def sample_metadata():
    """Valid registration arguments."""
    return {
        "asset_designation": "sensor-archive.tar",
        "binary_footprint": 500,
        "descriptive_summary": "x",
        "classification_labels": ["a"],
    }


@pytest.fixture
def registered(registry, ctx, sample_metadata):
    """Registry holding one record (id 1) in custody of alice at now=100."""
    record_id = registry.register(ctx("alice", now=100), **sample_metadata)
    return registry, record_id
