# -*- coding: utf-8 -*-
"""
Tests for the provenance registry REST API.

Drives the FastAPI router through TestClient with the caller supplied in
the X-Principal header and a controllable block clock.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from provenance_registry.config import ProvenanceRegistryConfig
from provenance_registry.setup import (
    BlockClock,
    configure_provenance_registry,
    get_provenance_registry,
)

PREFIX = "/api/v1/provenance"

RECORD_BODY = {
    "asset_designation": "sensor-archive.tar",
    "binary_footprint": 500,
    "descriptive_summary": "x",
    "classification_labels": ["a"],
}


class _Ticker:
    """Manually advanced timestamp source."""

    def __init__(self, value=100):
        self.value = value

    def __call__(self):
        return self.value


@pytest.fixture
def ticker():
    return _Ticker()


@pytest.fixture
def app(ticker):
    application = FastAPI()
    configure_provenance_registry(
        application,
        config=ProvenanceRegistryConfig(administrator="admin"),
        clock=BlockClock(source=ticker),
    )
    return application


@pytest.fixture
def client(app):
    """Test client fixture"""
    return TestClient(app)


def _as(principal):
    return {"X-Principal": principal}


@pytest.fixture
def record_id(client):
    response = client.post(f"{PREFIX}/records", json=RECORD_BODY, headers=_as("alice"))
    assert response.status_code == 201
    return response.json()["record_identifier"]


class TestServiceSetup:
    """App wiring."""

    def test_service_stored_on_app(self, app):
        service = get_provenance_registry(app)
        assert service.registry.administrator == "admin"
        assert service.get_metrics()["started"] is True

    def test_unconfigured_app(self):
        with pytest.raises(RuntimeError):
            get_provenance_registry(FastAPI())

    def test_missing_principal_header(self, client):
        response = client.post(f"{PREFIX}/records", json=RECORD_BODY)
        assert response.status_code == 401


class TestBlockClock:
    """Non-decreasing timestamps."""

    def test_never_goes_backwards(self):
        ticker = _Ticker(50)
        clock = BlockClock(source=ticker)
        assert clock.now() == 50
        ticker.value = 40
        assert clock.now() == 50
        ticker.value = 60
        assert clock.now() == 60


class TestRecordEndpoints:
    """Lifecycle over HTTP."""

    def test_register_and_read(self, client, record_id):
        assert record_id == 1
        response = client.get(f"{PREFIX}/records/{record_id}", headers=_as("alice"))

        assert response.status_code == 200
        body = response.json()
        assert body["custodian"] == "alice"
        assert body["genesis_timestamp"] == 100
        assert body["classification_labels"] == ["a"]

    def test_register_invalid_footprint(self, client):
        body = dict(RECORD_BODY, binary_footprint=2_000_000_000)
        response = client.post(f"{PREFIX}/records", json=body, headers=_as("alice"))

        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "SizeConstraintViolated"

    def test_revise(self, client, record_id):
        body = dict(RECORD_BODY, asset_designation="renamed")
        response = client.put(
            f"{PREFIX}/records/{record_id}", json=body, headers=_as("alice"),
        )
        assert response.status_code == 200
        assert response.json() == {"record_identifier": record_id, "status": "ok"}

    def test_revise_by_stranger(self, client, record_id):
        response = client.put(
            f"{PREFIX}/records/{record_id}", json=RECORD_BODY, headers=_as("mallory"),
        )
        assert response.status_code == 403
        assert response.json()["detail"]["kind"] == "OwnershipMismatch"

    def test_delete_then_missing(self, client, record_id):
        response = client.delete(f"{PREFIX}/records/{record_id}", headers=_as("alice"))
        assert response.status_code == 200

        response = client.get(
            f"{PREFIX}/records/{record_id}/analytics", headers=_as("alice"),
        )
        assert response.status_code == 404
        assert response.json()["detail"]["kind"] == "MissingRecord"

    def test_transfer_custody(self, client, record_id):
        response = client.post(
            f"{PREFIX}/records/{record_id}/custody",
            json={"successor": "bob"},
            headers=_as("alice"),
        )
        assert response.status_code == 200

        response = client.get(
            f"{PREFIX}/records/{record_id}/verify",
            params={"claimed_custodian": "bob"},
            headers=_as("bob"),
        )
        assert response.json()["matches"] is True

    def test_augment_labels_and_archival(self, client, record_id):
        response = client.post(
            f"{PREFIX}/records/{record_id}/labels",
            json={"labels": ["b"]},
            headers=_as("alice"),
        )
        assert response.json()["classification_labels"] == ["a", "b"]

        response = client.post(
            f"{PREFIX}/records/{record_id}/archival", headers=_as("alice"),
        )
        assert response.status_code == 200

        record = client.get(f"{PREFIX}/records/{record_id}", headers=_as("alice")).json()
        assert record["classification_labels"] == ["a", "b", "HISTORICAL-RECORD"]

    def test_augment_over_capacity(self, client, record_id):
        response = client.post(
            f"{PREFIX}/records/{record_id}/labels",
            json={"labels": ["x"] * 10},
            headers=_as("alice"),
        )
        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "MetadataValidationError"


class TestAccessEndpoints:
    """Grants, analytics and administrator routes."""

    def test_grant_then_analytics(self, client, ticker, record_id):
        url = f"{PREFIX}/records/{record_id}/analytics"
        assert client.get(url, headers=_as("bob")).status_code == 403

        response = client.post(
            f"{PREFIX}/records/{record_id}/grants",
            json={"accessor": "bob"},
            headers=_as("alice"),
        )
        assert response.status_code == 200

        ticker.value = 130
        response = client.get(url, headers=_as("bob"))
        assert response.status_code == 200
        assert response.json() == {"age": 30, "footprint": 500, "label_count": 1}

    def test_revoke(self, client, record_id):
        client.post(
            f"{PREFIX}/records/{record_id}/grants",
            json={"accessor": "bob"},
            headers=_as("alice"),
        )
        response = client.delete(
            f"{PREFIX}/records/{record_id}/grants/bob", headers=_as("alice"),
        )
        assert response.status_code == 200
        response = client.get(
            f"{PREFIX}/records/{record_id}/analytics", headers=_as("bob"),
        )
        assert response.status_code == 403

    def test_self_revoke(self, client, record_id):
        response = client.delete(
            f"{PREFIX}/records/{record_id}/grants/alice", headers=_as("alice"),
        )
        assert response.status_code == 403
        assert response.json()["detail"]["kind"] == "AdminPrivilegesRequired"

    def test_diagnostics(self, client, record_id):
        assert client.get(f"{PREFIX}/diagnostics", headers=_as("alice")).status_code == 403

        response = client.get(f"{PREFIX}/diagnostics", headers=_as("admin"))
        assert response.status_code == 200
        assert response.json() == {"total_records": 1, "healthy": True, "timestamp": 100}

    def test_security_protocol(self, client, record_id):
        url = f"{PREFIX}/records/{record_id}/security"
        assert client.post(url, headers=_as("admin")).status_code == 200
        assert client.post(url, headers=_as("alice")).status_code == 200
        assert client.post(url, headers=_as("bob")).status_code == 403
