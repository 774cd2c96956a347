"""End-to-end tests through the HTTP layer."""
import logging

from medledger.core.config import settings


def _as(caller_id):
    return {settings.CALLER_HEADER: caller_id}


def _register_pair(client, patient="P", provider="Q"):
    client.post("/api/v1/patients/", json={"history": "h", "genetic_data": "d"}, headers=_as(patient))
    client.post("/api/v1/providers/", json={"specialty": "Cardio", "license_number": "L1"}, headers=_as(provider))
    client.post("/api/v1/patients/me/providers", json={"provider_id": provider}, headers=_as(patient))


def _prescription_body(patient="P", **overrides):
    body = {
        "patient_id": patient,
        "medication_name": "Aspirin",
        "instructions": "1/day",
        "valid_from": 100,
        "valid_until": 200,
    }
    body.update(overrides)
    return body


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


class TestPatientEndpoints:
    def test_register_and_fetch(self, client):
        resp = client.post("/api/v1/patients/", json={"history": "h", "genetic_data": "d"}, headers=_as("P"))
        assert resp.status_code == 201
        assert resp.json()["authorized_providers"] == []

        resp = client.get("/api/v1/patients/P")
        assert resp.status_code == 200
        assert resp.json()["patient_id"] == "P"

    def test_missing_caller_header(self, client):
        resp = client.post("/api/v1/patients/", json={"history": "h", "genetic_data": "d"})
        assert resp.status_code == 401

    def test_malformed_caller_header(self, client):
        resp = client.post(
            "/api/v1/patients/", json={"history": "h", "genetic_data": "d"}, headers=_as("bad id!")
        )
        assert resp.status_code == 401

    def test_duplicate_registration(self, client):
        body = {"history": "h", "genetic_data": "d"}
        client.post("/api/v1/patients/", json=body, headers=_as("P"))
        resp = client.post("/api/v1/patients/", json=body, headers=_as("P"))
        assert resp.status_code == 409
        assert resp.json()["error"] == "DuplicateRecord"

    def test_invalid_input(self, client):
        resp = client.post("/api/v1/patients/", json={"history": "", "genetic_data": "d"}, headers=_as("P"))
        assert resp.status_code == 422
        assert resp.json()["error"] == "InvalidInput"

    def test_unknown_patient_is_404(self, client):
        resp = client.get("/api/v1/patients/ghost")
        assert resp.status_code == 404
        assert resp.json()["error"] == "RecordNotFound"

    def test_authorize_without_record(self, client):
        resp = client.post("/api/v1/patients/me/providers", json={"provider_id": "Q"}, headers=_as("P"))
        assert resp.status_code == 404
        assert resp.json()["error"] == "RecordNotFound"

    def test_authorization_check(self, client):
        _register_pair(client)
        assert client.get("/api/v1/patients/P/authorized/Q").json()["authorized"] is True
        assert client.get("/api/v1/patients/P/authorized/Z").json()["authorized"] is False
        assert client.get("/api/v1/patients/ghost/authorized/Q").json()["authorized"] is False

    def test_provider_limit(self, client):
        client.post("/api/v1/patients/", json={"history": "h", "genetic_data": "d"}, headers=_as("P"))
        for i in range(5):
            resp = client.post("/api/v1/patients/me/providers", json={"provider_id": f"dr-{i}"}, headers=_as("P"))
            assert resp.status_code == 200
        resp = client.post("/api/v1/patients/me/providers", json={"provider_id": "dr-5"}, headers=_as("P"))
        assert resp.status_code == 409
        assert resp.json()["error"] == "MaxProvidersReached"


    def test_malformed_provider_id(self, client):
        client.post("/api/v1/patients/", json={"history": "h", "genetic_data": "d"}, headers=_as("P"))
        resp = client.post("/api/v1/patients/me/providers", json={"provider_id": ""}, headers=_as("P"))
        assert resp.status_code == 422
        assert resp.json()["error"] == "InvalidInput"


class TestProviderEndpoints:
    def test_register_fetch_and_verify(self, client):
        resp = client.post(
            "/api/v1/providers/", json={"specialty": "Cardio", "license_number": "L1"}, headers=_as("Q")
        )
        assert resp.status_code == 201
        assert resp.json()["license_status"] is True
        assert client.get("/api/v1/providers/Q").json()["specialty"] == "Cardio"
        assert client.get("/api/v1/providers/Q/verify").json()["verified"] is True

    def test_unknown_provider(self, client):
        resp = client.get("/api/v1/providers/ghost")
        assert resp.status_code == 404
        assert resp.json()["error"] == "ProviderNotFound"
        resp = client.get("/api/v1/providers/ghost/verify")
        assert resp.status_code == 200
        assert resp.json()["verified"] is False

    def test_duplicate_provider(self, client):
        body = {"specialty": "Cardio", "license_number": "L1"}
        client.post("/api/v1/providers/", json=body, headers=_as("Q"))
        resp = client.post("/api/v1/providers/", json=body, headers=_as("Q"))
        assert resp.status_code == 409
        assert resp.json()["error"] == "DuplicateProvider"


class TestPrescriptionEndpoints:
    def test_example_scenario(self, client):
        _register_pair(client)

        resp = client.post("/api/v1/prescriptions/", json=_prescription_body(), headers=_as("Q"))
        assert resp.status_code == 201
        assert resp.json() == {"id": 0}

        assert client.get("/api/v1/prescriptions/0").json()["is_active"] is True
        assert client.get("/api/v1/prescriptions/active", headers=_as("P")).json() == [0]

        resp = client.post("/api/v1/prescriptions/0/deactivate", headers=_as("Q"))
        assert resp.status_code == 200
        assert resp.json()["is_active"] is False
        assert client.get("/api/v1/prescriptions/active", headers=_as("P")).json() == []

    def test_unauthorized_prescriber(self, client):
        _register_pair(client)
        resp = client.post("/api/v1/prescriptions/", json=_prescription_body(), headers=_as("Z"))
        assert resp.status_code == 403
        assert resp.json()["error"] == "Unauthorized"

    def test_invalid_window(self, client):
        _register_pair(client)
        resp = client.post(
            "/api/v1/prescriptions/", json=_prescription_body(valid_from=300), headers=_as("Q")
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidPrescriptionData"

    def test_third_party_deactivation(self, client):
        _register_pair(client)
        client.post("/api/v1/prescriptions/", json=_prescription_body(), headers=_as("Q"))
        resp = client.post("/api/v1/prescriptions/0/deactivate", headers=_as("Z"))
        assert resp.status_code == 403

    def test_deactivate_unknown(self, client):
        resp = client.post("/api/v1/prescriptions/9/deactivate", headers=_as("Q"))
        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidPrescriptionData"

    def test_unknown_prescription_is_404(self, client):
        assert client.get("/api/v1/prescriptions/9").status_code == 404

    def test_overflow_reports_orphan_id(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_TRACKED_PRESCRIPTIONS", 1)
        _register_pair(client)
        client.post("/api/v1/prescriptions/", json=_prescription_body(), headers=_as("Q"))
        resp = client.post("/api/v1/prescriptions/", json=_prescription_body(), headers=_as("Q"))
        assert resp.status_code == 507
        assert resp.json()["error"] == "PrescriptionListOverflow"
        assert resp.json()["prescription_id"] == 1

        stats = client.get("/api/v1/prescriptions/stats").json()
        assert stats == {"prescription_count": 2, "tracked_prescriptions": [0]}
        assert client.get("/api/v1/prescriptions/1").status_code == 200

    def test_active_requires_caller(self, client):
        assert client.get("/api/v1/prescriptions/active").status_code == 401

    def test_out_of_range_timestamp_is_validation_error(self, client):
        _register_pair(client)
        resp = client.post(
            "/api/v1/prescriptions/", json=_prescription_body(valid_until=2 ** 64 - 1), headers=_as("Q")
        )
        assert resp.status_code == 422
        assert client.get("/api/v1/prescriptions/stats").json()["prescription_count"] == 0


class TestAuditLogging:
    def test_authorization_logged_as_authorize(self, client, caplog):
        client.post("/api/v1/patients/", json={"history": "h", "genetic_data": "d"}, headers=_as("P"))
        with caplog.at_level(logging.INFO, logger="medledger.audit"):
            client.post("/api/v1/patients/me/providers", json={"provider_id": "Q"}, headers=_as("P"))
        messages = [r.getMessage() for r in caplog.records if r.name == "medledger.audit"]
        assert any("caller=P action=authorize resource=patients/me" in m for m in messages)

    def test_deactivation_logged_as_deactivate(self, client, caplog):
        _register_pair(client)
        client.post("/api/v1/prescriptions/", json=_prescription_body(), headers=_as("Q"))
        with caplog.at_level(logging.INFO, logger="medledger.audit"):
            client.post("/api/v1/prescriptions/0/deactivate", headers=_as("Q"))
        messages = [r.getMessage() for r in caplog.records if r.name == "medledger.audit"]
        assert any("caller=Q action=deactivate resource=prescriptions/0" in m for m in messages)

    def test_registration_logged_as_create(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="medledger.audit"):
            client.post("/api/v1/providers/", json={"specialty": "Cardio", "license_number": "L1"}, headers=_as("Q"))
        messages = [r.getMessage() for r in caplog.records if r.name == "medledger.audit"]
        assert any("caller=Q action=create resource=providers/-" in m for m in messages)
