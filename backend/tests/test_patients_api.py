"""Tests for the /api/patients REST endpoints."""

from unittest.mock import patch

import pytest

from patient_dashboard.exceptions import StoreError
from patient_dashboard.services.record_store import RecordStore

from conftest import patient_payload


def create(client, **kwargs):
    response = client.post("/api/patients", json=patient_payload(**kwargs))
    assert response.status_code == 201
    return response.json()["id"]


class TestHealthEndpoints:
    """Root and health checks."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["services"]["patients"] == "available"


class TestCreatePatient:
    """POST /api/patients"""

    def test_create_returns_201_with_id(self, client):
        response = client.post("/api/patients", json=patient_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["message"] == "Patient created successfully"

    def test_create_missing_fields_returns_400(self, client):
        payload = patient_payload()
        del payload["dob"]

        response = client.post("/api/patients", json=payload)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required fields: firstName, lastName, dob, and status are required"
        }

    def test_create_invalid_status_returns_400(self, client):
        response = client.post("/api/patients", json=patient_payload(status="active"))

        assert response.status_code == 400
        assert "Invalid status" in response.json()["error"]

    def test_create_non_object_body_returns_400(self, client):
        response = client.post("/api/patients", json=["not", "an", "object"])

        assert response.status_code == 400
        assert "error" in response.json()

    def test_create_store_failure_returns_500(self, client):
        with patch.object(RecordStore, "insert", side_effect=StoreError("Failed to create patient")):
            response = client.post("/api/patients", json=patient_payload())

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create patient"}


class TestListPatients:
    """GET /api/patients"""

    def test_list_empty(self, client):
        response = client.get("/api/patients")

        assert response.status_code == 200
        data = response.json()
        assert data["patients"] == []
        assert data["message"] == "Patients retrieved successfully"
        assert data["pagination"] == {
            "currentPage": 1,
            "totalPages": 0,
            "totalPatients": 0,
            "limit": 10,
            "hasNextPage": False,
            "hasPreviousPage": False,
        }

    def test_list_sorted_by_name(self, client):
        create(client, first="Bob", last="Ng", status="Active", dob="1980-01-01")
        create(client, first="Amy", last="Lee", status="Inquiry", dob="1990-05-05")

        response = client.get("/api/patients", params={"sortBy": "name", "sortOrder": "asc", "page": 1, "limit": 10})

        assert response.status_code == 200
        names = [(p["firstName"], p["lastName"]) for p in response.json()["patients"]]
        assert names == [("Amy", "Lee"), ("Bob", "Ng")]

    def test_list_returns_wire_fields(self, client):
        patient_id = create(client)

        patient = client.get("/api/patients").json()["patients"][0]

        assert patient["id"] == patient_id
        assert patient["address"] == "12 Elm Street"
        assert patient["zipCode"] == "80202"
        assert "street" not in patient

    def test_list_second_page_of_one(self, client):
        for first in ["Cid", "Amy", "Bob"]:
            create(client, first=first)

        data = client.get("/api/patients", params={"sortBy": "name", "page": "2", "limit": "1"}).json()

        assert [p["firstName"] for p in data["patients"]] == ["Bob"]
        assert data["pagination"]["hasNextPage"] is True
        assert data["pagination"]["hasPreviousPage"] is True
        assert data["pagination"]["totalPages"] == 3

    def test_list_search_status(self, client):
        create(client, first="Amy", status="Active")
        create(client, first="Bob", status="Inquiry")

        data = client.get("/api/patients", params={"search": "ACTIVE"}).json()

        assert [p["firstName"] for p in data["patients"]] == ["Amy"]
        assert data["pagination"]["totalPatients"] == 1

    def test_list_search_no_match(self, client):
        create(client)

        data = client.get("/api/patients", params={"search": "zzz"}).json()

        assert data["patients"] == []
        assert data["pagination"]["totalPatients"] == 0
        assert data["pagination"]["totalPages"] == 0

    @pytest.mark.parametrize("params, message", [
        ({"page": "0"}, "Page must be greater than 0"),
        ({"page": "-3"}, "Page must be greater than 0"),
        ({"limit": "0"}, "Limit must be between 1 and 100"),
        ({"limit": "101"}, "Limit must be between 1 and 100"),
    ])
    def test_list_invalid_pagination_returns_400(self, client, params, message):
        response = client.get("/api/patients", params=params)

        assert response.status_code == 400
        assert response.json() == {"error": message}

    def test_list_page_beyond_total_returns_400(self, client):
        create(client)

        response = client.get("/api/patients", params={"page": "2"})

        assert response.status_code == 400
        assert response.json() == {"error": "Page number exceeds total pages"}

    def test_list_non_numeric_page_defaults_to_first(self, client):
        create(client)

        data = client.get("/api/patients", params={"page": "abc", "limit": "xyz"}).json()

        assert data["pagination"]["currentPage"] == 1
        assert data["pagination"]["limit"] == 10

    def test_list_store_failure_returns_500(self, client):
        with patch.object(RecordStore, "list", side_effect=StoreError("Failed to fetch patients")):
            response = client.get("/api/patients")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch patients"}


class TestGetPatient:
    """GET /api/patients/{id}"""

    def test_get_round_trip(self, client):
        payload = patient_payload(middleName="Jo")
        patient_id = client.post("/api/patients", json=payload).json()["id"]

        response = client.get(f"/api/patients/{patient_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Patient retrieved successfully"
        assert data["patient"] == {"id": patient_id, **payload}

    def test_absent_middle_name_is_left_out(self, client):
        payload = patient_payload()
        del payload["middleName"]
        patient_id = client.post("/api/patients", json=payload).json()["id"]

        patient = client.get(f"/api/patients/{patient_id}").json()["patient"]

        assert "middleName" not in patient
        assert patient == {"id": patient_id, **payload}

    def test_get_missing_returns_404(self, client):
        response = client.get("/api/patients/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "Patient not found"}


class TestUpdatePatient:
    """PUT /api/patients/{id}"""

    def test_update(self, client):
        patient_id = create(client, status="Inquiry")

        response = client.put(f"/api/patients/{patient_id}", json=patient_payload(status="Onboarding"))

        assert response.status_code == 200
        assert response.json() == {"message": "Patient updated successfully", "id": patient_id}
        patient = client.get(f"/api/patients/{patient_id}").json()["patient"]
        assert patient["status"] == "Onboarding"
        assert patient["address"] == "12 Elm Street"

    def test_update_invalid_returns_400(self, client):
        patient_id = create(client)

        response = client.put(f"/api/patients/{patient_id}", json=patient_payload(last=""))

        assert response.status_code == 400

    def test_update_missing_returns_500(self, client):
        response = client.put("/api/patients/does-not-exist", json=patient_payload())

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to update patient"}


class TestDeletePatient:
    """DELETE /api/patients/{id}"""

    def test_delete(self, client):
        patient_id = create(client)

        response = client.delete(f"/api/patients/{patient_id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Patient deleted successfully", "id": patient_id}
        assert client.get(f"/api/patients/{patient_id}").status_code == 404
        assert client.get("/api/patients").json()["patients"] == []

    def test_delete_store_failure_returns_500(self, client):
        with patch.object(RecordStore, "delete", side_effect=StoreError("Failed to delete patient")):
            response = client.delete("/api/patients/abc")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to delete patient"}


class TestResponseSchemas:
    """Declared response bodies in the OpenAPI document."""

    @pytest.fixture
    def responses(self, client):
        paths = client.get("/openapi.json").json()["paths"]
        return {
            ("get", "/api/patients"): paths["/api/patients"]["get"]["responses"],
            ("post", "/api/patients"): paths["/api/patients"]["post"]["responses"],
            ("get", "/api/patients/{patient_id}"): paths["/api/patients/{patient_id}"]["get"]["responses"],
            ("delete", "/api/patients/{patient_id}"): paths["/api/patients/{patient_id}"]["delete"]["responses"],
        }

    @staticmethod
    def schema_ref(response):
        return response["content"]["application/json"]["schema"]["$ref"].rsplit("/", 1)[-1]

    def test_success_bodies(self, responses):
        assert self.schema_ref(responses[("get", "/api/patients")]["200"]) == "PatientListResponse"
        assert self.schema_ref(responses[("post", "/api/patients")]["201"]) == "PatientMutationResponse"
        assert self.schema_ref(responses[("get", "/api/patients/{patient_id}")]["200"]) == "PatientResponse"
        assert self.schema_ref(responses[("delete", "/api/patients/{patient_id}")]["200"]) == "PatientMutationResponse"

    def test_error_bodies(self, responses):
        assert self.schema_ref(responses[("get", "/api/patients")]["400"]) == "ErrorResponse"
        assert self.schema_ref(responses[("get", "/api/patients/{patient_id}")]["404"]) == "ErrorResponse"
        assert self.schema_ref(responses[("delete", "/api/patients/{patient_id}")]["500"]) == "ErrorResponse"
