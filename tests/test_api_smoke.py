from __future__ import annotations

from ssas.submission import SubmissionError


def test_root_redirects_to_docs(client) -> None:
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == "/docs"


def test_reference_lists(client) -> None:
    resp = client.get("/api/reference")
    assert resp.status_code == 200
    data = resp.json()
    assert {"countries", "titles", "nationalities", "account_types"} <= set(data)
    assert {"value": "GB", "label": "United Kingdom"} in data["countries"]

    resp = client.get("/api/reference/titles")
    assert resp.status_code == 200
    assert resp.json()[0] == {"value": "mr", "label": "Mr."}


def test_unknown_reference_list(client) -> None:
    resp = client.get("/api/reference/planets")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Reference list not found"


def test_validate_reports_field_errors(client, valid_corporate_payload) -> None:
    valid_corporate_payload["howManyMembers"] = 0
    resp = client.post("/api/corporate/validate", json=valid_corporate_payload)
    assert resp.status_code == 200
    assert resp.json() == {"valid": False, "errors": {"how_many_members": "Number of members is required"}}


def test_validate_accepts_valid_individual(client, valid_individual_payload) -> None:
    resp = client.post("/api/individual/validate", json=valid_individual_payload)
    assert resp.status_code == 200
    assert resp.json() == {"valid": True, "errors": {}}


def test_submit_valid_corporate(client, fake_submitter, valid_corporate_payload) -> None:
    resp = client.post("/api/corporate/submit", json=valid_corporate_payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "submitted"
    assert body["reference"] == "REF-001"
    assert body["pstr_id"] == "00123456RX"
    assert fake_submitter.calls[0][0] == "corporate"


def test_submit_invalid_individual_is_rejected(client, fake_submitter, valid_individual_payload) -> None:
    valid_individual_payload["mobile"] = "0770"
    resp = client.post("/api/individual/submit", json=valid_individual_payload)
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"mobile": "Mobile number must be 10 digits"}
    assert fake_submitter.calls == []


def test_submit_upstream_failure(client, fake_submitter, valid_individual_payload) -> None:
    fake_submitter.error = SubmissionError("Submission rejected (503): busy")
    resp = client.post("/api/individual/submit", json=valid_individual_payload)
    assert resp.status_code == 502
    assert "503" in resp.json()["detail"]


def test_individual_visibility(client) -> None:
    resp = client.post(
        "/api/individual/visibility",
        json={"yearsAtAddress": 2, "monthsAtAddress": 11, "isCommunicationAddress": False},
    )
    assert resp.status_code == 200
    assert resp.json() == {"previous_addresses": True, "communication_address": True, "second_nationality": False}

    resp = client.post("/api/individual/visibility", json={"yearsAtAddress": "soon"})
    assert resp.status_code == 422
    assert "years_at_address" in resp.json()["detail"]
