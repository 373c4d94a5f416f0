"""Tests for POST / PUT / DELETE /experience."""

import json

from fastapi.testclient import TestClient

from tests.conftest import PNG_BYTES, auth_headers

VALID_EXPERIENCE = {
    "company": "Acme",
    "designation": "Backend Engineer",
    "from": "2021-03-01",
    "to": "2023-06-30",
    "responsibilities": "A\n\nB\n",
}


def _experience(client: TestClient) -> list[dict]:
    return client.get("/content").json()["experience"]


def _seed(client: TestClient, **overrides) -> str:
    r = client.post(
        "/experience", data={**VALID_EXPERIENCE, **overrides}, headers=auth_headers()
    )
    assert r.status_code == 200, r.text
    return r.json()["id"]


# ── POST /experience ────────────────────────────────────────────────────────────

class TestCreateExperience:
    def test_create_normalizes_newline_text(self, client: TestClient):
        _seed(client)
        [exp] = _experience(client)
        assert exp["company"] == "Acme"
        assert exp["designation"] == "Backend Engineer"
        assert exp["fromDate"] == "2021-03-01"
        assert exp["toDate"] == "2023-06-30"
        assert exp["responsibilities"] == ["A", "B"]
        assert exp["logo"] is None

    def test_json_encoded_responsibilities(self, client: TestClient):
        _seed(client, responsibilities=json.dumps(["Ship APIs", "  ", "Mentor"]))
        assert _experience(client)[0]["responsibilities"] == ["Ship APIs", "Mentor"]

    def test_repeated_form_fields(self, client: TestClient):
        r = client.post(
            "/experience",
            data={**VALID_EXPERIENCE, "responsibilities": ["One", " Two ", ""]},
            headers=auth_headers(),
        )
        assert r.status_code == 200
        assert _experience(client)[0]["responsibilities"] == ["One", "Two"]

    def test_dates_optional(self, client: TestClient):
        _seed(client, **{"from": "", "to": ""})
        exp = _experience(client)[0]
        assert exp["fromDate"] is None
        assert exp["toDate"] is None

    def test_year_month_dates(self, client: TestClient):
        _seed(client, **{"from": "2020-09", "to": ""})
        assert _experience(client)[0]["fromDate"] == "2020-09-01"

    def test_malformed_date_returns_400(self, client: TestClient):
        r = client.post(
            "/experience",
            data={**VALID_EXPERIENCE, "from": "last spring"},
            headers=auth_headers(),
        )
        assert r.status_code == 400
        assert _experience(client) == []

    def test_missing_company_returns_400(self, client: TestClient):
        data = {k: v for k, v in VALID_EXPERIENCE.items() if k != "company"}
        r = client.post("/experience", data=data, headers=auth_headers())
        assert r.status_code == 400

    def test_create_with_logo(self, client: TestClient):
        r = client.post(
            "/experience",
            data=VALID_EXPERIENCE,
            files={"logo": ("acme.png", PNG_BYTES, "image/png")},
            headers=auth_headers(),
        )
        assert r.status_code == 200
        logo = _experience(client)[0]["logo"]
        assert logo.startswith("/assets/uploads/experience/acme-")
        assert client.get(logo).status_code == 200


# ── PUT /experience/{id} ────────────────────────────────────────────────────────

class TestUpdateExperience:
    def test_partial_update_leaves_other_fields(self, client: TestClient):
        exp_id = _seed(client)
        r = client.put(
            f"/experience/{exp_id}",
            json={"designation": "Staff Engineer"},
            headers=auth_headers(),
        )
        assert r.status_code == 200
        assert r.json()["message"] == "Experience updated"

        exp = _experience(client)[0]
        assert exp["designation"] == "Staff Engineer"
        assert exp["company"] == "Acme"
        assert exp["fromDate"] == "2021-03-01"
        assert exp["responsibilities"] == ["A", "B"]

    def test_update_responsibilities_from_text(self, client: TestClient):
        exp_id = _seed(client)
        client.put(
            f"/experience/{exp_id}",
            json={"responsibilities": ["X\nY", "", "Z"]},
            headers=auth_headers(),
        )
        assert _experience(client)[0]["responsibilities"] == ["X", "Y", "Z"]

    def test_update_dates_with_legacy_names(self, client: TestClient):
        exp_id = _seed(client)
        client.put(
            f"/experience/{exp_id}",
            json={"to": None, "from": "2019-01-15"},
            headers=auth_headers(),
        )
        exp = _experience(client)[0]
        assert exp["fromDate"] == "2019-01-15"
        assert exp["toDate"] is None

    def test_empty_update_returns_400(self, client: TestClient):
        exp_id = _seed(client)
        r = client.put(f"/experience/{exp_id}", json={}, headers=auth_headers())
        assert r.status_code == 400

    def test_blank_company_returns_400(self, client: TestClient):
        exp_id = _seed(client)
        r = client.put(f"/experience/{exp_id}", json={"company": " "}, headers=auth_headers())
        assert r.status_code == 400
        assert _experience(client)[0]["company"] == "Acme"

    def test_non_list_responsibilities_rejected(self, client: TestClient):
        exp_id = _seed(client)
        for bad in (5, {"a": "b"}, [["nested"]]):
            r = client.put(
                f"/experience/{exp_id}",
                json={"responsibilities": bad},
                headers=auth_headers(),
            )
            assert r.status_code == 422, r.text
        assert _experience(client)[0]["responsibilities"] == ["A", "B"]

    def test_trailing_junk_after_date_rejected(self, client: TestClient):
        exp_id = _seed(client)
        r = client.put(
            f"/experience/{exp_id}",
            json={"fromDate": "2020-01-15garbage"},
            headers=auth_headers(),
        )
        assert r.status_code == 422
        assert _experience(client)[0]["fromDate"] == "2021-03-01"

    def test_update_nonexistent_returns_404(self, client: TestClient):
        r = client.put("/experience/999", json={"company": "X"}, headers=auth_headers())
        assert r.status_code == 404


# ── DELETE /experience/{id} ─────────────────────────────────────────────────────

class TestDeleteExperience:
    def test_delete(self, client: TestClient):
        exp_id = _seed(client)
        r = client.delete(f"/experience/{exp_id}", headers=auth_headers())
        assert r.status_code == 200
        assert _experience(client) == []

    def test_delete_nonexistent_returns_404(self, client: TestClient):
        r = client.delete("/experience/999", headers=auth_headers())
        assert r.status_code == 404
