"""
Test suite for company endpoints.

Tests cover:
- Creation (admin only)
- Listing and filtering
- Retrieval, partial update and deletion
"""

import pytest

NEW_COMPANY = {
    "handle": "new",
    "name": "New",
    "logoUrl": "http://new.img",
    "description": "DescNew",
    "numEmployees": 10,
}


class TestCompanyCreation:
    """Tests for company creation endpoint"""

    def test_create_as_admin(self, client, seed, admin_headers):
        """Test successful company creation by an admin"""
        response = client.post("/api/v1/companies/", json=NEW_COMPANY, headers=admin_headers)

        assert response.status_code == 201
        assert response.json() == {"company": NEW_COMPANY}

    def test_create_as_user_forbidden(self, client, seed, u1_headers):
        """Test a regular user cannot create companies"""
        response = client.post("/api/v1/companies/", json=NEW_COMPANY, headers=u1_headers)
        assert response.status_code == 403

    def test_create_anon_unauthorized(self, client, seed):
        """Test creation without a token"""
        response = client.post("/api/v1/companies/", json=NEW_COMPANY)
        assert response.status_code == 401

    def test_create_missing_fields(self, client, seed, admin_headers):
        """Test creation with missing required fields"""
        response = client.post("/api/v1/companies/", json={"handle": "new", "numEmployees": 10}, headers=admin_headers)
        assert response.status_code == 422

    def test_create_unknown_field(self, client, seed, admin_headers):
        """Test creation with a field the model does not define"""
        response = client.post(
            "/api/v1/companies/",
            json={**NEW_COMPANY, "ceo": "someone"},
            headers=admin_headers
        )
        assert response.status_code == 422

    def test_create_duplicate(self, client, seed, admin_headers):
        """Test creation with a taken handle"""
        response = client.post("/api/v1/companies/", json={**NEW_COMPANY, "handle": "c1"}, headers=admin_headers)
        assert response.status_code == 400
        assert "duplicate" in response.json()["detail"].lower()

    def test_create_duplicate_name(self, client, seed, admin_headers):
        """Test creating a company under a new handle with a taken name"""
        response = client.post("/api/v1/companies/", json={**NEW_COMPANY, "name": "C1"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"detail": "Duplicate company: C1"}


class TestCompanyListing:
    """Tests for company listing and filtering"""

    def test_list_all(self, client, seed):
        """Test listing every company ordered by name"""
        response = client.get("/api/v1/companies/")

        assert response.status_code == 200
        companies = response.json()["companies"]
        assert [c["handle"] for c in companies] == ["c1", "c2", "c3"]
        assert companies[0] == {
            "handle": "c1",
            "name": "C1",
            "description": "Desc1",
            "numEmployees": 1,
            "logoUrl": "http://c1.img",
        }

    def test_filter_by_employees(self, client, seed):
        """Test filtering on the employee count range"""
        response = client.get("/api/v1/companies/?minEmployees=2&maxEmployees=3")
        assert [c["handle"] for c in response.json()["companies"]] == ["c2", "c3"]

    def test_filter_by_name(self, client, seed):
        """Test filtering on a name fragment"""
        response = client.get("/api/v1/companies/?name=C2")
        assert [c["handle"] for c in response.json()["companies"]] == ["c2"]

    def test_min_greater_than_max(self, client, seed):
        """Test an inverted employee range is rejected"""
        response = client.get("/api/v1/companies/?minEmployees=3&maxEmployees=1")
        assert response.status_code == 400

    def test_non_numeric_filter(self, client, seed):
        """Test a non-numeric employee filter"""
        response = client.get("/api/v1/companies/?minEmployees=lots")
        assert response.status_code == 422


class TestCompanyRetrieval:
    """Tests for company retrieval endpoint"""

    def test_get_with_jobs(self, client, job_ids):
        """Test retrieving a company with its jobs"""
        response = client.get("/api/v1/companies/c1")

        assert response.status_code == 200
        company = response.json()["company"]
        assert company["handle"] == "c1"
        assert company["numEmployees"] == 1
        assert [j["id"] for j in company["jobs"]] == [job_ids[0]]

    def test_get_nonexistent(self, client, seed):
        """Test retrieving a company that does not exist"""
        response = client.get("/api/v1/companies/nope")
        assert response.status_code == 404
        assert "no company" in response.json()["detail"].lower()


class TestCompanyUpdate:
    """Tests for company partial update"""

    def test_update_as_admin(self, client, seed, admin_headers):
        """Test an admin can rename a company"""
        response = client.patch("/api/v1/companies/c1", json={"name": "C1-new"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["company"] == {
            "handle": "c1",
            "name": "C1-new",
            "description": "Desc1",
            "numEmployees": 1,
            "logoUrl": "http://c1.img",
        }

    def test_update_as_user_forbidden(self, client, seed, u1_headers):
        """Test a regular user cannot update companies"""
        response = client.patch("/api/v1/companies/c1", json={"name": "C1-new"}, headers=u1_headers)
        assert response.status_code == 403

    def test_update_nonexistent(self, client, seed, admin_headers):
        """Test updating a company that does not exist"""
        response = client.patch("/api/v1/companies/nope", json={"name": "new nope"}, headers=admin_headers)
        assert response.status_code == 404

    def test_update_name_taken(self, client, seed, admin_headers):
        """Test renaming a company to a name already in use"""
        response = client.patch("/api/v1/companies/c2", json={"name": "C1"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"detail": "Duplicate company: C1"}

    def test_handle_change_rejected(self, client, seed, admin_headers):
        """Test the handle cannot be changed"""
        response = client.patch("/api/v1/companies/c1", json={"handle": "c1-new"}, headers=admin_headers)
        assert response.status_code == 422

    def test_empty_update(self, client, seed, admin_headers):
        """Test an update with no fields"""
        response = client.patch("/api/v1/companies/c1", json={}, headers=admin_headers)
        assert response.status_code == 400
        assert "no data" in response.json()["detail"].lower()


class TestCompanyDeletion:
    """Tests for company deletion"""

    def test_delete_as_admin(self, client, seed, admin_headers):
        """Test an admin can delete a company"""
        response = client.delete("/api/v1/companies/c1", headers=admin_headers)
        assert response.json() == {"deleted": "c1"}

        assert client.get("/api/v1/companies/c1").status_code == 404

    def test_delete_anon(self, client, seed):
        """Test deletion without a token"""
        response = client.delete("/api/v1/companies/c1")
        assert response.status_code == 401

    def test_delete_nonexistent(self, client, seed, admin_headers):
        """Test deleting a company that does not exist"""
        response = client.delete("/api/v1/companies/nope", headers=admin_headers)
        assert response.status_code == 404
