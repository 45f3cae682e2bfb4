# =============================================================================
# tests/test_users.py - User Management Tests
# =============================================================================

from tests.conftest import auth_headers, make_user


class TestUserAdministration:
    """Admin-only endpoints under /api/users."""

    def test_non_admin_cannot_list(self, client, user_headers):
        response = client.get("/api/users", headers=user_headers)

        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_list_hides_password(self, client, admin_headers, user):
        response = client.get("/api/users", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert all("password" not in u for u in body["data"])

    def test_list_filters_by_role(self, client, admin_headers, user):
        response = client.get("/api/users?role=admin", headers=admin_headers)

        assert [u["role"] for u in response.json()["data"]] == ["admin"]

    def test_create_user(self, client, db, admin, admin_headers):
        response = client.post("/api/users", headers=admin_headers, json={
            "email": "staff@example.com",
            "password": "password123",
            "firstName": "Staff",
            "lastName": "Member",
            "role": "guest",
        })

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["role"] == "guest"
        assert data["createdBy"] == admin["id"]

    def test_create_user_duplicate_email(self, client, admin_headers, user):
        response = client.post("/api/users", headers=admin_headers, json={
            "email": user["email"], "password": "password123", "firstName": "A", "lastName": "B",
        })

        assert response.status_code == 400
        assert response.json()["message"] == "User with this email already exists"

    def test_create_user_invalid_role(self, client, admin_headers):
        response = client.post("/api/users", headers=admin_headers, json={
            "email": "x@example.com", "password": "password123",
            "firstName": "A", "lastName": "B", "role": "superuser",
        })

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid role"

    def test_admin_cannot_delete_self(self, client, admin, admin_headers):
        response = client.delete(f"/api/users/{admin['id']}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete your own account"

    def test_delete_user(self, client, db, admin_headers, user):
        response = client.delete(f"/api/users/{user['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert all(u["id"] != user["id"] for u in db.rows("users"))

    def test_deactivate_blocks_token(self, client, admin_headers, user, user_headers):
        response = client.put(f"/api/users/{user['id']}/deactivate", headers=admin_headers)
        assert response.json()["data"]["isActive"] is False

        assert client.get("/api/auth/me", headers=user_headers).status_code == 401

    def test_admin_cannot_demote_self(self, client, admin, admin_headers):
        response = client.put(f"/api/users/{admin['id']}/role", headers=admin_headers, json={"role": "user"})

        assert response.status_code == 400

    def test_change_role(self, client, admin_headers, user):
        response = client.put(f"/api/users/{user['id']}/role", headers=admin_headers, json={"role": "admin"})

        assert response.status_code == 200
        assert response.json()["message"] == "User role updated to admin"

    def test_invalid_id(self, client, admin_headers):
        response = client.delete("/api/users/not-an-id", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid user ID"


class TestSelfService:
    """Users reading and updating their own profile."""

    def test_user_reads_self(self, client, user, user_headers):
        response = client.get(f"/api/users/{user['id']}", headers=user_headers)
        assert response.status_code == 200

    def test_user_cannot_read_others(self, client, db, user_headers):
        other = make_user(db)
        response = client.get(f"/api/users/{other['id']}", headers=user_headers)
        assert response.status_code == 403

    def test_user_cannot_change_own_role(self, client, user, user_headers):
        response = client.put(f"/api/users/{user['id']}", headers=user_headers, json={"role": "admin"})
        assert response.status_code == 403

    def test_user_updates_name(self, client, user, user_headers):
        response = client.put(f"/api/users/{user['id']}", headers=user_headers, json={"firstName": "Grace"})

        assert response.status_code == 200
        assert response.json()["data"]["firstName"] == "Grace"

    def test_guest_token_still_works(self, client, db):
        guest = make_user(db, role="guest")
        response = client.get("/api/auth/me", headers=auth_headers(guest))
        assert response.json()["data"]["role"] == "guest"
