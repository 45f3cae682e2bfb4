# =============================================================================
# tests/test_customers.py - Customer & Supplier Endpoint Tests
# =============================================================================

from lib.utils import days_from_now


def customer_body(**overrides):
    body = {
        "companyName": "Acme Corp",
        "industry": "Manufacturing",
        "size": "medium",
        "primaryContact": {"name": "Wile Coyote", "email": "wile@acme.test"},
        "accountManager": "6f1c1c5e-0d4b-4f7a-9d7e-2d6a4f0b9c11",
        "contractValue": 50000,
    }
    body.update(overrides)
    return body


def create_customer(client, headers, **overrides):
    response = client.post("/api/customers", headers=headers, json=customer_body(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCustomers:
    """Tests for /api/customers."""

    def test_create(self, client, user, user_headers):
        customer = create_customer(client, user_headers)

        assert customer["status"] == "active"
        assert customer["createdBy"] == user["id"]
        assert customer["customerSince"]
        assert customer["primaryContact"]["email"] == "wile@acme.test"

    def test_required_fields(self, client, user_headers):
        response = client.post("/api/customers", headers=user_headers, json={"companyName": "Nameless"})

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert set(errors) == {"industry", "size", "primaryContact", "accountManager"}

    def test_duplicate_company_name(self, client, user_headers):
        create_customer(client, user_headers)

        response = client.post("/api/customers", headers=user_headers, json=customer_body())

        assert response.status_code == 400
        assert response.json()["message"] == 'Customer with name "Acme Corp" already exists'

    def test_search_nested_contact_email(self, client, user_headers):
        create_customer(client, user_headers)
        create_customer(
            client, user_headers,
            companyName="Globex",
            primaryContact={"name": "Hank", "email": "hank@globex.test"},
        )

        body = client.get("/api/customers?search=globex.test", headers=user_headers).json()

        assert [c["companyName"] for c in body["data"]] == ["Globex"]

    def test_default_sort_is_company_name(self, client, user_headers):
        create_customer(client, user_headers, companyName="Zeta")
        create_customer(client, user_headers, companyName="Alpha")

        body = client.get("/api/customers", headers=user_headers).json()

        assert [c["companyName"] for c in body["data"]] == ["Alpha", "Zeta"]

    def test_update_rename_conflict(self, client, user_headers):
        create_customer(client, user_headers)
        other = create_customer(client, user_headers, companyName="Globex")

        response = client.put(f"/api/customers/{other['id']}", headers=user_headers, json={"companyName": "Acme Corp"})

        assert response.status_code == 400

    def test_delete_blocked_by_project(self, client, db, user_headers):
        customer = create_customer(client, user_headers)
        db.seed("projects", {"id": "p1", "name": "Rollout", "customer": customer["id"]})

        response = client.delete(f"/api/customers/{customer['id']}", headers=user_headers)

        assert response.status_code == 400
        assert "1 project(s)" in response.json()["message"]

    def test_delete(self, client, db, user_headers):
        customer = create_customer(client, user_headers)

        response = client.delete(f"/api/customers/{customer['id']}", headers=user_headers)

        assert response.status_code == 200
        assert db.rows("customers") == []

    def test_stats(self, client, user_headers):
        create_customer(client, user_headers, contractRenewalDate=days_from_now(30))
        create_customer(client, user_headers, companyName="Globex", size="large", status="prospect", contractValue=25000)

        data = client.get("/api/customers/stats", headers=user_headers).json()["data"]

        assert data["totalCustomers"] == 2
        assert data["statusBreakdown"] == {"active": 1, "prospect": 1}
        assert data["sizeBreakdown"] == {"medium": 1, "large": 1}
        assert data["totalContractValue"] == 75000
        assert data["recentCustomersCount"] == 2
        assert data["upcomingRenewalsCount"] == 1


class TestSuppliers:
    """Tests for /api/suppliers."""

    def test_create_and_filter_by_category(self, client, user_headers):
        client.post("/api/suppliers", headers=user_headers, json={
            "name": "Paper Co", "email": "sales@paper.test", "categories": ["office", "paper"],
        })
        client.post("/api/suppliers", headers=user_headers, json={
            "name": "Steel Co", "email": "sales@steel.test", "categories": ["metal"],
        })

        body = client.get("/api/suppliers?category=paper", headers=user_headers).json()

        assert [s["name"] for s in body["data"]] == ["Paper Co"]

    def test_required_fields(self, client, user_headers):
        response = client.post("/api/suppliers", headers=user_headers, json={"name": "No Email"})

        assert response.status_code == 400
        assert response.json()["errors"] == {"email": ["Email is required"]}

    def test_duplicate_name(self, client, user_headers):
        body = {"name": "Paper Co", "email": "sales@paper.test"}
        client.post("/api/suppliers", headers=user_headers, json=body)

        response = client.post("/api/suppliers", headers=user_headers, json=body)

        assert response.status_code == 400
        assert "already exists" in response.json()["message"]

    def test_delete_blocked_by_inventory(self, client, db, user_headers):
        supplier = client.post("/api/suppliers", headers=user_headers, json={
            "name": "Paper Co", "email": "sales@paper.test",
        }).json()["data"]
        db.seed("inventory", {"id": "i1", "name": "A4", "supplier": supplier["id"]})

        response = client.delete(f"/api/suppliers/{supplier['id']}", headers=user_headers)

        assert response.status_code == 400
        assert "inventory item(s)" in response.json()["message"]
