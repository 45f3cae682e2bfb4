# =============================================================================
# tests/test_logistics.py - Shipment & Purchase Order Tests
# =============================================================================

import re

import pytest

from app.config import settings
from core.services.purchase_order_service import compute_totals, generate_order_number
from tests.test_inventory import create_item

ADDRESS = {"street": "1 Dock Rd", "city": "Rotterdam", "country": "NL"}


def create_shipment(client, headers, **overrides):
    body = {
        "shipmentNumber": "SH-001",
        "type": "inbound",
        "courier": "DHL",
        "origin": ADDRESS,
        "destination": {**ADDRESS, "city": "Antwerp"},
        "items": [{"name": "A4 Paper", "quantity": 10}],
    }
    body.update(overrides)
    response = client.post("/api/shipments", headers=headers, json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def supplier(client, user_headers):
    response = client.post("/api/suppliers", headers=user_headers, json={
        "name": "Paper Co", "email": "sales@paper.test",
    })
    return response.json()["data"]


def create_order(client, headers, supplier, items, **overrides):
    body = {"supplier": supplier["id"], "items": items, **overrides}
    response = client.post("/api/purchase-orders", headers=headers, json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


# =============================================================================
# Shipments
# =============================================================================

class TestShipments:
    """Tests for /api/shipments."""

    def test_create_records_initial_tracking_event(self, client, user, user_headers):
        shipment = create_shipment(client, user_headers)

        assert shipment["status"] == "pending"
        assert shipment["documents"] == []
        assert shipment["createdBy"] == user["id"]
        assert len(shipment["trackingHistory"]) == 1
        assert shipment["trackingHistory"][0]["status"] == "pending"
        assert shipment["trackingHistory"][0]["description"] == "Shipment created"

    def test_duplicate_number(self, client, user_headers):
        create_shipment(client, user_headers)

        response = client.post("/api/shipments", headers=user_headers, json={
            "shipmentNumber": "SH-001", "type": "outbound", "courier": "UPS",
            "origin": ADDRESS, "destination": ADDRESS,
        })

        assert response.status_code == 400
        assert response.json()["message"] == 'Shipment with number "SH-001" already exists'

    def test_required_fields(self, client, user_headers):
        response = client.post("/api/shipments", headers=user_headers, json={"shipmentNumber": "SH-9"})

        assert response.status_code == 400
        assert set(response.json()["errors"]) == {"type", "courier", "origin", "destination"}

    def test_status_change_appends_tracking_event(self, client, db, user_headers):
        shipment = create_shipment(client, user_headers)

        response = client.put(f"/api/shipments/{shipment['id']}", headers=user_headers, json={
            "status": "in-transit",
            "location": "Rotterdam hub",
            "statusNote": "Left the warehouse",
        })

        data = response.json()["data"]
        assert data["status"] == "in-transit"
        assert data["shippedDate"]
        assert "location" not in data
        assert data["trackingHistory"][-1]["location"] == "Rotterdam hub"
        assert data["trackingHistory"][-1]["description"] == "Left the warehouse"
        assert any(a["action"] == "status-change" for a in db.rows("activities"))

    def test_delivery_stamps_actual_delivery_date(self, client, user_headers):
        shipment = create_shipment(client, user_headers)

        response = client.put(f"/api/shipments/{shipment['id']}", headers=user_headers, json={"status": "delivered"})

        assert response.json()["data"]["actualDeliveryDate"]

    def test_same_status_adds_no_event(self, client, user_headers):
        shipment = create_shipment(client, user_headers)

        response = client.put(f"/api/shipments/{shipment['id']}", headers=user_headers, json={
            "status": "pending", "notes": "Fragile",
        })

        assert len(response.json()["data"]["trackingHistory"]) == 1

    def test_filter_by_type(self, client, user_headers):
        create_shipment(client, user_headers)
        create_shipment(client, user_headers, shipmentNumber="SH-002", type="outbound")

        body = client.get("/api/shipments?type=outbound", headers=user_headers).json()

        assert [s["shipmentNumber"] for s in body["data"]] == ["SH-002"]

    def test_delete(self, client, db, user_headers):
        shipment = create_shipment(client, user_headers)

        response = client.delete(f"/api/shipments/{shipment['id']}", headers=user_headers)

        assert response.status_code == 200
        assert db.rows("shipments") == []


class TestShipmentDocuments:
    """Tests for shipment document attachments."""

    def test_add_and_list(self, client, user_headers):
        shipment = create_shipment(client, user_headers)

        added = client.post(f"/api/shipments/{shipment['id']}/documents", headers=user_headers, json={
            "title": "Bill of lading",
            "fileUrl": f"{settings.storage_public_url}shipments/bol.pdf",
            "fileType": "application/pdf",
        })
        listed = client.get(f"/api/shipments/{shipment['id']}/documents", headers=user_headers).json()

        assert added.status_code == 201
        assert listed["count"] == 1
        assert listed["data"][0]["title"] == "Bill of lading"

    def test_add_requires_file_type(self, client, user_headers):
        shipment = create_shipment(client, user_headers)

        response = client.post(f"/api/shipments/{shipment['id']}/documents", headers=user_headers, json={
            "title": "Bill of lading", "fileUrl": "https://files.test/bol.pdf",
        })

        assert response.status_code == 400
        assert response.json()["message"] == "Title, file URL, and file type are required fields"

    def test_remove_deletes_file(self, client, db, user_headers):
        shipment = create_shipment(client, user_headers)
        document = client.post(f"/api/shipments/{shipment['id']}/documents", headers=user_headers, json={
            "title": "Bill of lading",
            "fileUrl": f"{settings.storage_public_url}shipments/bol.pdf",
            "fileType": "application/pdf",
        }).json()["data"]

        response = client.delete(f"/api/shipments/{shipment['id']}/documents/{document['id']}", headers=user_headers)

        assert response.status_code == 200
        assert db.storage.removed == ["shipments/bol.pdf"]
        assert db.rows("shipments")[0]["documents"] == []

    def test_storage_failure_still_detaches(self, client, db, user_headers):
        """A storage error is logged and the document is removed anyway."""
        shipment = create_shipment(client, user_headers)
        document = client.post(f"/api/shipments/{shipment['id']}/documents", headers=user_headers, json={
            "title": "Bill of lading",
            "fileUrl": f"{settings.storage_public_url}shipments/bol.pdf",
            "fileType": "application/pdf",
        }).json()["data"]
        db.storage.fail = True

        response = client.delete(f"/api/shipments/{shipment['id']}/documents/{document['id']}", headers=user_headers)

        assert response.status_code == 200
        assert db.rows("shipments")[0]["documents"] == []

    def test_remove_without_documents(self, client, user_headers):
        shipment = create_shipment(client, user_headers)

        response = client.delete(f"/api/shipments/{shipment['id']}/documents/anything", headers=user_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "No documents found for this shipment"


# =============================================================================
# Purchase Orders
# =============================================================================

class TestPurchaseOrderHelpers:
    """Tests for order numbering and totals."""

    def test_order_number_format(self):
        assert re.fullmatch(r"PO-\d{8}-\d{4}", generate_order_number())

    def test_compute_totals(self):
        items = [{"quantity": 3, "unitPrice": 2.5}, {"quantity": 1, "unitPrice": 10}]

        assert compute_totals(items, tax=1.5, shipping_cost=4) == {"subtotal": 17.5, "totalAmount": 23.0}


class TestPurchaseOrders:
    """Tests for /api/purchase-orders."""

    def test_create_generates_number_and_totals(self, client, user, user_headers, supplier):
        order = create_order(client, user_headers, supplier, [
            {"name": "A4 Paper", "quantity": 10, "unitPrice": 5},
        ], tax=5, shippingCost=10)

        assert re.fullmatch(r"PO-\d{8}-\d{4}", order["orderNumber"])
        assert order["status"] == "draft"
        assert order["subtotal"] == 50
        assert order["totalAmount"] == 65
        assert order["orderDate"]
        assert order["createdBy"] == user["id"]

    def test_unknown_supplier(self, client, user_headers):
        response = client.post("/api/purchase-orders", headers=user_headers, json={
            "supplier": "6f1c1c5e-0d4b-4f7a-9d7e-2d6a4f0b9c11",
            "items": [{"name": "x", "quantity": 1, "unitPrice": 1}],
        })

        assert response.status_code == 404
        assert response.json()["message"] == "Supplier not found"

    def test_duplicate_number(self, client, user_headers, supplier):
        items = [{"name": "x", "quantity": 1, "unitPrice": 1}]
        create_order(client, user_headers, supplier, items, orderNumber="PO-1")

        response = client.post("/api/purchase-orders", headers=user_headers, json={
            "supplier": supplier["id"], "items": items, "orderNumber": "PO-1",
        })

        assert response.status_code == 400

    def test_update_recomputes_totals(self, client, user_headers, supplier):
        order = create_order(client, user_headers, supplier, [{"name": "x", "quantity": 1, "unitPrice": 10}])

        response = client.put(f"/api/purchase-orders/{order['id']}", headers=user_headers, json={"shippingCost": 5})

        assert response.json()["data"]["totalAmount"] == 15

    def test_create_ignores_requested_status(self, client, db, user_headers, supplier):
        """Receiving only happens through the status endpoint."""
        item = create_item(client, user_headers, stockQuantity=50, reorderPoint=2)

        order = create_order(client, user_headers, supplier, [
            {"item": item["id"], "name": item["name"], "quantity": 5, "unitPrice": 5},
        ], status="received")

        assert order["status"] == "draft"
        assert "receivedDate" not in order
        assert db.rows("inventory")[0]["stockQuantity"] == 50

        response = client.put(f"/api/purchase-orders/{order['id']}/status", headers=user_headers, json={"status": "received"})

        assert response.status_code == 200
        assert db.rows("inventory")[0]["stockQuantity"] == 55

    def test_approve_stamps_approver(self, client, user, user_headers, supplier):
        order = create_order(client, user_headers, supplier, [{"name": "x", "quantity": 1, "unitPrice": 10}])

        response = client.put(f"/api/purchase-orders/{order['id']}/status", headers=user_headers, json={"status": "approved"})

        assert response.json()["data"]["approvedBy"] == user["id"]

    def test_receiving_restocks_inventory(self, client, db, user_headers, supplier):
        """Lines without an inventory item are skipped."""
        item = create_item(client, user_headers, stockQuantity=4, reorderPoint=2)
        order = create_order(client, user_headers, supplier, [
            {"item": item["id"], "name": item["name"], "quantity": 20, "unitPrice": 5},
            {"name": "Not stocked", "quantity": 1, "unitPrice": 1},
        ])

        response = client.put(f"/api/purchase-orders/{order['id']}/status", headers=user_headers, json={"status": "received"})

        assert response.status_code == 200
        assert response.json()["data"]["receivedDate"]
        assert db.rows("inventory")[0]["stockQuantity"] == 24

    def test_received_order_is_locked(self, client, user_headers, supplier):
        order = create_order(client, user_headers, supplier, [{"name": "x", "quantity": 1, "unitPrice": 10}])
        client.put(f"/api/purchase-orders/{order['id']}/status", headers=user_headers, json={"status": "received"})

        update = client.put(f"/api/purchase-orders/{order['id']}", headers=user_headers, json={"notes": "late"})
        status = client.put(f"/api/purchase-orders/{order['id']}/status", headers=user_headers, json={"status": "cancelled"})

        assert update.status_code == 400
        assert update.json()["message"] == "Received purchase orders cannot be modified"
        assert status.status_code == 400

    def test_only_draft_or_cancelled_can_be_deleted(self, client, db, user_headers, supplier):
        order = create_order(client, user_headers, supplier, [{"name": "x", "quantity": 1, "unitPrice": 10}])
        client.put(f"/api/purchase-orders/{order['id']}/status", headers=user_headers, json={"status": "submitted"})

        blocked = client.delete(f"/api/purchase-orders/{order['id']}", headers=user_headers)
        client.put(f"/api/purchase-orders/{order['id']}/status", headers=user_headers, json={"status": "cancelled"})
        allowed = client.delete(f"/api/purchase-orders/{order['id']}", headers=user_headers)

        assert blocked.status_code == 400
        assert allowed.status_code == 200
        assert db.rows("purchase_orders") == []

    def test_invalid_id(self, client, user_headers):
        response = client.get("/api/purchase-orders/xyz", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid purchase order ID"
