# =============================================================================
# tests/test_upload.py - Upload & Inventory Image Tests
# =============================================================================

import pytest

from app.config import settings
from core.services.storage_service import StorageService, sanitize_filename
from tests.test_inventory import create_item

ITEM_ID = "6f1c1c5e-0d4b-4f7a-9d7e-2d6a4f0b9c11"


def image_url(name):
    return f"{settings.storage_public_url}inventory/{name}"


class TestStorageHelpers:
    """Tests for storage path helpers."""

    def test_sanitize_filename(self):
        assert sanitize_filename("Q1 report (final).pdf") == "Q1_report__final_.pdf"
        assert sanitize_filename("../../etc/passwd") == "passwd"
        assert sanitize_filename("...") == "file"

    def test_path_from_url(self):
        assert StorageService.path_from_url(image_url("a.png")) == "inventory/a.png"
        assert StorageService.path_from_url("https://elsewhere.test/a.png") is None


class TestSignedUrls:
    """Tests for GET /api/upload/signed-url."""

    def test_requires_filename_and_content_type(self, client, user_headers):
        response = client.get("/api/upload/signed-url?filename=a.pdf", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Filename and content type are required"

    def test_signed_url(self, client, db, user_headers):
        response = client.get(
            "/api/upload/signed-url?filename=report.pdf&contentType=application/pdf&folder=projects",
            headers=user_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["url"].startswith("https://")
        assert data["fileUrl"].startswith(f"{settings.storage_public_url}projects/")
        assert data["fileUrl"].endswith("-report.pdf")
        assert len(db.storage.signed) == 1

    @pytest.mark.parametrize("folder", ["../x", "projects/../../secrets", "./"])
    def test_rejects_dot_segments_in_folder(self, client, db, user_headers, folder):
        response = client.get(
            "/api/upload/signed-url",
            headers=user_headers,
            params={"filename": "a.pdf", "contentType": "application/pdf", "folder": folder},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid folder"
        assert db.storage.signed == []

    def test_nested_folder_is_normalized(self):
        path = StorageService.build_path("/projects//p1/", "plan.pdf")

        assert path.startswith("projects/p1/")
        assert path.endswith("-plan.pdf")

    def test_storage_failure(self, client, db, user_headers):
        db.storage.fail = True

        response = client.get(
            "/api/upload/signed-url?filename=a.pdf&contentType=application/pdf", headers=user_headers
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to generate upload URL"

    def test_requires_authentication(self, client, db):
        assert client.get("/api/upload/signed-url?filename=a&contentType=b").status_code == 401


class TestInventoryImageUrls:
    """Tests for GET /api/upload/inventory-images."""

    def test_requires_inventory_id(self, client, user_headers):
        response = client.get("/api/upload/inventory-images", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Inventory ID is required"

    def test_count_is_capped(self, client, user_headers):
        response = client.get(
            f"/api/upload/inventory-images?inventoryId={ITEM_ID}&count=50", headers=user_headers
        )

        data = response.json()["data"]
        assert len(data["signedUrls"]) == settings.MAX_INVENTORY_IMAGES
        assert len(data["fileUrls"]) == settings.MAX_INVENTORY_IMAGES
        assert all(url.startswith(image_url(f"{ITEM_ID}/")) for url in data["fileUrls"])

    def test_rejects_malformed_inventory_id(self, client, db, user_headers):
        response = client.get("/api/upload/inventory-images?inventoryId=../x", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid inventory ID"
        assert db.storage.signed == []


class TestInventoryImages:
    """Tests for attaching and deleting inventory images."""

    def test_attach_dedupes_and_puts_primary_first(self, client, user_headers):
        item = create_item(client, user_headers)

        client.post(f"/api/upload/inventory/{item['id']}/images", headers=user_headers, json={
            "images": [image_url("a.png"), image_url("b.png")],
        })
        response = client.post(f"/api/upload/inventory/{item['id']}/images", headers=user_headers, json={
            "images": [image_url("b.png"), image_url("c.png")],
            "primaryImage": image_url("c.png"),
        })

        assert response.status_code == 200
        assert response.json()["data"]["images"] == [image_url("c.png"), image_url("a.png"), image_url("b.png")]

    def test_attach_requires_images(self, client, user_headers):
        item = create_item(client, user_headers)

        response = client.post(f"/api/upload/inventory/{item['id']}/images", headers=user_headers, json={"images": []})

        assert response.status_code == 400
        assert response.json()["message"] == "Images array is required"

    def test_delete_requires_url(self, client, user_headers):
        item = create_item(client, user_headers)

        response = client.delete(f"/api/upload/inventory/{item['id']}/images", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Image URL is required"

    def test_delete_unknown_image(self, client, user_headers):
        item = create_item(client, user_headers)

        response = client.delete(
            f"/api/upload/inventory/{item['id']}/images",
            headers=user_headers,
            params={"imageUrl": image_url("missing.png")},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Image not found"

    def test_delete_removes_file_and_reference(self, client, db, user_headers):
        item = create_item(client, user_headers, images=[image_url("a.png"), image_url("b.png")])

        response = client.delete(
            f"/api/upload/inventory/{item['id']}/images",
            headers=user_headers,
            params={"imageUrl": image_url("a.png")},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Image deleted successfully"
        assert db.storage.removed == ["inventory/a.png"]
        assert db.rows("inventory")[0]["images"] == [image_url("b.png")]

    def test_storage_failure_keeps_reference(self, client, db, user_headers):
        """The item is only updated once the file is gone."""
        item = create_item(client, user_headers, images=[image_url("a.png")])
        db.storage.fail = True

        response = client.delete(
            f"/api/upload/inventory/{item['id']}/images",
            headers=user_headers,
            params={"imageUrl": image_url("a.png")},
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to delete file"
        assert db.rows("inventory")[0]["images"] == [image_url("a.png")]
