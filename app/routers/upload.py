# =============================================================================
# app/routers/upload.py - File Upload Endpoints
# =============================================================================
# Files go straight from the client to Supabase Storage:
#
# 1. GET /upload/signed-url (or /upload/inventory-images) for signed URLs
# 2. PUT the file bytes to `url`
# 3. Store `fileUrl` on the entity (e.g. POST /upload/inventory/{id}/images)
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from app.config import settings
from app.dependencies import CurrentUser
from app.exceptions import ApiError, InvalidIdError
from core.models.inventory import ImageAttach
from core.services.inventory_service import InventoryService
from core.services.storage_service import StorageService
from lib.utils import is_valid_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/signed-url")
async def get_signed_url(
    user: CurrentUser,
    filename: Annotated[str | None, Query()] = None,
    content_type: Annotated[str | None, Query(alias="contentType")] = None,
    folder: Annotated[str, Query(description="Folder inside the bucket")] = "uploads",
):
    """
    Get a signed URL for uploading one file.

    Returns `url` (signed upload URL) and `fileUrl` (where the file will
    be publicly readable).
    """
    if not filename or not content_type:
        raise ApiError("Filename and content type are required", status_code=400)

    path = StorageService.build_path(folder, filename)
    logger.info(f"Issuing upload URL for {path} ({content_type}) to user {user.id}")
    return {"success": True, "data": StorageService.create_signed_upload(path)}


@router.get("/inventory-images")
async def get_inventory_image_urls(
    user: CurrentUser,
    inventory_id: Annotated[str | None, Query(alias="inventoryId")] = None,
    count: Annotated[int, Query(ge=1)] = 1,
):
    """Get up to MAX_INVENTORY_IMAGES signed URLs for an item's images."""
    if not inventory_id:
        raise ApiError("Inventory ID is required", status_code=400)
    if not is_valid_id(inventory_id):
        raise InvalidIdError("inventory")

    count = min(count, settings.MAX_INVENTORY_IMAGES)
    uploads = [
        StorageService.create_signed_upload(
            StorageService.build_path(f"inventory/{inventory_id}", f"image-{index + 1}")
        )
        for index in range(count)
    ]
    return {
        "success": True,
        "data": {
            "signedUrls": [upload["url"] for upload in uploads],
            "fileUrls": [upload["fileUrl"] for upload in uploads],
        },
    }


@router.post("/inventory/{item_id}/images")
async def attach_inventory_images(item_id: str, request: ImageAttach, user: CurrentUser):
    item = InventoryService.add_images(item_id, request.images, request.primary_image, user)
    return {"success": True, "data": item}


@router.delete("/inventory/{item_id}/images")
async def delete_inventory_image(
    item_id: str,
    user: CurrentUser,
    image_url: Annotated[str | None, Query(alias="imageUrl")] = None,
):
    InventoryService.remove_image(item_id, image_url, user)
    return {"success": True, "message": "Image deleted successfully"}
