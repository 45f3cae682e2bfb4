# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Clients upload files directly to Supabase Storage with a signed upload
# URL issued here; the API only stores the resulting public URL.
#
# Object paths look like:
#   uploads/<uuid>-<filename>
#   inventory/<item id>/<uuid>-image
# =============================================================================

import logging
import re

from lib.supabase_client import SupabaseClient
from lib.utils import new_id
from app.config import settings
from app.exceptions import ApiError, StorageError

logger = logging.getLogger(__name__)


def sanitize_filename(filename: str) -> str:
    """
    Make a filename safe for an object path.

    Example:
        sanitize_filename("Q1 report (final).pdf")  # "Q1_report__final_.pdf"
    """
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    cleaned = re.sub(r"[^A-Za-z0-9._-]", "_", base).strip(".")
    return cleaned or "file"


class StorageService:
    """Service for Supabase Storage operations."""

    @staticmethod
    def _bucket():
        return SupabaseClient.get_client().storage.from_(settings.STORAGE_BUCKET)

    @staticmethod
    def build_path(folder: str, filename: str) -> str:
        """
        Unique object path for an upload into `folder`.

        Raises:
            ApiError: 400 when a folder segment is "." or ".."
        """
        segments = [s for s in folder.replace("\\", "/").split("/") if s]
        if any(s in (".", "..") for s in segments):
            raise ApiError("Invalid folder", status_code=400)
        folder = "/".join(segments) or "uploads"
        return f"{folder}/{new_id()}-{sanitize_filename(filename)}"

    @staticmethod
    def public_url(path: str) -> str:
        return f"{settings.storage_public_url}{path}"

    @staticmethod
    def path_from_url(file_url: str) -> str | None:
        """
        Recover the object path from a public URL.

        Returns:
            Path inside the bucket, or None for URLs outside it
        """
        prefix = settings.storage_public_url
        if not file_url or not file_url.startswith(prefix):
            return None
        return file_url[len(prefix):] or None

    @staticmethod
    def create_signed_upload(path: str) -> dict[str, str]:
        """
        Issue a signed upload URL for `path`.

        Returns:
            Dict with `url` (signed upload URL) and `fileUrl` (public URL)

        Raises:
            StorageError: If storage refuses to sign the upload
        """
        try:
            response = StorageService._bucket().create_signed_upload_url(path)
        except Exception as e:
            logger.error(f"Failed to sign upload for {path}: {e}")
            raise StorageError("generate upload URL", str(e))

        signed_url = response.get("signed_url") or response.get("signedUrl")
        if not signed_url:
            raise StorageError("generate upload URL", "storage returned no signed URL")

        return {"url": signed_url, "fileUrl": StorageService.public_url(path)}

    @staticmethod
    def delete_file(path: str) -> None:
        """
        Delete an object from the bucket.

        Raises:
            StorageError: If the delete fails
        """
        try:
            StorageService._bucket().remove([path])
        except Exception as e:
            logger.error(f"Failed to delete {path} from storage: {e}")
            raise StorageError("delete file", str(e))

        logger.info(f"Deleted file from storage: {path}")
