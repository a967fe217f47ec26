"""
Media Cleanup

Deletes listing images from Cloudinary. Cleanup is best-effort: it runs as a
background task after the primary write has committed and only ever logs
failures.
"""
from typing import Iterable, List, Optional

import cloudinary
import cloudinary.api
import cloudinary.uploader

from config.settings import settings
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)


def public_id_from_url(url: str) -> Optional[str]:
    """
    Derive the Cloudinary public id from a delivery URL.

    Everything after the segment following "upload" (the version), minus
    the file extension:
    https://res.cloudinary.com/demo/image/upload/v123/folder/pic.jpg -> folder/pic

    Returns:
        Public id, or None when the URL has no "upload" segment
    """
    if not url:
        return None
    parts = url.split("/")
    if "upload" not in parts:
        return None
    upload_index = parts.index("upload")
    with_extension = "/".join(parts[upload_index + 2:])
    dot = with_extension.rfind(".")
    public_id = with_extension[:dot] if dot != -1 else with_extension
    return public_id or None


class MediaStore:
    """
    Cloudinary-backed image store.

    When credentials are not configured every call is skipped with a warning.
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
    ):
        self.enabled = bool(cloud_name and api_key and api_secret)
        if self.enabled:
            cloudinary.config(
                cloud_name=cloud_name,
                api_key=api_key,
                api_secret=api_secret,
                secure=True,
            )

    def purge_images(self, urls: Iterable[str]) -> int:
        """
        Delete the given images. Never raises.

        Args:
            urls: Image delivery URLs

        Returns:
            Number of public ids submitted for deletion
        """
        public_ids: List[str] = [pid for pid in map(public_id_from_url, urls) if pid]
        if not public_ids:
            return 0

        if not self.enabled:
            logger.warning("media_cleanup_skipped", reason="cloudinary_not_configured", count=len(public_ids))
            return 0

        try:
            if len(public_ids) == 1:
                cloudinary.uploader.destroy(public_ids[0], resource_type="image")
            else:
                cloudinary.api.delete_resources(public_ids, resource_type="image")
        except Exception as e:
            logger.error(
                "media_cleanup_failed",
                public_ids=public_ids,
                error=str(e),
                error_type=type(e).__name__,
            )
            return 0

        logger.info("media_cleanup_completed", count=len(public_ids))
        return len(public_ids)


def build_media_store() -> MediaStore:
    return MediaStore(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
    )
