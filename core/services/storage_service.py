# =============================================================================
# core/services/storage_service.py - Media Storage Operations
# =============================================================================
# Handles media upload/listing/removal in the portal's storage bucket.
#
# Layout (one bucket, one folder per asset type):
#   <bucket>/EVENT/<object>          event banners
#   <bucket>/TEAM_PROFILE/<object>   member portraits
#   <bucket>/EVENT PHOTOS/<object>   gallery photos and videos
#
# Object names are "<epoch millis>_<6 hex>_<original name without spaces>" so
# uploads never collide and sorting by name descending lists newest first.
# =============================================================================

import logging
import re
import time
import uuid
from dataclasses import dataclass
from urllib.parse import unquote, urlparse

from app.config import settings
from core.backend import FileStore
from core.models.console import ContentCategory
from core.models.media import (
    PLACEHOLDER_NAME,
    HomePhoto,
    MediaAsset,
    is_image_name,
    is_video_name,
)

logger = logging.getLogger(__name__)

GALLERY_LIST_LIMIT = 100
HOME_SCAN_LIMIT = 15
HOME_PHOTO_COUNT = 5


@dataclass(frozen=True)
class MediaUpload:
    """A file received from the operator, before renaming."""
    filename: str
    content: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class StoredObject:
    """Where an upload ended up."""
    path: str
    url: str


# =============================================================================
# Naming Helpers
# =============================================================================

def unique_object_name(filename: str, now_ms: int | None = None) -> str:
    """
    Build a collision-free object name for an upload.

    Example:
        unique_object_name("Tech Fest.jpg", now_ms=1718000000000)
        # "1718000000000_9f2c1a_TechFest.jpg"
    """
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    cleaned = re.sub(r"\s+", "", filename or "") or "upload"
    return f"{millis}_{uuid.uuid4().hex[:6]}_{cleaned}"


def filename_from_url(url: str | None) -> str | None:
    """
    Extract the object name from a stored public URL.

    Example:
        filename_from_url("https://x.supabase.co/storage/v1/object/public/Gallery/TEAM_PROFILE/123_pic.jpg")
        # "123_pic.jpg"
    """
    if not url or not url.strip():
        return None
    path = unquote(urlparse(url.strip()).path)
    name = path.rstrip("/").rsplit("/", 1)[-1]
    return name or None


def folder_for(category: ContentCategory) -> str:
    """Storage folder that holds media for a console category."""
    if category == ContentCategory.EVENTS:
        return settings.EVENT_IMAGE_FOLDER
    if category == ContentCategory.MEMBERS:
        return settings.MEMBER_IMAGE_FOLDER
    if category == ContentCategory.GALLERY:
        return settings.GALLERY_FOLDER
    raise ValueError(f"{category.value} has no storage folder")


def photo_label(name: str) -> str:
    """Caption for a home carousel slide: name before the first dot, underscores as spaces."""
    return name.split(".")[0].replace("_", " ")


class StorageService:
    """
    Service for the media bucket.

    Backend failures propagate as BackendError; callers decide whether a
    failure is fatal.
    """

    def __init__(self, files: FileStore, bucket: str | None = None):
        self.files = files
        self.bucket = bucket or settings.STORAGE_BUCKET

    def object_path(self, folder: str, name: str) -> str:
        return f"{folder}/{name}"

    def public_url(self, path: str) -> str:
        return self.files.get_public_url(self.bucket, path)

    def upload_media(self, folder: str, uploads: list[MediaUpload]) -> list[StoredObject]:
        """
        Upload a batch of files under unique names.

        Args:
            folder: Target folder inside the bucket
            uploads: Files as received from the operator

        Returns:
            One StoredObject per upload, in input order

        Raises:
            BackendError: On the first failed upload (earlier ones stay stored)
        """
        stored: list[StoredObject] = []

        for upload in uploads:
            path = self.object_path(folder, unique_object_name(upload.filename))
            self.files.upload(self.bucket, path, upload.content, upload.content_type)
            stored.append(StoredObject(path=path, url=self.public_url(path)))

        logger.info(f"Uploaded {len(stored)} file(s) to {self.bucket}/{folder}")
        return stored

    def remove_object(self, folder: str, name: str) -> str:
        """Remove one object and return its path."""
        path = self.object_path(folder, name)
        self.files.remove(self.bucket, [path])
        return path

    def list_gallery(self, limit: int = GALLERY_LIST_LIMIT) -> list[MediaAsset]:
        """Gallery objects, newest (highest name) first, placeholders dropped."""
        folder = settings.GALLERY_FOLDER
        entries = self.files.list(self.bucket, folder, limit=limit, sort_by="name", descending=True)

        assets = []
        for entry in entries:
            if entry.name == PLACEHOLDER_NAME:
                continue
            path = self.object_path(folder, entry.name)
            assets.append(MediaAsset(
                id=entry.name,
                name=entry.name,
                path=path,
                url=self.public_url(path),
                is_video=is_video_name(entry.name),
            ))
        return assets

    def latest_photos(
        self,
        count: int = HOME_PHOTO_COUNT,
        scan: int = HOME_SCAN_LIMIT,
    ) -> list[HomePhoto]:
        """Newest gallery images for the home carousel (videos and folders skipped)."""
        folder = settings.GALLERY_FOLDER
        entries = self.files.list(self.bucket, folder, limit=scan, sort_by="name", descending=True)

        photos = [
            HomePhoto(
                url=self.public_url(self.object_path(folder, entry.name)),
                label=photo_label(entry.name),
            )
            for entry in entries
            if entry.name != PLACEHOLDER_NAME
            and entry.metadata is not None
            and is_image_name(entry.name)
        ]
        return photos[:count]
