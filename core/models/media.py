# =============================================================================
# core/models/media.py - Media Asset Schemas
# =============================================================================
# Media assets are storage objects, not rows. Their only metadata is the
# filename; whether an asset is a video is derived from its extension.
# =============================================================================

from pydantic import BaseModel, Field

VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")

# Supabase keeps this object in otherwise empty folders
PLACEHOLDER_NAME = ".emptyFolderPlaceholder"


def is_video_name(name: str) -> bool:
    return name.lower().endswith(VIDEO_EXTENSIONS)


def is_image_name(name: str) -> bool:
    return name.lower().endswith(IMAGE_EXTENSIONS)


class MediaAsset(BaseModel):
    """A gallery object with its public URL."""

    # `id` mirrors `name` so console listings address rows and media alike
    id: str = Field(..., description="Object name inside the gallery folder")
    name: str
    path: str = Field(..., description="Path inside the bucket (folder/name)")
    url: str
    is_video: bool = False


class HomePhoto(BaseModel):
    """Slide of the home page photo carousel."""

    url: str
    label: str
