# =============================================================================
# core/models/pages.py - Public Page Payloads
# =============================================================================

from pydantic import BaseModel, Field

from .media import HomePhoto
from .notice import NoticeDigestItem


class HomeDigest(BaseModel):
    """
    Data behind the home page.

    `connection_error` is set when the notice digest could not be fetched;
    the page still renders whatever photos were found.
    """

    photos: list[HomePhoto] = Field(default_factory=list)
    notices: list[NoticeDigestItem] = Field(default_factory=list)
    connection_error: bool = False


class ContactDetails(BaseModel):
    """Static contact block plus the endpoint the contact form posts to."""

    email: str
    phone: str = ""
    address: str = ""
    form_action: str
