"""Uploaded media files referenced by categories and products."""

from sqlmodel import Field

from src.storefront.entities.core import EntityTable


class UploadTable(EntityTable, table=True):
    """A stored file (``file_name``) or a remote image (``external_link``)."""

    __tablename__ = "uploads"

    file_original_name: str | None = None
    file_name: str | None = None
    external_link: str | None = None
    user_id: int | None = None
    file_size: int | None = None
    extension: str | None = Field(default=None, max_length=16)
    type: str | None = Field(default=None, max_length=32)

    @property
    def location(self) -> str | None:
        return self.file_name or self.external_link
