from collections.abc import Iterable

from sqlmodel import Session, col, select

from .table import UploadTable


class UploadRepository:
    """Data-access layer for uploads."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def location(self, upload_id: int | None) -> str | None:
        if not upload_id:
            return None
        row = self._session.get(UploadTable, upload_id)
        return row.location if row else None

    def locations(self, upload_ids: Iterable[int]) -> dict[int, str]:
        """Map upload id to file name (or remote link) for every id that exists."""
        ids = {upload_id for upload_id in upload_ids if upload_id}
        if not ids:
            return {}
        rows = self._session.exec(
            select(UploadTable).where(col(UploadTable.id).in_(ids))
        ).all()
        return {row.id: row.location for row in rows if row.location}

    def add_link(self, url: str, *, user_id: int | None = None) -> int:
        """Record a remote image and return its upload id."""
        row = UploadTable(external_link=url, user_id=user_id, type="image")
        self._session.add(row)
        self._session.flush()
        return row.id
