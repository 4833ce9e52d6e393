from sqlmodel import Session, select

from .table import ColorTable


class ColorRepository:
    """Data-access layer for colors."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, color_id: int) -> ColorTable | None:
        return self._session.get(ColorTable, color_id)

    def get_by_code(self, code: str) -> ColorTable | None:
        statement = select(ColorTable).where(ColorTable.code == code)
        return self._session.exec(statement).first()

    def get_by_name(self, name: str) -> ColorTable | None:
        statement = select(ColorTable).where(ColorTable.name == name)
        return self._session.exec(statement).first()

    def add(self, row: ColorTable) -> ColorTable:
        self._session.add(row)
        self._session.flush()
        return row

    def delete(self, row: ColorTable) -> None:
        self._session.delete(row)
        self._session.flush()
