from collections.abc import Iterable

from sqlalchemy import delete, func
from sqlmodel import Session, select

from .table import AttributeTable, AttributeValueTable


class AttributeRepository:
    """Data-access layer for attributes and their values."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, attribute_id: int) -> AttributeTable | None:
        return self._session.get(AttributeTable, attribute_id)

    def get_by_name(self, name: str) -> AttributeTable | None:
        statement = select(AttributeTable).where(
            func.lower(AttributeTable.name) == name.lower()
        )
        return self._session.exec(statement).first()

    def all(self) -> list[AttributeTable]:
        statement = select(AttributeTable).order_by(AttributeTable.id)
        return list(self._session.exec(statement).all())

    def values(self, attribute_id: int) -> list[AttributeValueTable]:
        statement = (
            select(AttributeValueTable)
            .where(AttributeValueTable.attribute_id == attribute_id)
            .order_by(AttributeValueTable.id)
        )
        return list(self._session.exec(statement).all())

    def get_value(self, value_id: int) -> AttributeValueTable | None:
        return self._session.get(AttributeValueTable, value_id)

    def find_value(
        self, attribute_id: int, value: str, *, exclude_id: int | None = None
    ) -> AttributeValueTable | None:
        statement = select(AttributeValueTable).where(
            AttributeValueTable.attribute_id == attribute_id,
            AttributeValueTable.value == value,
        )
        if exclude_id is not None:
            statement = statement.where(AttributeValueTable.id != exclude_id)
        return self._session.exec(statement).first()

    def add(self, row: AttributeTable, values: Iterable[str] = ()) -> AttributeTable:
        self._session.add(row)
        self._session.flush()
        self.replace_values(row.id, values, clear=False)
        return row

    def add_value(self, row: AttributeValueTable) -> AttributeValueTable:
        self._session.add(row)
        self._session.flush()
        return row

    def replace_values(
        self, attribute_id: int, values: Iterable[str], *, clear: bool = True
    ) -> None:
        if clear:
            self._session.exec(
                delete(AttributeValueTable).where(
                    AttributeValueTable.attribute_id == attribute_id
                )
            )
        for value in values:
            self._session.add(AttributeValueTable(attribute_id=attribute_id, value=value))
        self._session.flush()

    def delete(self, row: AttributeTable) -> None:
        self._session.exec(
            delete(AttributeValueTable).where(AttributeValueTable.attribute_id == row.id)
        )
        self._session.delete(row)
        self._session.flush()

    def delete_value(self, row: AttributeValueTable) -> None:
        self._session.delete(row)
        self._session.flush()
