from collections.abc import Iterable

from sqlalchemy import exists, update
from sqlmodel import Session, col, select

from src.storefront.entities.catalog.product.table import ProductTable
from src.storefront.entities.core import utcnow

from .table import CategoryTable


class CategoryRepository:
    """Data-access layer for categories."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, category_id: int) -> CategoryTable | None:
        return self._session.get(CategoryTable, category_id)

    def exists(self, category_id: int) -> bool:
        return self.get(category_id) is not None

    def slug_taken(self, slug: str, *, exclude_id: int | None = None) -> bool:
        statement = select(CategoryTable.id).where(CategoryTable.slug == slug)
        if exclude_id is not None:
            statement = statement.where(CategoryTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def has_product(self, category_id: int) -> bool:
        statement = select(
            exists().where(ProductTable.category_id == category_id)
        )
        return bool(self._session.exec(statement).one())

    def children(self, category_id: int) -> list[CategoryTable]:
        statement = (
            select(CategoryTable)
            .where(CategoryTable.parent_id == category_id)
            .where(CategoryTable.id != category_id)
            .order_by(CategoryTable.id)
        )
        return list(self._session.exec(statement).all())

    def names(self, category_ids: Iterable[int]) -> dict[int, str]:
        ids = {category_id for category_id in category_ids if category_id}
        if not ids:
            return {}
        statement = select(CategoryTable.id, CategoryTable.name).where(
            col(CategoryTable.id).in_(ids)
        )
        return dict(self._session.exec(statement).all())

    def ancestry(self, category_id: int) -> list[int]:
        """Ids from ``category_id`` up to its root, stopping on cycles."""
        chain: list[int] = []
        current = self.get(category_id) if category_id else None
        while current is not None and current.id not in chain:
            chain.append(current.id)
            current = self.get(current.parent_id) if current.parent_id else None
        return chain

    def add(self, row: CategoryTable) -> CategoryTable:
        self._session.add(row)
        self._session.flush()
        return row

    def delete(self, row: CategoryTable) -> None:
        """Detach products and sub-categories, then remove the category."""
        now = utcnow()
        self._session.exec(
            update(ProductTable)
            .where(ProductTable.category_id == row.id)
            .values(category_id=0, updated_at=now)
        )
        self._session.exec(
            update(CategoryTable)
            .where(CategoryTable.parent_id == row.id)
            .values(parent_id=0, level=0, updated_at=now)
        )
        self._session.delete(row)
        self._session.flush()
