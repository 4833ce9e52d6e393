from sqlalchemy import delete, func
from sqlmodel import Session, select

from src.storefront.entities.catalog.customer.table import UserTable

from .table import CouponTable, CouponUsageTable


class CouponRepository:
    """Data-access layer for coupons and their usages."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, coupon_id: int) -> CouponTable | None:
        return self._session.get(CouponTable, coupon_id)

    def usage_count(self, coupon_id: int) -> int:
        statement = select(func.count(CouponUsageTable.id)).where(
            CouponUsageTable.coupon_id == coupon_id
        )
        return self._session.exec(statement).one()

    def users(self, coupon_id: int) -> list[dict]:
        statement = (
            select(CouponUsageTable, UserTable)
            .join(UserTable, UserTable.id == CouponUsageTable.user_id, isouter=True)
            .where(CouponUsageTable.coupon_id == coupon_id)
            .order_by(CouponUsageTable.id)
        )
        return [
            {
                "id": usage.user_id,
                "name": user.name if user else None,
                "email": user.email if user else None,
                "cpf": user.cpf if user else None,
            }
            for usage, user in self._session.exec(statement).all()
        ]

    def add(self, row: CouponTable) -> CouponTable:
        self._session.add(row)
        self._session.flush()
        return row

    def delete(self, row: CouponTable) -> None:
        """Remove the coupon's usage rows, then the coupon."""
        self._session.exec(
            delete(CouponUsageTable).where(CouponUsageTable.coupon_id == row.id)
        )
        self._session.delete(row)
        self._session.flush()
