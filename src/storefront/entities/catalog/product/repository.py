from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy import delete, func
from sqlmodel import Session, col, select

from src.storefront.core.formatting import to_epoch
from src.storefront.entities.catalog.order.table import OrderDetailTable, OrderTable
from src.storefront.entities.catalog.upload import UploadRepository

from .entity import product_slug
from .table import BrandTable, ProductStockTable, ProductTable

PAID = "paid"


class ProductRepository:
    """Data-access layer for products."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, product_id: int) -> ProductTable | None:
        return self._session.get(ProductTable, product_id)

    def exists(self, product_id: int) -> bool:
        return self.get(product_id) is not None

    def existing_ids(self, product_ids: Iterable[int]) -> set[int]:
        ids = set(product_ids)
        if not ids:
            return set()
        statement = select(ProductTable.id).where(col(ProductTable.id).in_(ids))
        return set(self._session.exec(statement).all())

    def brand_names(self, brand_ids: Iterable[int | None]) -> dict[int, str]:
        ids = {brand_id for brand_id in brand_ids if brand_id}
        if not ids:
            return {}
        rows = self._session.exec(select(BrandTable).where(col(BrandTable.id).in_(ids)))
        return {row.id: row.name for row in rows}

    def stocks(self, product_ids: Iterable[int]) -> dict[int, list[ProductStockTable]]:
        """Variants per product, ordered by variant name."""
        ids = set(product_ids)
        grouped: dict[int, list[ProductStockTable]] = defaultdict(list)
        if not ids:
            return grouped
        statement = (
            select(ProductStockTable)
            .where(col(ProductStockTable.product_id).in_(ids))
            .order_by(ProductStockTable.variant, ProductStockTable.id)
        )
        for row in self._session.exec(statement):
            grouped[row.product_id].append(row)
        return grouped

    def quantity_sold(self, product_ids: Iterable[int]) -> dict[int, int]:
        """Number of paid order lines per product."""
        ids = set(product_ids)
        if not ids:
            return {}
        statement = (
            select(OrderDetailTable.product_id, func.count(OrderDetailTable.id))
            .where(col(OrderDetailTable.product_id).in_(ids))
            .where(OrderDetailTable.payment_status == PAID)
            .group_by(OrderDetailTable.product_id)
        )
        return dict(self._session.exec(statement).all())

    def sold_statement(self, product_id: int):
        """Order lines of ``product_id`` joined with their order and variant."""
        return (
            select(
                OrderDetailTable,
                OrderTable.id.label("sold_order_id"),
                ProductStockTable.id.label("variation_id"),
                ProductStockTable.sku.label("reference"),
            )
            .join(OrderTable, OrderTable.id == OrderDetailTable.order_id, isouter=True)
            .join(
                ProductStockTable,
                (ProductStockTable.product_id == OrderDetailTable.product_id)
                & (ProductStockTable.variant == OrderDetailTable.variation),
                isouter=True,
            )
            .where(OrderDetailTable.product_id == product_id)
        )

    def add(self, row: ProductTable) -> ProductTable:
        self._session.add(row)
        self._session.flush()
        return row

    def write(self, row: ProductTable, changes: dict) -> ProductTable:
        """Copy payload ``changes`` (already validated) onto the product row."""
        uploads = UploadRepository(self._session)
        columns: dict = {}

        simple = {
            "category_id": "category_id",
            "unit": "unit",
            "unit_price": "unit_price",
            "current_stock": "current_stock",
            "weight": "weight",
            "min_qty": "min_qty",
            "low_stock_quantity": "low_stock_quantity",
            "barcode": "barcode",
            "description": "description",
        }
        for key, column in simple.items():
            if key in changes:
                columns[column] = changes[key]

        flags = {
            "is_featured": "featured",
            "is_todays_deal": "todays_deal",
            "published": "published",
            "is_refundable": "refundable",
        }
        for key, column in flags.items():
            if key in changes and changes[key] is not None:
                columns[column] = 1 if changes[key] else 0

        if changes.get("name"):
            columns["name"] = changes["name"]
            columns["slug"] = product_slug(changes["name"])
        if "tags" in changes:
            columns["tags"] = ",".join(changes["tags"] or [])

        images = changes.get("images") or {}
        if images.get("gallery"):
            ids = [uploads.add_link(str(url), user_id=row.user_id) for url in images["gallery"]]
            columns["photos"] = ",".join(str(upload_id) for upload_id in ids)
        if images.get("miniature"):
            columns["thumbnail_img"] = uploads.add_link(
                str(images["miniature"]), user_id=row.user_id
            )

        video = changes.get("video") or {}
        if video.get("provider"):
            columns["video_provider"] = video["provider"]
        if video.get("link"):
            columns["video_link"] = str(video["link"])

        discount = changes.get("discount")
        if discount:
            columns["discount_type"] = discount["type"]
            columns["discount"] = discount["value"]
            columns["discount_start_date"] = to_epoch(discount.get("discount_start_date"))
            columns["discount_end_date"] = to_epoch(discount.get("discount_end_date"))
        elif changes.get("is_discounted") is False:
            columns.update(
                discount=0,
                discount_type=None,
                discount_start_date=None,
                discount_end_date=None,
            )

        metatag = changes.get("metatag") or {}
        if "title" in metatag:
            columns["meta_title"] = metatag["title"]
        if "description" in metatag:
            columns["meta_description"] = metatag["description"]
        if metatag.get("image"):
            columns["meta_img"] = uploads.add_link(str(metatag["image"]), user_id=row.user_id)

        row.apply(columns)
        self._session.add(row)
        self._session.flush()
        return row

    def delete(self, row: ProductTable) -> None:
        """Remove the product's variants, then the product."""
        self._session.exec(
            delete(ProductStockTable).where(ProductStockTable.product_id == row.id)
        )
        self._session.delete(row)
        self._session.flush()


class VariantRepository:
    """Data-access layer for product variants (``product_stocks``)."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, variant_id: int) -> ProductStockTable | None:
        return self._session.get(ProductStockTable, variant_id)

    def quantity_sold(self, rows: Iterable[ProductStockTable]) -> dict[int, int]:
        """Paid order lines per variant, matched on product and variant name."""
        result = {}
        for row in rows:
            statement = (
                select(func.count(OrderDetailTable.id))
                .join(OrderTable, OrderTable.id == OrderDetailTable.order_id)
                .where(OrderTable.payment_status == PAID)
                .where(OrderDetailTable.product_id == row.product_id)
                .where(OrderDetailTable.variation == row.variant)
            )
            result[row.id] = self._session.exec(statement).one()
        return result

    def add(self, row: ProductStockTable) -> ProductStockTable:
        self._session.add(row)
        self._session.flush()
        return row

    def register_options(
        self,
        product: ProductTable,
        *,
        color_codes: list[str],
        attribute_values: list[tuple[int, str]],
    ) -> None:
        """Merge a new variant's colors and attribute choices into the product."""
        colors = list(product.colors or [])
        colors.extend(code for code in color_codes if code not in colors)

        attributes = list(product.attributes or [])
        choice_options = [
            {**option, "values": list(option.get("values", []))}
            for option in product.choice_options or []
        ]
        for attribute_id, value in attribute_values:
            if str(attribute_id) not in attributes:
                attributes.append(str(attribute_id))
            for option in choice_options:
                if option.get("attribute_id") == attribute_id:
                    if value not in option["values"]:
                        option["values"] = [*option["values"], value]
                    break
            else:
                choice_options.append({"attribute_id": attribute_id, "values": [value]})

        # JSON columns only persist on reassignment
        product.apply(
            {
                "colors": colors,
                "attributes": attributes,
                "choice_options": choice_options,
                "variant_product": 1,
            }
        )
        self._session.add(product)

    def delete(self, row: ProductStockTable) -> None:
        self._session.delete(row)
        self._session.flush()
