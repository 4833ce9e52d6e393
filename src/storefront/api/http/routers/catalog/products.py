"""Product API router."""

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from src.storefront.api.http.deps import (
    get_db_session,
    get_list_engine,
    get_list_params,
    get_urls,
)
from src.storefront.api.http.responses import (
    created,
    deleted,
    field_error,
    not_found,
    ok,
    parse_id,
    transaction,
    updated,
)
from src.storefront.core.formatting import (
    NO_DATE,
    epoch_to_date,
    image_urls,
    money,
    promotional_price,
    split_variant,
    timestamp,
)
from src.storefront.core.listing import ListParams, ListQueryEngine
from src.storefront.core.services import StorefrontUrls
from src.storefront.entities.catalog.category import CategoryRepository
from src.storefront.entities.catalog.customer import CustomerRepository
from src.storefront.entities.catalog.order import OrderDetailTable
from src.storefront.entities.catalog.product import (
    ProductCreateBody,
    ProductPatchBody,
    ProductRepository,
    ProductTable,
    product_slug,
)
from src.storefront.entities.catalog.upload import UploadRepository

router = APIRouter(prefix="/products", tags=["products"])

SORTABLE = {
    "id": ProductTable.id,
    "name": ProductTable.name,
    "unit_price": ProductTable.unit_price,
    "current_stock": ProductTable.current_stock,
    "created_at": ProductTable.created_at,
    "updated_at": ProductTable.updated_at,
}

SOLD_SORTABLE = {
    "id": OrderDetailTable.id,
    "price": OrderDetailTable.price,
    "quantity": OrderDetailTable.quantity,
    "created_at": OrderDetailTable.created_at,
}


def _photo_ids(row: ProductTable) -> list[int]:
    return [int(part) for part in (row.photos or "").split(",") if part.strip().isdigit()]


class ProductViews:
    """Builds product view models, loading related rows once per batch."""

    def __init__(self, session: Session, urls: StorefrontUrls, rows: list[ProductTable]):
        self._session = session
        self._urls = urls
        products = ProductRepository(session)
        ids = [row.id for row in rows]
        self.brands = products.brand_names(row.brand_id for row in rows)
        self.categories = CategoryRepository(session).names(row.category_id for row in rows)
        self.stocks = products.stocks(ids)
        self.sold = products.quantity_sold(ids)
        self.locations = UploadRepository(session).locations(
            upload_id for row in rows for upload_id in _photo_ids(row)
        )

    def summary(self, row: ProductTable) -> dict:
        stocks = self.stocks.get(row.id, [])
        sizes, colors = [], []
        for stock in stocks:
            color, size = split_variant(stock.variant)
            if size and size not in sizes:
                sizes.append(size)
            if color and color not in colors:
                colors.append(color)
        images = [
            image_urls(self.locations.get(upload_id), self._urls) for upload_id in _photo_ids(row)
        ]
        return {
            "slug": row.slug,
            "id": row.id,
            "name": row.name,
            "price": money(row.unit_price),
            "promotional_price": money(
                promotional_price(row.unit_price, row.discount, row.discount_type)
            ),
            "start_promotion": epoch_to_date(row.discount_start_date) or NO_DATE,
            "end_promotion": epoch_to_date(row.discount_end_date) or NO_DATE,
            "brand": self.brands.get(row.brand_id, ""),
            "brand_id": row.brand_id or "",
            "weight": row.weight,
            "stock": row.current_stock,
            "category_id": row.category_id,
            "category_name": self.categories.get(row.category_id),
            "available": "1" if row.published else "0",
            "has_variation": "1" if row.variant_product else "0",
            "count_rating": row.rating,
            "quantity_sold": self.sold.get(row.id, 0),
            "url": self._urls.links(f"produto/{row.slug}"),
            "created": timestamp(row.created_at),
            "modified": timestamp(row.updated_at),
            "Properties": [{"tamanho": sizes, "cor": colors}] if stocks else [],
            "ProductImage": [image for image in images if image is not None],
            "Variant": [{"id": stock.id} for stock in stocks],
        }

    def detail(self, row: ProductTable) -> dict:
        view = self.summary(row)
        view["description"] = row.description
        view["percentage_discount"] = (
            money(row.discount) if row.discount_type == "percent" else money(0)
        )
        view["image"] = "1" if view["ProductImage"] else "0"
        view["all_categories"] = CategoryRepository(self._session).ancestry(row.category_id)
        return view


def _check_category(session: Session, category_id: int):
    if not CategoryRepository(session).exists(category_id):
        raise field_error("category_id", "The specified category_id does not exist")


@router.get("")
def list_products(
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
    session: Session = Depends(get_db_session),
    urls: StorefrontUrls = Depends(get_urls),
) -> dict:
    """List products with their variants, images and sales."""

    def view(rows: list[ProductTable]) -> list[dict]:
        views = ProductViews(session, urls, rows)
        return [views.summary(row) for row in rows]

    data = engine.run(
        select(ProductTable),
        params,
        sortable=SORTABLE,
        id_column=ProductTable.id,
        collection="Products",
        view=view,
    )
    return ok(data)


@router.post("", status_code=201)
@router.post("/create", status_code=201)
def create_product(body: ProductCreateBody, session: Session = Depends(get_db_session)):
    """Create a product in an existing category."""
    payload = body.product
    _check_category(session, payload.category_id)
    repository = ProductRepository(session)
    with transaction(session):
        row = repository.add(
            ProductTable(
                name=payload.name,
                slug=product_slug(payload.name),
                user_id=CustomerRepository(session).admin_id(),
                category_id=payload.category_id,
            )
        )
        repository.write(row, payload.changes())
    return created("Product", "product_id", row.id)


@router.get("/{product_id}")
def get_product(
    product_id: str,
    session: Session = Depends(get_db_session),
    urls: StorefrontUrls = Depends(get_urls),
) -> dict:
    """Get a product by ID."""
    row = ProductRepository(session).get(parse_id(product_id))
    if row is None:
        raise not_found()
    return ok({"Product": ProductViews(session, urls, [row]).detail(row)})


@router.get("/{product_id}/sold")
def get_product_sold(
    product_id: str,
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
    session: Session = Depends(get_db_session),
) -> dict:
    """Order lines that sold the product."""
    repository = ProductRepository(session)
    product = repository.get(parse_id(product_id))
    if product is None:
        raise not_found()

    def view(rows) -> list[dict]:
        return [
            {
                "ProductsSold": {
                    "product_id": detail.product_id,
                    "order_id": order_id,
                    "name": product.name,
                    "price": money(detail.price),
                    "quantity": detail.quantity,
                    "variation_id": variation_id,
                    "reference": reference,
                }
            }
            for detail, order_id, variation_id, reference in rows
        ]

    data = engine.run(
        repository.sold_statement(product.id),
        params,
        sortable=SOLD_SORTABLE,
        id_column=OrderDetailTable.id,
        collection="ProductsSolds",
        view=view,
    )
    return ok(data)


@router.put("/{product_id}", status_code=201)
def update_product(
    product_id: str,
    body: ProductPatchBody,
    session: Session = Depends(get_db_session),
):
    """Update the supplied fields of a product."""
    repository = ProductRepository(session)
    row = repository.get(parse_id(product_id))
    if row is None:
        raise not_found()

    payload = body.product
    if payload.category_id is not None:
        _check_category(session, payload.category_id)
    with transaction(session):
        repository.write(row, payload.changes())
    return updated("Product", "product_id", row.id)


@router.delete("/{product_id}")
def delete_product(product_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Delete a product and its variants."""
    repository = ProductRepository(session)
    row = repository.get(parse_id(product_id))
    if row is None:
        raise not_found()
    with transaction(session):
        repository.delete(row)
    return deleted("Product")
