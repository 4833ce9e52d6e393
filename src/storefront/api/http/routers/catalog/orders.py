"""Order API router.

Orders keep a JSON snapshot of the shipping address taken when the order is
placed (or its address changes); views read the carrier data from it.
"""

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from src.storefront.api.http.deps import (
    get_app_config,
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
    validation_error,
)
from src.storefront.core.formatting import (
    delivery_status_label,
    epoch_to_date,
    image_urls,
    money,
    payment_date,
    payment_status_label,
    split_variant,
    timestamp,
    to_epoch,
)
from src.storefront.core.listing import ListParams, ListQueryEngine
from src.storefront.core.services import StorefrontUrls
from src.storefront.entities.catalog.customer import country_display_name
from src.storefront.entities.catalog.order import (
    SHIPPING_ONLY_KEYS,
    OrderCreateBody,
    OrderDetailTable,
    OrderPatchBody,
    OrderRepository,
    OrderTable,
)
from src.storefront.entities.catalog.upload import UploadRepository
from src.storefront.runtime.config.config_data import ConfigData

router = APIRouter(prefix="/orders", tags=["orders"])

SORTABLE = {
    "id": OrderTable.id,
    "delivery_status": OrderTable.delivery_status,
    "payment_type": OrderTable.payment_type,
    "payment_status": OrderTable.payment_status,
    "grand_total": OrderTable.grand_total,
    "date": OrderTable.date,
    "created_at": OrderTable.created_at,
    "updated_at": OrderTable.updated_at,
}

POINT_OF_SALE = "LOJA VIRTUAL"
SHIPMENT_INTEGRATOR = "Melhor Envio"


def _shipping(row: OrderTable) -> dict:
    return row.shipping_address if isinstance(row.shipping_address, dict) else {}


def order_summary(row: OrderTable, detail: OrderDetailTable | None) -> dict:
    shipping = _shipping(row)
    details = row.payment_details if isinstance(row.payment_details, dict) else {}
    return {
        "status_pagamento": payment_status_label(row.payment_status),
        "status_entrega": delivery_status_label(row.delivery_status),
        "id": row.id,
        "date": epoch_to_date(row.date),
        "customer_id": row.user_id,
        "partial_total": money(detail.price if detail else 0),
        "taxes": money(detail.tax if detail else 0),
        "discount": money(row.coupon_discount),
        "point_sale": POINT_OF_SALE,
        "shipment": shipping.get("correios"),
        "shipment_value": money(shipping.get("valor_correios")),
        "value_1": money(row.grand_total),
        "payment_type": row.payment_type,
        "payment_form": details.get("card_type", ""),
        "total": money(row.grand_total),
        "payment_date": payment_date(row.payment_details),
        "modified": timestamp(row.updated_at),
        "has_payment": 1 if row.payment_status == "paid" else 0,
        "has_shipment": 1 if shipping.get("correios") else 0,
        "ProductsSold": {"id": detail.product_id if detail else None},
    }


def order_detail(row: OrderTable, detail: OrderDetailTable | None) -> dict:
    view = order_summary(row, detail)
    shipping = _shipping(row)
    view.update(
        shipment_value=money(detail.shipping_cost if detail else 0),
        delivered=1 if row.delivery_status == "delivered" else 0,
        shipping_cancelled=1 if row.delivery_status == "cancelled" else 0,
        discount_coupon=money(row.coupon_discount),
        installment="1",
        sending_code=row.tracking_code,
        billing_address={
            key: value for key, value in shipping.items() if key not in SHIPPING_ONLY_KEYS
        },
        # payment gateway settings are not stored by this service
        payment_method_id=None,
        payment_method=row.payment_type,
        shipment_integrator=SHIPMENT_INTEGRATOR,
        is_traceable=1 if row.tracking_code else 0,
        tracking_url="",
        Payment=row.payment_details,
    )
    return view


def _photo_ids(photos: str | None) -> list[int]:
    return [int(part) for part in (photos or "").split(",") if part.strip().isdigit()]


def products_sold_view(
    repository: OrderRepository, uploads: UploadRepository, urls: StorefrontUrls, order_id: int
) -> list[dict]:
    rows = repository.products_sold(order_id)
    locations = uploads.locations(
        upload_id
        for _, product, *_ in rows
        if product is not None
        for upload_id in _photo_ids(product.photos)
    )
    items = []
    for detail, product, category, main_category, variant_id, sku in rows:
        color, size = split_variant(detail.variation)
        photos = _photo_ids(product.photos) if product else []
        parent_id = category.parent_id if category else 0
        items.append(
            {
                "ProductSold": {
                    "product_id": detail.product_id,
                    "quantity": detail.quantity,
                    "order_id": detail.order_id,
                    "name": product.name if product else None,
                    "Sku": [
                        {"type": "Cor", "value": color},
                        {"type": "Tamanho", "value": size},
                    ],
                    "price": money(product.unit_price if product else detail.price),
                    "reference": sku if sku and sku.isdigit() else None,
                    "weight": product.weight if product else None,
                    "variant_id": variant_id,
                    "ProductSoldImage": [
                        image_urls(locations[upload_id], urls)
                        for upload_id in photos
                        if upload_id in locations
                    ],
                    "Category": {
                        "id": category.id if category else None,
                        "name": category.name if category else None,
                        "main_category_id": parent_id or None,
                        "main_category_name": main_category if parent_id else None,
                    },
                    "url": urls.links(f"produto/{product.slug}") if product else None,
                }
            }
        )
    return items


def _customer_block(repository: OrderRepository, user_id: int) -> dict:
    found = repository.customer_with_address(user_id)
    if found is None:
        return {"id": user_id}
    user, address, country, state, city = found
    country = country_display_name(country)
    return {
        "id": user.id,
        "name": user.name,
        "cpf": user.cpf,
        "email": user.email,
        "phone": user.phone,
        "address": address.address if address else None,
        "zip_code": address.postal_code if address else None,
        "state": state,
        "city": city,
        "country": country,
        "created": timestamp(user.created_at),
        "modified": timestamp(user.updated_at),
        "Extensions": {"profile": user.user_type},
        "CustomerAddress": {
            "id": address.id if address else None,
            "customer_id": user.id,
            "address": address.address if address else None,
            "zip_code": address.postal_code if address else None,
            "state": state,
            "city": city,
            "country": country,
            "latitude": address.latitude if address else None,
            "longitude": address.longitude if address else None,
            "default_address": address.set_default if address else None,
        },
    }


def _check_user(repository: OrderRepository, user_id: int):
    if not repository.user_exists(user_id):
        raise field_error("user_id", f"There is no user with the given user_id: {user_id}")


def _snapshot(repository: OrderRepository, address_id: int) -> dict:
    snapshot = repository.shipping_snapshot(address_id)
    if snapshot is None:
        raise field_error(
            "shipping_address_id",
            f"There is no address with the given shipping_address_id: {address_id}",
        )
    return snapshot


@router.get("")
def list_orders(
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
    session: Session = Depends(get_db_session),
) -> dict:
    """List orders with their status labels and totals."""

    def view(rows: list[OrderTable]) -> list[dict]:
        details = OrderRepository(session).first_details(row.id for row in rows)
        return [{"Order": order_summary(row, details.get(row.id))} for row in rows]

    data = engine.run(
        select(OrderTable),
        params,
        sortable=SORTABLE,
        id_column=OrderTable.id,
        collection="Orders",
        view=view,
    )
    return ok(data)


@router.post("", status_code=201)
@router.post("/create", status_code=201)
def create_order(
    body: OrderCreateBody,
    session: Session = Depends(get_db_session),
    config: ConfigData = Depends(get_app_config),
):
    """Place an order: combined order, order and order lines in one transaction.

    Line prices are taken from the products' unit price and the shipping
    cost from the address' carrier quote.
    """
    payload = body.order
    repository = OrderRepository(session)
    _check_user(repository, payload.user_id)
    snapshot = _snapshot(repository, payload.shipping_address_id)

    prices = repository.product_prices(item.product_id for item in payload.details)
    errors = {
        f"details.{index}.product_id": [
            f"There is no product with the given product_id: {item.product_id}"
        ]
        for index, item in enumerate(payload.details)
        if item.product_id not in prices
    }
    if errors:
        raise validation_error(errors)

    seller_id = config.storefront.seller_id
    order = OrderTable(
        user_id=payload.user_id,
        seller_id=seller_id,
        shipping_address=snapshot,
        delivery_status=payload.delivery_status,
        payment_type=payload.payment_type,
        payment_status=payload.payment_status,
        payment_details=payload.payment_details,
        grand_total=payload.grand_total,
        coupon_discount=payload.coupon_discount,
        code=payload.code,
        tracking_code=payload.tracking_code,
        date=to_epoch(payload.date),
        ids_traking=payload.ids_traking,
        url_traking=str(payload.url_traking) if payload.url_traking else None,
    )
    details = [
        OrderDetailTable(
            order_id=0,
            seller_id=seller_id,
            product_id=item.product_id,
            variation=item.variation,
            price=prices[item.product_id],
            shipping_cost=snapshot.get("valor_correios") or 0,
            quantity=item.quantity,
            payment_status=payload.payment_status,
            delivery_status=payload.delivery_status,
        )
        for item in payload.details
    ]
    with transaction(session):
        repository.place(order, details)
    return created("Order", "order_id", order.id)


@router.get("/{order_id}")
def get_order(order_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Get an order with billing and payment data."""
    repository = OrderRepository(session)
    row = repository.get(parse_id(order_id))
    if row is None:
        raise not_found()
    detail = repository.first_details([row.id]).get(row.id)
    return ok({"Order": order_detail(row, detail)})


@router.get("/{order_id}/complete")
def get_order_complete(
    order_id: str,
    session: Session = Depends(get_db_session),
    urls: StorefrontUrls = Depends(get_urls),
) -> dict:
    """Get an order with its customer, address and sold products."""
    repository = OrderRepository(session)
    row = repository.get(parse_id(order_id))
    if row is None:
        raise not_found()
    detail = repository.first_details([row.id]).get(row.id)
    view = order_detail(row, detail)
    customer = _customer_block(repository, row.user_id)
    customer["ProductsSold"] = products_sold_view(
        repository, UploadRepository(session), urls, row.id
    )
    view["Customer"] = customer
    return ok({"Order": view})


@router.put("/{order_id}", status_code=201)
def update_order(
    order_id: str,
    body: OrderPatchBody,
    session: Session = Depends(get_db_session),
):
    """Update the supplied fields of an order.

    A new ``shipping_address_id`` replaces the address snapshot.
    """
    repository = OrderRepository(session)
    row = repository.get(parse_id(order_id))
    if row is None:
        raise not_found()

    changes = body.order.changes()
    if changes.get("user_id") is not None:
        _check_user(repository, changes["user_id"])
    address_id = changes.pop("shipping_address_id", None)
    if address_id is not None:
        changes["shipping_address"] = _snapshot(repository, address_id)
    if "date" in changes:
        changes["date"] = to_epoch(changes["date"])
    if changes.get("url_traking") is not None:
        changes["url_traking"] = str(changes["url_traking"])
    for key in ("user_id", "delivery_status", "payment_status", "payment_type", "grand_total"):
        if key in changes and changes[key] is None:
            del changes[key]

    with transaction(session):
        repository.write(row, changes)
    return updated("Order", "order_id", row.id)


@router.delete("/{order_id}")
def delete_order(order_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Delete an order with its lines and combined order."""
    repository = OrderRepository(session)
    row = repository.get(parse_id(order_id))
    if row is None:
        raise not_found()
    with transaction(session):
        repository.delete(row)
    return deleted("Order")
