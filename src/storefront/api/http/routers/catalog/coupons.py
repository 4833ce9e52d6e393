"""Discount coupon API router."""

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from src.storefront.api.http.deps import (
    get_app_config,
    get_db_session,
    get_list_engine,
    get_list_params,
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
    DISCOUNT_SYMBOLS,
    discount_value,
    epoch_to_date,
    timestamp,
    to_epoch,
)
from src.storefront.core.listing import ListParams, ListQueryEngine, page_items
from src.storefront.entities.catalog.coupon import (
    CouponCreateBody,
    CouponPatchBody,
    CouponRepository,
    CouponTable,
    check_details,
    normalize_discount,
    stored_details,
)
from src.storefront.entities.catalog.customer import CustomerRepository
from src.storefront.runtime.config.config_data import ConfigData

router = APIRouter(prefix="/coupons", tags=["coupons"])

SORTABLE = {
    "id": CouponTable.id,
    "type": CouponTable.type,
    "code": CouponTable.code,
    "discount": CouponTable.discount,
    "discount_type": CouponTable.discount_type,
    "start_date": CouponTable.start_date,
    "end_date": CouponTable.end_date,
    "created_at": CouponTable.created_at,
    "updated_at": CouponTable.updated_at,
}


def coupon_view(row: CouponTable) -> dict:
    return {
        "id": row.id,
        "created": timestamp(row.created_at),
        "updated": timestamp(row.updated_at),
        "code": row.code,
        "details": row.details,
        "starts_at": epoch_to_date(row.start_date),
        "ends_at": epoch_to_date(row.end_date),
        "value": discount_value(row.discount, row.discount_type),
        "type": row.type,
        "discount_type": DISCOUNT_SYMBOLS.get(row.discount_type, "%"),
    }


@router.get("")
def list_coupons(
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
) -> dict:
    """List discount coupons."""
    data = engine.run(
        select(CouponTable),
        params,
        sortable=SORTABLE,
        id_column=CouponTable.id,
        collection="DiscountCoupons",
        view=lambda rows: [{"DiscountCoupon": coupon_view(row)} for row in rows],
    )
    return ok(data)


@router.post("", status_code=201)
@router.post("/create", status_code=201)
def create_coupon(body: CouponCreateBody, session: Session = Depends(get_db_session)):
    """Create a coupon owned by the store administrator."""
    payload = body.coupon
    repository = CouponRepository(session)
    with transaction(session):
        row = repository.add(
            CouponTable(
                user_id=CustomerRepository(session).admin_id(),
                type=payload.type,
                code=payload.code,
                details=stored_details(payload.details),
                discount=payload.discount,
                discount_type=payload.discount_type,
                start_date=to_epoch(payload.start_date),
                end_date=to_epoch(payload.end_date),
            )
        )
    return created("Coupon", "coupon_id", row.id)


@router.get("/{coupon_id}")
def get_coupon(coupon_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Get a coupon with the customers that used it."""
    repository = CouponRepository(session)
    row = repository.get(parse_id(coupon_id))
    if row is None:
        raise not_found()
    view = coupon_view(row)
    view["total_number_of_users"] = repository.usage_count(row.id)
    view["users"] = repository.users(row.id)
    return ok({"DiscountCoupon": view})


@router.get("/{coupon_id}/products")
def get_coupon_products(
    coupon_id: str,
    params: ListParams = Depends(get_list_params),
    session: Session = Depends(get_db_session),
    config: ConfigData = Depends(get_app_config),
) -> dict:
    """Paged product ids of a product coupon."""
    row = CouponRepository(session).get(parse_id(coupon_id))
    if row is None or row.type != "product_base":
        raise not_found()
    products = [
        {"DiscountCouponProduct": {"product_id": item.get("product_id")}}
        for item in row.details or []
        if isinstance(item, dict)
    ]
    data = page_items(
        products, params, config.listing, collection="DiscountCouponProducts"
    )
    return ok(data)


@router.put("/{coupon_id}", status_code=201)
def update_coupon(
    coupon_id: str,
    body: CouponPatchBody,
    session: Session = Depends(get_db_session),
):
    """Update the supplied fields of a coupon."""
    repository = CouponRepository(session)
    row = repository.get(parse_id(coupon_id))
    if row is None:
        raise not_found()

    payload = body.coupon
    columns: dict = {}
    for field in ("code", "type", "discount_type"):
        value = getattr(payload, field)
        if value is not None:
            columns[field] = value

    if payload.discount is not None:
        try:
            columns["discount"] = normalize_discount(
                payload.discount, payload.discount_type or row.discount_type
            )
        except ValueError as e:
            raise field_error("discount", str(e)) from e

    if payload.details is not None:
        try:
            check_details(payload.details, payload.type or row.type)
        except ValueError as e:
            raise field_error("details", str(e)) from e
        columns["details"] = stored_details(payload.details)

    start = to_epoch(payload.start_date) if payload.start_date else row.start_date
    end = to_epoch(payload.end_date) if payload.end_date else row.end_date
    if (payload.start_date or payload.end_date) and end < start:
        raise field_error("end_date", "The end date must be on or after the start date.")
    if payload.start_date:
        columns["start_date"] = start
    if payload.end_date:
        columns["end_date"] = end

    with transaction(session):
        row.apply(columns)
        session.add(row)
    return updated("Coupon", "coupon_id", row.id)


@router.delete("/{coupon_id}")
def delete_coupon(coupon_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Delete a coupon and its usage records."""
    repository = CouponRepository(session)
    row = repository.get(parse_id(coupon_id))
    if row is None:
        raise not_found()
    with transaction(session):
        repository.delete(row)
    return deleted("Coupon")
