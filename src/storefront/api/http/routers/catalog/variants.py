"""Product variant API router (``product_stocks``)."""

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from src.storefront.api.http.deps import get_db_session, get_list_engine, get_list_params
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
from src.storefront.core.formatting import money, split_variant
from src.storefront.core.listing import ListParams, ListQueryEngine
from src.storefront.entities.catalog.attribute import AttributeRepository
from src.storefront.entities.catalog.color import ColorRepository
from src.storefront.entities.catalog.product import (
    COLOR_TYPE,
    ProductRepository,
    ProductStockTable,
    VariantCreateBody,
    VariantFields,
    VariantPatchBody,
    VariantRepository,
)

router = APIRouter(prefix="/products/variants", tags=["variants"])

SORTABLE = {
    "id": ProductStockTable.id,
    "product_id": ProductStockTable.product_id,
    "variant": ProductStockTable.variant,
    "sku": ProductStockTable.sku,
    "price": ProductStockTable.price,
    "qty": ProductStockTable.qty,
    "created_at": ProductStockTable.created_at,
    "updated_at": ProductStockTable.updated_at,
}


def variant_view(row: ProductStockTable, quantity_sold: int) -> dict:
    color, size = split_variant(row.variant)
    return {
        "id": row.id,
        "product_id": row.product_id,
        "price": money(row.price),
        "stock": row.qty,
        "minimum_stock": 1,
        "reference": row.sku,
        "quantity_sold": quantity_sold,
        "Sku": [
            {"type": "Cor", "value": color},
            {"type": "Tamanho", "value": size},
        ],
    }


def resolve_options(
    session: Session, fields: VariantFields
) -> tuple[list[str], list[tuple[int, str]]]:
    """Check every ``type_n``/``value_n`` pair against colors and attribute values.

    Returns:
        The color codes and ``(attribute_id, value)`` pairs the variant adds
        to its product.

    Raises:
        EnvelopeException: 400 keyed by the offending field.
    """
    colors = ColorRepository(session)
    attributes = AttributeRepository(session)
    errors: dict[str, list[str]] = {}
    color_codes: list[str] = []
    attribute_values: list[tuple[int, str]] = []

    for field, option_type, value in fields.options():
        if option_type == COLOR_TYPE:
            color = colors.get_by_name(value)
            if color is None:
                errors[field] = [f"There is no data for the given color: {value}"]
            else:
                color_codes.append(color.code)
            continue

        attribute = attributes.get_by_name(option_type)
        if attribute is None:
            type_field = f"type_{field[-1]}"
            names = ", ".join(row.name for row in attributes.all())
            errors[type_field] = [
                f"The {type_field} field must have one of the following values: "
                f"{COLOR_TYPE}{', ' + names if names else ''}."
            ]
        elif attributes.find_value(attribute.id, value) is None:
            errors[field] = [f"There is no data for the given attribute: {value}"]
        else:
            attribute_values.append((attribute.id, value))

    if errors:
        raise validation_error(errors)
    return color_codes, attribute_values


@router.get("")
def list_variants(
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
    session: Session = Depends(get_db_session),
) -> dict:
    """List product variants."""

    def view(rows: list[ProductStockTable]) -> list[dict]:
        sold = VariantRepository(session).quantity_sold(rows)
        return [{"Variant": variant_view(row, sold[row.id])} for row in rows]

    data = engine.run(
        select(ProductStockTable),
        params,
        sortable=SORTABLE,
        id_column=ProductStockTable.id,
        collection="Variants",
        view=view,
    )
    return ok(data)


@router.post("", status_code=201)
@router.post("/create", status_code=201)
def create_variant(body: VariantCreateBody, session: Session = Depends(get_db_session)):
    """Create a variant and register its options on the product."""
    payload = body.variant
    color_codes, attribute_values = resolve_options(session, payload)

    product = ProductRepository(session).get(payload.product_id)
    if product is None:
        raise field_error(
            "product_id", f"There is no data for the given product_id: {payload.product_id}"
        )
    variant = payload.variant_name()
    if variant is None:
        raise field_error(
            "variant",
            "At least one variation type must be given to create the product variation",
        )

    repository = VariantRepository(session)
    with transaction(session):
        row = repository.add(
            ProductStockTable(
                product_id=product.id,
                variant=variant,
                sku=payload.reference,
                price=payload.price,
                qty=payload.stock,
            )
        )
        repository.register_options(
            product, color_codes=color_codes, attribute_values=attribute_values
        )
    return created("Product Variation", "variation_id", row.id)


@router.get("/{variant_id}")
def get_variant(variant_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Get a variant by ID."""
    repository = VariantRepository(session)
    row = repository.get(parse_id(variant_id))
    if row is None:
        raise not_found()
    sold = repository.quantity_sold([row])
    return ok({"Variant": variant_view(row, sold[row.id])})


@router.put("/{variant_id}", status_code=201)
def update_variant(
    variant_id: str,
    body: VariantPatchBody,
    session: Session = Depends(get_db_session),
):
    """Update the supplied fields of a variant."""
    repository = VariantRepository(session)
    row = repository.get(parse_id(variant_id))
    if row is None:
        raise not_found()

    payload = body.variant
    color_codes, attribute_values = resolve_options(session, payload)

    product_id = payload.product_id if payload.product_id is not None else row.product_id
    product = ProductRepository(session).get(product_id)
    if product is None:
        raise field_error(
            "product_id", f"There is no data for the given product_id: {product_id}"
        )

    columns: dict = {"product_id": product_id}
    if payload.price is not None:
        columns["price"] = payload.price
    if payload.reference is not None:
        columns["sku"] = payload.reference
    if payload.stock is not None:
        columns["qty"] = payload.stock
    variant = payload.variant_name()
    if variant is not None:
        columns["variant"] = variant

    with transaction(session):
        row.apply(columns)
        session.add(row)
        if color_codes or attribute_values:
            repository.register_options(
                product, color_codes=color_codes, attribute_values=attribute_values
            )
    return updated("Product Variation", "variation_id", row.id)


@router.delete("/{variant_id}")
def delete_variant(variant_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Delete a variant."""
    repository = VariantRepository(session)
    row = repository.get(parse_id(variant_id))
    if row is None:
        raise not_found()
    with transaction(session):
        repository.delete(row)
    return deleted("Product Variation")
