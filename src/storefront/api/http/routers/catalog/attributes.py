"""Product attribute API router, including attribute values."""

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
)
from src.storefront.core.listing import ListParams, ListQueryEngine
from src.storefront.entities.catalog.attribute import (
    AttributeCreateBody,
    AttributePatchBody,
    AttributeRepository,
    AttributeTable,
    AttributeValueCreateBody,
    AttributeValuePatchBody,
    AttributeValueTable,
)

router = APIRouter(prefix="/attributes", tags=["attributes"])

SORTABLE = {
    "id": AttributeTable.id,
    "name": AttributeTable.name,
    "created_at": AttributeTable.created_at,
    "updated_at": AttributeTable.updated_at,
}


def _check_name(repository: AttributeRepository, name: str, own_id: int | None = None):
    existing = repository.get_by_name(name)
    if existing is not None and existing.id != own_id:
        raise field_error("name", f"There is already a record with the given name: {name}")


def _check_value(
    repository: AttributeRepository,
    attribute_id: int,
    value: str,
    own_id: int | None = None,
):
    if repository.get(attribute_id) is None:
        raise field_error(
            "attribute_id",
            f"There is no record with the given attribute_id: {attribute_id}",
        )
    if repository.find_value(attribute_id, value, exclude_id=own_id) is not None:
        raise field_error("value", "There is already a record with the data provided.")


# --- Attribute values ---


@router.post("/values", status_code=201)
@router.post("/values/create", status_code=201)
def create_attribute_value(
    body: AttributeValueCreateBody, session: Session = Depends(get_db_session)
):
    """Add a value to an existing attribute."""
    payload = body.attribute_value
    repository = AttributeRepository(session)
    _check_value(repository, payload.attribute_id, payload.value)
    with transaction(session):
        row = repository.add_value(
            AttributeValueTable(attribute_id=payload.attribute_id, value=payload.value)
        )
    return created("Attribute Value", "attribute_value_id", row.id)


@router.get("/values/{value_id}")
def get_attribute_value(value_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Get an attribute value with its attribute."""
    repository = AttributeRepository(session)
    row = repository.get_value(parse_id(value_id))
    if row is None:
        raise not_found()
    attribute = repository.get(row.attribute_id)
    return ok(
        {
            "AttributeValue": {
                "id": row.id,
                "value": row.value,
                "attribute": {
                    "id": row.attribute_id,
                    "name": attribute.name if attribute else None,
                },
            }
        }
    )


@router.put("/values/{value_id}", status_code=201)
def update_attribute_value(
    value_id: str,
    body: AttributeValuePatchBody,
    session: Session = Depends(get_db_session),
):
    """Update an attribute value or move it to another attribute."""
    repository = AttributeRepository(session)
    row = repository.get_value(parse_id(value_id))
    if row is None:
        raise not_found()

    payload = body.attribute_value
    attribute_id = payload.attribute_id if payload.attribute_id is not None else row.attribute_id
    value = payload.value if payload.value is not None else row.value
    if payload.attribute_id is not None or payload.value is not None:
        _check_value(repository, attribute_id, value, row.id)

    with transaction(session):
        row.apply({"attribute_id": attribute_id, "value": value})
        session.add(row)
    return updated("Attribute Value", "attribute_value_id", row.id)


@router.delete("/values/{value_id}")
def delete_attribute_value(value_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Delete an attribute value."""
    repository = AttributeRepository(session)
    row = repository.get_value(parse_id(value_id))
    if row is None:
        raise not_found()
    with transaction(session):
        repository.delete_value(row)
    return deleted("Attribute Value")


# --- Attributes ---


@router.get("")
def list_attributes(
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
) -> dict:
    """List attributes."""
    data = engine.run(
        select(AttributeTable),
        params,
        sortable=SORTABLE,
        id_column=AttributeTable.id,
        collection="Attributes",
        view=lambda rows: [{"Attribute": {"id": row.id, "name": row.name}} for row in rows],
    )
    return ok(data)


@router.post("", status_code=201)
@router.post("/create", status_code=201)
def create_attribute(body: AttributeCreateBody, session: Session = Depends(get_db_session)):
    """Create an attribute together with its values."""
    payload = body.attribute
    repository = AttributeRepository(session)
    _check_name(repository, payload.name)
    with transaction(session):
        row = repository.add(AttributeTable(name=payload.name), payload.values)
    return created("Attribute", "attribute_id", row.id)


@router.get("/{attribute_id}")
def get_attribute(attribute_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Get an attribute with its values."""
    repository = AttributeRepository(session)
    row = repository.get(parse_id(attribute_id))
    if row is None:
        raise not_found()
    values = [{"id": value.id, "value": value.value} for value in repository.values(row.id)]
    return ok({"Attribute": {"id": row.id, "name": row.name, "values": values}})


@router.put("/{attribute_id}", status_code=201)
def update_attribute(
    attribute_id: str,
    body: AttributePatchBody,
    session: Session = Depends(get_db_session),
):
    """Rename an attribute and/or replace all of its values."""
    repository = AttributeRepository(session)
    row = repository.get(parse_id(attribute_id))
    if row is None:
        raise not_found()

    payload = body.attribute
    if payload.name is not None:
        _check_name(repository, payload.name, row.id)

    with transaction(session):
        row.apply({"name": payload.name} if payload.name is not None else {})
        session.add(row)
        if payload.values is not None:
            repository.replace_values(row.id, payload.values)
    return updated("Attribute", "attribute_id", row.id)


@router.delete("/{attribute_id}")
def delete_attribute(attribute_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Delete an attribute and its values."""
    repository = AttributeRepository(session)
    row = repository.get(parse_id(attribute_id))
    if row is None:
        raise not_found()
    with transaction(session):
        repository.delete(row)
    return deleted("Attribute")
