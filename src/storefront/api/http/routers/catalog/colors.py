"""Color API router with CRUD operations."""

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
from src.storefront.entities.catalog.color import (
    ColorCreateBody,
    ColorPatchBody,
    ColorRepository,
    ColorTable,
)

router = APIRouter(prefix="/colors", tags=["colors"])

SORTABLE = {
    "id": ColorTable.id,
    "name": ColorTable.name,
    "code": ColorTable.code,
    "created_at": ColorTable.created_at,
    "updated_at": ColorTable.updated_at,
}


def color_view(row: ColorTable) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "code": row.code,
        "display_name": row.display_name,
    }


def _duplicate_code(code: str):
    return field_error("code", f"There is already a record with the given code: {code}")


@router.get("")
def list_colors(
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
) -> dict:
    """List colors."""
    data = engine.run(
        select(ColorTable),
        params,
        sortable=SORTABLE,
        id_column=ColorTable.id,
        collection="Colors",
        view=lambda rows: [{"Color": color_view(row)} for row in rows],
    )
    return ok(data)


@router.post("", status_code=201)
@router.post("/create", status_code=201)
def create_color(body: ColorCreateBody, session: Session = Depends(get_db_session)):
    """Create a color; codes are unique."""
    payload = body.color
    repository = ColorRepository(session)
    if repository.get_by_code(payload.code) is not None:
        raise _duplicate_code(payload.code)

    with transaction(session):
        row = repository.add(
            ColorTable(
                name=payload.name,
                code=payload.code,
                display_name=payload.display_name,
            )
        )
    return created("Color", "color_id", row.id)


@router.get("/{color_id}")
def get_color(color_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Get a color by ID."""
    row = ColorRepository(session).get(parse_id(color_id))
    if row is None:
        raise not_found()
    return ok({"Color": color_view(row)})


@router.put("/{color_id}", status_code=201)
def update_color(
    color_id: str,
    body: ColorPatchBody,
    session: Session = Depends(get_db_session),
):
    """Update the supplied fields of a color."""
    repository = ColorRepository(session)
    row = repository.get(parse_id(color_id))
    if row is None:
        raise not_found()

    changes = body.color.changes()
    code = changes.get("code")
    if code is not None:
        owner = repository.get_by_code(code)
        if owner is not None and owner.id != row.id:
            raise _duplicate_code(code)

    with transaction(session):
        row.apply({key: value for key, value in changes.items() if value is not None})
        session.add(row)
    return updated("Color", "color_id", row.id)


@router.delete("/{color_id}")
def delete_color(color_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Delete a color."""
    repository = ColorRepository(session)
    row = repository.get(parse_id(color_id))
    if row is None:
        raise not_found()
    with transaction(session):
        repository.delete(row)
    return deleted("Color")
