"""Category API router with CRUD operations and the category tree."""

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
from src.storefront.core.formatting import image_urls
from src.storefront.core.listing import ListParams, ListQueryEngine
from src.storefront.core.services import StorefrontUrls
from src.storefront.entities.catalog.category import (
    CategoryCreateBody,
    CategoryPatchBody,
    CategoryRepository,
    CategoryTable,
)
from src.storefront.entities.catalog.upload import UploadRepository

router = APIRouter(prefix="/categories", tags=["categories"])

SORTABLE = {
    "id": CategoryTable.id,
    "name": CategoryTable.name,
    "parent_id": CategoryTable.parent_id,
    "created_at": CategoryTable.created_at,
    "updated_at": CategoryTable.updated_at,
}


def _images(row: CategoryTable, locations: dict[int, str], urls: StorefrontUrls) -> dict:
    return {
        "banner": image_urls(locations.get(row.banner), urls),
        "icon": image_urls(locations.get(row.icon), urls),
    }


def category_detail(
    row: CategoryTable, uploads: UploadRepository, urls: StorefrontUrls
) -> dict:
    locations = uploads.locations([row.banner, row.icon])
    return {
        "slug": row.slug,
        "id": row.id,
        "parent_id": row.parent_id,
        "name": row.name,
        "order": row.order_level,
        "link": urls.links(f"categoria/{row.name}"),
        "metatag": {
            "meta_title": row.meta_title,
            "meta_description": row.meta_description,
        },
        "Images": _images(row, locations, urls),
    }


def category_tree(
    row: CategoryTable,
    repository: CategoryRepository,
    uploads: UploadRepository,
    urls: StorefrontUrls,
    seen: set[int] | None = None,
) -> dict:
    """The category with its sub-categories nested under ``children``."""
    seen = (seen or set()) | {row.id}
    node = category_detail(row, uploads, urls)
    node["has_product"] = repository.has_product(row.id)
    node["children"] = [
        category_tree(child, repository, uploads, urls, seen)
        for child in repository.children(row.id)
        if child.id not in seen
    ]
    return {"Category": node}


def _check_parent(repository: CategoryRepository, parent_id: int, own_id: int | None = None):
    if parent_id == 0:
        return
    if parent_id == own_id:
        raise field_error("parent_id", "A category cannot be its own parent.")
    if not repository.exists(parent_id):
        raise field_error("parent_id", "There is no data for the given parent_id.")


def _check_slug(repository: CategoryRepository, slug: str, own_id: int | None = None):
    if repository.slug_taken(slug, exclude_id=own_id):
        raise field_error("slug", "The slug has already been taken.")


@router.get("")
def list_categories(
    params: ListParams = Depends(get_list_params),
    engine: ListQueryEngine = Depends(get_list_engine),
    session: Session = Depends(get_db_session),
    urls: StorefrontUrls = Depends(get_urls),
) -> dict:
    """List categories with their banner and icon links."""

    def view(rows: list[CategoryTable]) -> list[dict]:
        ids = [upload_id for row in rows for upload_id in (row.banner, row.icon)]
        locations = UploadRepository(session).locations(ids)
        return [
            {
                "Category": {
                    "id": row.id,
                    "parent_id": row.parent_id,
                    "name": row.name,
                    "Images": _images(row, locations, urls),
                }
            }
            for row in rows
        ]

    data = engine.run(
        select(CategoryTable),
        params,
        sortable=SORTABLE,
        id_column=CategoryTable.id,
        collection="Categories",
        view=view,
    )
    return ok(data)


@router.post("", status_code=201)
@router.post("/create", status_code=201)
def create_category(body: CategoryCreateBody, session: Session = Depends(get_db_session)):
    """Create a category. ``parent_id`` 0 creates a root category."""
    payload = body.category
    repository = CategoryRepository(session)
    _check_slug(repository, payload.slug)
    _check_parent(repository, payload.parent_id)

    metatag = payload.metatag
    with transaction(session):
        row = repository.add(
            CategoryTable(
                name=payload.name,
                slug=payload.slug,
                parent_id=payload.parent_id,
                level=0 if payload.parent_id == 0 else 1,
                featured=1 if payload.is_featured else 0,
                meta_title=metatag.title if metatag else None,
                meta_description=metatag.description if metatag else None,
            )
        )
    return created("Category", "category_id", row.id)


@router.get("/{category_id}")
def get_category(
    category_id: str,
    session: Session = Depends(get_db_session),
    urls: StorefrontUrls = Depends(get_urls),
) -> dict:
    """Get a category by ID."""
    row = CategoryRepository(session).get(parse_id(category_id))
    if row is None:
        raise not_found()
    return ok({"Category": category_detail(row, UploadRepository(session), urls)})


@router.get("/{category_id}/tree")
def get_category_tree(
    category_id: str,
    session: Session = Depends(get_db_session),
    urls: StorefrontUrls = Depends(get_urls),
) -> dict:
    """Get a category with all of its sub-categories."""
    repository = CategoryRepository(session)
    row = repository.get(parse_id(category_id))
    if row is None:
        raise not_found()
    tree = category_tree(row, repository, UploadRepository(session), urls)
    return ok({"Category": [tree]})


@router.put("/{category_id}", status_code=201)
def update_category(
    category_id: str,
    body: CategoryPatchBody,
    session: Session = Depends(get_db_session),
):
    """Update the supplied fields of a category."""
    repository = CategoryRepository(session)
    row = repository.get(parse_id(category_id))
    if row is None:
        raise not_found()

    payload = body.category
    changes = payload.changes()
    columns: dict = {}
    if payload.name is not None:
        columns["name"] = payload.name
    if payload.slug is not None:
        _check_slug(repository, payload.slug, row.id)
        columns["slug"] = payload.slug
    if payload.parent_id is not None:
        _check_parent(repository, payload.parent_id, row.id)
        columns["parent_id"] = payload.parent_id
        columns["level"] = 0 if payload.parent_id == 0 else 1
    if payload.is_featured is not None:
        columns["featured"] = 1 if payload.is_featured else 0
    if "metatag" in changes and payload.metatag is not None:
        metatag = changes["metatag"]
        if "title" in metatag:
            columns["meta_title"] = metatag["title"]
        if "description" in metatag:
            columns["meta_description"] = metatag["description"]

    with transaction(session):
        row.apply(columns)
        session.add(row)
    return updated("Category", "category_id", row.id)


@router.delete("/{category_id}")
def delete_category(category_id: str, session: Session = Depends(get_db_session)) -> dict:
    """Delete a category; its products and sub-categories are moved to the root."""
    repository = CategoryRepository(session)
    row = repository.get(parse_id(category_id))
    if row is None:
        raise not_found()
    with transaction(session):
        repository.delete(row)
    return deleted("Category")
