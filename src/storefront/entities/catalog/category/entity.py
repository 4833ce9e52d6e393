"""Request payloads for categories."""

from pydantic import BaseModel, Field, StrictBool

from src.storefront.entities.core import Payload


class Metatag(BaseModel):
    title: str | None = None
    description: str | None = None


class CategoryCreate(Payload):
    name: str
    slug: str
    parent_id: int = Field(default=0, ge=0)
    is_featured: StrictBool = False
    metatag: Metatag | None = None


class CategoryPatch(Payload):
    name: str | None = None
    slug: str | None = None
    parent_id: int | None = Field(default=None, ge=0)
    is_featured: StrictBool | None = None
    metatag: Metatag | None = None


class CategoryCreateBody(Payload):
    category: CategoryCreate = Field(alias="Category")


class CategoryPatchBody(Payload):
    category: CategoryPatch = Field(alias="Category")
