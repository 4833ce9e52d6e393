"""Sorted, optionally paginated collection responses.

Every collection endpoint answers with the same ``data`` shape::

    {
        "sort": {"field": ..., "direction": ...},
        "fieldsAvailableSortBy": [...],
        "paging": {"total", "page", "limit", "lastPage"},  # paged mode only
        "<Collection>": [...],
    }

Passing ``limit`` or ``offset`` switches to flat mode: the window is taken
as given and ``paging`` is omitted. Otherwise the ``page``-th page of
``listing.page_size`` rows is returned. ``sort`` echoes the field and
direction as sent; rows are ordered by the normalized direction.
"""

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select
from sqlmodel import Session, func, select

from src.storefront.runtime.config.config_data import ListingConfig

ASC = "asc"
DESC = "desc"


def _positive_int(value: Any) -> int | None:
    """Parse a query value; malformed or non-positive values count as absent."""
    if value is None:
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number > 0 else None


@dataclass(frozen=True)
class ListParams:
    sort: str | None = None
    direction: str = ASC
    limit: int | None = None
    offset: int | None = None
    page: int = 1
    requested_direction: str | None = None

    @classmethod
    def from_query(
        cls,
        sort: str | None = None,
        order: str | None = None,
        limit: Any = None,
        offset: Any = None,
        page: Any = None,
    ) -> "ListParams":
        direction = (order or ASC).strip().lower()
        return cls(
            sort=sort.strip() if sort and sort.strip() else None,
            direction=direction if direction in (ASC, DESC) else ASC,
            limit=_positive_int(limit),
            offset=_positive_int(offset),
            page=_positive_int(page) or 1,
            requested_direction=order if order else None,
        )

    @property
    def flat(self) -> bool:
        return self.limit is not None or self.offset is not None

    def echo(self) -> dict[str, str]:
        return {
            "field": self.sort or "id",
            "direction": self.requested_direction or ASC,
        }


class ListQueryEngine:
    """Runs a collection ``select`` with the shared sort and paging contract."""

    def __init__(self, session: Session, config: ListingConfig):
        self._session = session
        self._config = config

    def _order_by(self, params: ListParams, sortable: Mapping[str, Any], id_column: Any):
        if self._config.legacy_id_sort or params.sort not in sortable:
            column = id_column
        else:
            column = sortable[params.sort]
        terms = [column]
        if column is not id_column:
            terms.append(id_column)
        if params.direction == DESC:
            return [term.desc() for term in terms]
        return [term.asc() for term in terms]

    def count(self, statement: Select) -> int:
        subquery = statement.order_by(None).subquery()
        return self._session.exec(select(func.count()).select_from(subquery)).one()

    def run(
        self,
        statement: Select,
        params: ListParams,
        *,
        sortable: Mapping[str, Any],
        id_column: Any,
        collection: str,
        view: Callable[[Sequence[Any]], list[Any]],
    ) -> dict[str, Any]:
        """Execute ``statement`` and package the rows.

        Args:
            statement: Unsorted, unpaginated select of the collection rows
            params: Parsed query parameters
            sortable: ``fieldsAvailableSortBy`` names mapped to their columns
            id_column: Primary key column, the default sort and tiebreaker
            collection: Key the mapped rows are returned under
            view: Maps the fetched rows to their view models
        """
        data: dict[str, Any] = {
            "sort": params.echo(),
            "fieldsAvailableSortBy": list(sortable),
        }
        ordered = statement.order_by(*self._order_by(params, sortable, id_column))

        if params.flat:
            if params.limit is not None:
                ordered = ordered.limit(params.limit)
            if params.offset is not None:
                ordered = ordered.offset(params.offset)
        else:
            limit = self._config.page_size
            total = self.count(statement)
            data["paging"] = paging(total, params.page, limit)
            ordered = ordered.limit(limit).offset((params.page - 1) * limit)

        rows = self._session.exec(ordered).all()
        data[collection] = view(rows)
        return data


def paging(total: int, page: int, limit: int) -> dict[str, int]:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "lastPage": max(1, math.ceil(total / limit)),
    }


def page_items(
    items: Sequence[Any],
    params: ListParams,
    config: ListingConfig,
    *,
    collection: str,
) -> dict[str, Any]:
    """Apply the flat/paged contract to an in-memory sequence."""
    data: dict[str, Any] = {}
    if params.flat:
        start = params.offset or 0
        end = start + params.limit if params.limit is not None else None
        data[collection] = list(items[start:end])
        return data
    limit = config.page_size
    start = (params.page - 1) * limit
    data["paging"] = paging(len(items), params.page, limit)
    data[collection] = list(items[start : start + limit])
    return data
