# charlotte/core/filters.py
"""
Catalog filter/search composer.

A filter state is ``{text, tags, colors}``. A pattern is kept when it
satisfies every non-empty component:

  - text   : case-insensitive substring of nome, codigo or descricao
  - tags   : shares at least one tag with the selection (OR)
  - colors : shares at least one palette value with the selection (OR)

Filtering never reorders: the input order (remote sort, newest first) is
the output order.

Two variants produce the same result for the same input:

  - client: everything evaluated here over a fully loaded collection
  - hybrid: text and tags pushed to the remote query (see
            ``remote_query``), only colors evaluated here
"""
from typing import Iterable, Sequence, TypeVar

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from charlotte.core.gateway import Query
from charlotte.models.order import Order
from charlotte.models.pattern import Pattern

T = TypeVar("T")

PATTERN_SEARCH_COLUMNS: tuple[str, ...] = ("nome", "codigo", "descricao")

ALL_STATUSES = "todos"


class CatalogFilter(SQLModel):
    """Filter state of the catalog page."""

    model_config = ConfigDict(extra="forbid")

    text: str = ""
    tags: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @property
    def is_empty(self) -> bool:
        return not (self.text or self.tags or self.colors)


# ----- Predicates -----


def matches_text(pattern: Pattern, text: str) -> bool:
    if not text:
        return True
    needle = text.lower()
    return any(
        needle in (value or "").lower()
        for value in (pattern.nome, pattern.codigo, pattern.descricao)
    )


def matches_tags(pattern: Pattern, tags: Sequence[str]) -> bool:
    if not tags:
        return True
    return any(tag in pattern.tags for tag in tags)


def matches_colors(pattern: Pattern, colors: Sequence[str]) -> bool:
    if not colors:
        return True
    values = pattern.color_values
    return any(color in values for color in colors)


# ----- Composers -----


def filter_patterns(patterns: Iterable[Pattern], filters: CatalogFilter) -> list[Pattern]:
    """Client-side variant: one pass, all predicates."""
    return [
        p
        for p in patterns
        if matches_text(p, filters.text)
        and matches_tags(p, filters.tags)
        and matches_colors(p, filters.colors)
    ]


def filter_by_colors(patterns: Iterable[Pattern], colors: Sequence[str]) -> list[Pattern]:
    """Local half of the hybrid variant."""
    return [p for p in patterns if matches_colors(p, colors)]


def remote_query(table: str, filters: CatalogFilter) -> Query:
    """
    Remote half of the hybrid variant.

    Colors stay local: they are values nested in the paleta_cores mapping,
    which the backend cannot match without a dedicated index.
    """
    query = Query(table=table)
    if filters.text:
        query.search = filters.text
        query.search_columns = PATTERN_SEARCH_COLUMNS
    if filters.tags:
        query.overlaps["tags"] = list(filters.tags)
    return query


# ----- Facets -----


def available_tags(patterns: Iterable[Pattern]) -> list[str]:
    """Sorted unique tags across the collection."""
    return sorted({tag for p in patterns for tag in p.tags})


def available_colors(patterns: Iterable[Pattern]) -> list[str]:
    """Sorted unique palette values across the collection."""
    return sorted({color for p in patterns for color in p.paleta_cores.values()})


def toggle_value(values: Sequence[T], value: T) -> list[T]:
    """Remove ``value`` if selected, append it otherwise."""
    if value in values:
        return [v for v in values if v != value]
    return [*values, value]


# ----- Orders -----


def filter_orders(
    orders: Iterable[Order],
    text: str = "",
    status: str = ALL_STATUSES,
) -> list[Order]:
    """
    Order board filter.

    - text matches the order id or the customer's name (case-insensitive)
    - status "todos" keeps every status
    """
    needle = text.strip().lower()
    result = []
    for order in orders:
        if needle:
            customer = (order.usuario.nome_completo if order.usuario else None) or ""
            if needle not in str(order.id).lower() and needle not in customer.lower():
                continue
        if status != ALL_STATUSES and order.status != status:
            continue
        result.append(order)
    return result
