# app/crud/query_builder.py
import math
from dataclasses import dataclass, field
from typing import Optional
from sqlalchemy import Select, and_, func, or_, select
from app.models import Product, ProductOption

# sort key -> (column, descending)
SORT_OPTIONS = {
    "name": (Product.name, False),
    "priceAsc": (Product.price, False),
    "priceDesc": (Product.price, True),
    "createdAtAsc": (Product.created_at, False),
    "createdAtDesc": (Product.created_at, True),
    "updatedAtAsc": (Product.updated_at, False),
    "updatedAtDesc": (Product.updated_at, True),
    "ratingsAsc": (Product.ratings, False),
    "ratingsDesc": (Product.ratings, True),
}
DEFAULT_SORT = "createdAtDesc"

# list filters honoured per category; ignored everywhere else
CATEGORY_LIST_FILTERS = {
    "electronics": ("colors", "variants"),
    "clothing": ("colors", "size"),
}

DEFAULT_SEARCH_FIELDS = ("name", "brand", "category")


@dataclass
class ProductQuery:
    search: Optional[str] = None
    category: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    ratings: Optional[float] = None
    colors: list[str] = field(default_factory=list)
    variants: list[str] = field(default_factory=list)
    size: list[str] = field(default_factory=list)
    sort: Optional[str] = None
    page: int = 1
    limit: int = 25
    search_fields: tuple[str, ...] = DEFAULT_SEARCH_FIELDS

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def normalize_pagination(page: Optional[int], limit: Optional[int], default_limit: int, max_limit: int) -> tuple[int, int]:
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else default_limit
    return page, min(limit, max_limit)


def split_csv(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _has_any(kind: str, values: list[str]):
    return Product.options.any(and_(ProductOption.kind == kind, ProductOption.value.in_(values)))


def build_filters(query: ProductQuery) -> list:
    conditions = []

    if query.search:
        conditions.append(or_(*(
            getattr(Product, name).icontains(query.search, autoescape=True)
            for name in query.search_fields
        )))

    if query.ratings is not None:
        conditions.append(Product.ratings >= query.ratings)

    if query.price_min is not None:
        conditions.append(Product.price >= query.price_min)
    if query.price_max is not None:
        conditions.append(Product.price <= query.price_max)

    if query.category:
        conditions.append(Product.category == query.category)

    for kind in CATEGORY_LIST_FILTERS.get(query.category, ()):
        values = getattr(query, kind)
        if values:
            conditions.append(_has_any(kind, values))

    return conditions


def build_order_by(sort: Optional[str]) -> list:
    column, descending = SORT_OPTIONS.get(sort or DEFAULT_SORT, SORT_OPTIONS[DEFAULT_SORT])
    # id keeps page windows stable when the sort column ties
    return [column.desc() if descending else column.asc(), Product.id.asc()]


def build_select(query: ProductQuery) -> Select:
    return (
        select(Product)
        .where(*build_filters(query))
        .order_by(*build_order_by(query.sort))
        .offset(query.offset)
        .limit(query.limit)
    )


def build_count(query: ProductQuery) -> Select:
    return select(func.count()).select_from(Product).where(*build_filters(query))


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
