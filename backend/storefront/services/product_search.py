# Overview: Product search query composition from optional catalog filters.

"""
Product search

Composes a parameterized SELECT over products from any combination of
category, price bounds and color. Every supplied filter adds one AND
clause; absent filters add nothing. Values are always bound parameters,
never spliced into SQL text. The color pattern's % wildcards are added to
the parameter value, not to the statement.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from sqlalchemy import select, true

from ..models import Product
from ..validation import to_int, to_money

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class ProductSearchFilters:
    category_id: int | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    color: str | None = None

    def is_empty(self) -> bool:
        return (
            self.category_id is None
            and self.min_price is None
            and self.max_price is None
            and self.color is None
        )

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "ProductSearchFilters":
        """
        Parse the /products query string (cat, minPrice, maxPrice, color).

        Blank values count as absent. Raises ValidationError on bad numbers.
        """
        def _arg(name: str) -> str | None:
            value = args.get(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        cat = _arg("cat")
        min_price = _arg("minPrice")
        max_price = _arg("maxPrice")

        return cls(
            category_id=to_int(cat, "cat") if cat is not None else None,
            min_price=to_money(min_price, "minPrice") if min_price is not None else None,
            max_price=to_money(max_price, "maxPrice") if max_price is not None else None,
            color=_arg("color"),
        )


def color_pattern(color: str) -> str:
    """Substring LIKE pattern with the user's own wildcards escaped."""
    escaped = (
        color.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def all_products_query():
    return select(Product)


def build_search_query(filters: ProductSearchFilters):
    """Start from a predicate matching every row and AND one clause per supplied filter."""
    stmt = select(Product).where(true())

    if filters.category_id is not None:
        stmt = stmt.where(Product.category_id == filters.category_id)
    if filters.min_price is not None:
        stmt = stmt.where(Product.price >= filters.min_price)
    if filters.max_price is not None:
        stmt = stmt.where(Product.price <= filters.max_price)
    if filters.color is not None:
        stmt = stmt.where(Product.color.like(color_pattern(filters.color), escape=LIKE_ESCAPE))

    return stmt
