"""
Ranker

Deterministic ordering and top-N truncation for report sequences.

Orderings are declared as a list of SortKey entries: the first key is
the primary sort, each following key breaks ties left by the ones
before it.
"""

from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SortKey:
    """One level of a sort order"""
    key: Callable[[Any], Any]
    descending: bool = False

    @classmethod
    def asc(cls, attr: str) -> "SortKey":
        return cls(attrgetter(attr), descending=False)

    @classmethod
    def desc(cls, attr: str) -> "SortKey":
        return cls(attrgetter(attr), descending=True)


def rank(
    rows: Iterable[T],
    keys: Sequence[SortKey],
    limit: Optional[int] = None,
) -> List[T]:
    """
    Sort rows by the given keys and optionally keep the first `limit`.

    Sorting runs from the least significant key to the most significant
    one; Python's sort is stable, so earlier keys win and ties fall
    through to later keys. Mixed directions need no negation, which keeps
    string tie-breaks usable in descending order too.

    Args:
        rows: Rows to order
        keys: Primary key first, then tie-breaks
        limit: Keep at most this many rows. None keeps all.

    Raises:
        ValueError: if limit is negative
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    ordered = list(rows)
    for sort_key in reversed(keys):
        ordered.sort(key=sort_key.key, reverse=sort_key.descending)

    if limit is not None:
        return ordered[:limit]
    return ordered


# Documented orderings used by the report builders
ORDER_TOTALS_ORDER = (SortKey.asc("order_date"), SortKey.asc("order_id"))
CUSTOMER_SPEND_ORDER = (
    SortKey.desc("total_spent"),
    SortKey.asc("customer_name"),
    SortKey.asc("customer_id"),
)
PRODUCT_REVENUE_ORDER = (SortKey.desc("revenue"), SortKey.asc("product_id"))
CITY_REVENUE_ORDER = (SortKey.desc("revenue"), SortKey.asc("city"))
CATEGORY_REVENUE_ORDER = (SortKey.desc("revenue"), SortKey.asc("category"))
