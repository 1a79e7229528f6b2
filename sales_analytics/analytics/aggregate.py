"""
Aggregator

Generic group-and-reduce primitive shared by every report. The grouping
is an explicit key -> accumulator mapping; presentation order is left to
the ranker.
"""

from decimal import Decimal
from typing import Callable, Dict, Hashable, Iterable, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
A = TypeVar("A")


def group_reduce(
    rows: Iterable[T],
    key_fn: Callable[[T], K],
    reduce_fn: Callable[[A, T], A],
    initial: Callable[[], A],
) -> Dict[K, A]:
    """
    Group rows by key and fold each group into an accumulator.

    Args:
        rows: Input rows
        key_fn: Extracts the grouping key from a row
        reduce_fn: Folds one row into the group's accumulator and returns it
        initial: Factory for a fresh accumulator, called once per new key

    Returns:
        Mapping of key to final accumulator. For commutative reducers the
        result does not depend on input order.

    Example:
        totals = group_reduce(
            line_items,
            key_fn=lambda li: li.order_id,
            reduce_fn=lambda acc, li: acc + li.line_total,
            initial=Decimal,
        )
    """
    groups: Dict[K, A] = {}
    for row in rows:
        key = key_fn(row)
        acc = groups[key] if key in groups else initial()
        groups[key] = reduce_fn(acc, row)
    return groups


def sum_by(
    rows: Iterable[T],
    key_fn: Callable[[T], K],
    value_fn: Callable[[T], Decimal],
) -> Dict[K, Decimal]:
    """Sum a Decimal value per key"""
    return group_reduce(
        rows,
        key_fn=key_fn,
        reduce_fn=lambda acc, row: acc + value_fn(row),
        initial=Decimal,
    )


def count_by(rows: Iterable[T], key_fn: Callable[[T], K]) -> Dict[K, int]:
    """Count rows per key"""
    return group_reduce(rows, key_fn=key_fn, reduce_fn=lambda acc, _: acc + 1, initial=int)
