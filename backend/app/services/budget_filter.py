"""Keeps accommodations whose nightly price fits the trip budget."""

import logging
import math
import re
from collections.abc import Callable, Iterable
from operator import attrgetter
from typing import TypeVar

logger = logging.getLogger(__name__)

DEFAULT_NIGHTS = 7

_NON_NUMERIC = re.compile(r"[^0-9.]")

T = TypeVar("T")


def parse_price(value: str | float | int | None) -> float | None:
    """
    Parse a currency-formatted price such as ``"$1,500"`` or ``"$150/night"``.

    Every character other than digits and '.' is stripped before parsing.
    Returns None when nothing numeric is left.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = _NON_NUMERIC.sub("", value)
    try:
        price = float(cleaned)
    except ValueError:
        return None
    return price if math.isfinite(price) else None


def nightly_budget(total_budget: float, nights: int = DEFAULT_NIGHTS) -> float:
    if nights <= 0:
        raise ValueError("nights must be positive")
    return total_budget / nights


def filter_by_budget(
    records: Iterable[T],
    total_budget: float,
    nights: int = DEFAULT_NIGHTS,
    price: Callable[[T], str | float | None] = attrgetter("price"),
) -> list[T]:
    """
    Keep records priced at or under ``total_budget / nights``.

    Records with an unparseable price are dropped. An empty result is
    returned as-is; the budget is never widened.
    """
    limit = nightly_budget(total_budget, nights)
    kept = []
    for record in records:
        amount = parse_price(price(record))
        if amount is not None and amount <= limit:
            kept.append(record)

    if not kept:
        logger.info(f"No accommodations within nightly budget {limit:.2f}")
    return kept
