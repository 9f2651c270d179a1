"""
Depth-weighted order book imbalance (DWOBI).

Usage:
    from core.indicators.order_book import compute_depth_weighted_imbalance

    obi_pct = compute_depth_weighted_imbalance(book)  # 0-100, 50 = neutral
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from core.types import BookSide, OrderBookSnapshot

logger = logging.getLogger(__name__)

NEUTRAL_IMBALANCE = 50.0


def _weighted_volume(levels: BookSide) -> float:
    """Sum of level sizes, weighting level i of n by (n - i)."""
    depth = len(levels)
    total = 0.0
    for index, level in enumerate(levels):
        total += float(level[1]) * (depth - index)  # type: ignore[arg-type]
    return total


def compute_depth_weighted_imbalance(book: OrderBookSnapshot | Mapping[str, Any] | None) -> float:
    """
    Calculate the bid share of depth-weighted resting volume.

    Each side is weighted by distance from the touch: with n levels, the best
    level weighs n, the next n-1, down to 1 for the deepest level.
    n is counted per side, so a book with fewer ask levels than bid levels
    weights its asks by the ask depth rather than the bid depth.

    Formula:
        DWOBI = weighted_bid / (weighted_bid + weighted_ask) * 100

    Args:
        book: Order book snapshot, or a raw mapping with "bids" and "asks"
            lists of [price, qty] pairs

    Returns:
        Imbalance in percent. 50 when the book is absent or malformed, or when
        the weighted total is below 1e-6.
    """
    if book is None:
        return NEUTRAL_IMBALANCE

    if isinstance(book, OrderBookSnapshot):
        bids, asks = book.bids, book.asks
    elif isinstance(book, Mapping):
        bids, asks = book.get("bids"), book.get("asks")
    else:
        return NEUTRAL_IMBALANCE

    if not isinstance(bids, (list, tuple)) or not isinstance(asks, (list, tuple)):
        return NEUTRAL_IMBALANCE

    try:
        weighted_bid = _weighted_volume(bids)
        weighted_ask = _weighted_volume(asks)
    except (TypeError, ValueError, IndexError) as exc:
        logger.debug(f"Malformed order book levels, treating as neutral: {exc}")
        return NEUTRAL_IMBALANCE

    total = weighted_bid + weighted_ask
    if total < 1e-6:
        return NEUTRAL_IMBALANCE

    return weighted_bid / total * 100
