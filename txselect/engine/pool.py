"""
Pool views for txselect.

Pure helpers behind the panels shown beside the selection preview: the
search filter, the gas price histogram and the per-sender queues.
"""

import math
from typing import Optional

from txselect.config import DEFAULT_SELECTION_CONFIG, SelectionConfig
from txselect.models import HistogramBucket, PoolSummary, SenderQueue, Transaction


# =============================================================================
# Search Filter
# =============================================================================


def filter_pool(
    transactions: list[Transaction],
    query: Optional[str],
) -> list[Transaction]:
    """
    Case-insensitive substring search on tx id or sender.

    An empty or missing query keeps every transaction.
    """
    if not query:
        return list(transactions)

    needle = query.lower()
    return [
        tx for tx in transactions
        if needle in tx.id.lower() or needle in tx.sender.lower()
    ]


# =============================================================================
# Price Histogram
# =============================================================================


def _format_price(value: float) -> str:
    return f"{value:g}"


def price_histogram(
    transactions: list[Transaction],
    bucket_count: int = DEFAULT_SELECTION_CONFIG.histogram_buckets,
) -> list[HistogramBucket]:
    """
    Bucket transactions by price.

    Bucket width is max(1, ceil((max - min + 1) / bucket_count)), buckets
    start at the lowest price, and only non-empty buckets are returned,
    lowest first.
    """
    if not transactions:
        return []

    prices = [tx.price for tx in transactions]
    low = min(prices)
    high = max(prices)
    step = max(1, math.ceil((high - low + 1) / bucket_count))

    counts: dict[float, int] = {}
    for price in prices:
        start = low + math.floor((price - low) / step) * step
        counts[start] = counts.get(start, 0) + 1

    return [
        HistogramBucket(
            label=f"{_format_price(start)}-{_format_price(start + step - 1)}",
            low=start,
            high=start + step - 1,
            count=count,
        )
        for start, count in sorted(counts.items())
    ]


# =============================================================================
# Sender Queues
# =============================================================================


def group_by_sender(transactions: list[Transaction]) -> list[SenderQueue]:
    """Group transactions by sender (first-appearance order), nonce ascending."""
    groups: dict[str, list[Transaction]] = {}
    for tx in transactions:
        groups.setdefault(tx.sender, []).append(tx)

    return [
        SenderQueue(
            sender=sender,
            transactions=sorted(txs, key=lambda tx: tx.nonce),
            count=len(txs),
        )
        for sender, txs in groups.items()
    ]


# =============================================================================
# Summary
# =============================================================================


def summarize_pool(
    transactions: list[Transaction],
    config: SelectionConfig = DEFAULT_SELECTION_CONFIG,
) -> PoolSummary:
    """Build the pool panel data for an already-filtered snapshot."""
    return PoolSummary(
        pool_size=len(transactions),
        histogram=price_histogram(transactions, config.histogram_buckets),
        senders=group_by_sender(transactions),
    )
