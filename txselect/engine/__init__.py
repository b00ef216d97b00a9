"""
Engine module for txselect.

Contains pure functions for transaction selection, pool views and
explanations.
"""

from txselect.engine.explanations import (
    explain_selection,
    generate_explanation_nodes,
    summarize_selection,
)
from txselect.engine.pool import (
    filter_pool,
    group_by_sender,
    price_histogram,
    summarize_pool,
)
from txselect.engine.selector import (
    build_sender_queues,
    is_eligible,
    rank_heads,
    select_transactions,
    trace_selection,
)

__all__ = [
    # Selection
    "is_eligible",
    "build_sender_queues",
    "rank_heads",
    "trace_selection",
    "select_transactions",
    # Pool views
    "filter_pool",
    "price_histogram",
    "group_by_sender",
    "summarize_pool",
    # Explanations
    "generate_explanation_nodes",
    "summarize_selection",
    "explain_selection",
]
