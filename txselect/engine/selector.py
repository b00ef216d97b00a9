"""
Selection algorithm for txselect.

Greedy, fee-priority admission of mempool transactions under a gas budget and
a transaction-count cap, respecting per-sender nonce order. All functions are
pure and deterministic: senders are kept in first-appearance order and every
ranking ends in the input position.

Key components:
- is_eligible: base fee check
- build_sender_queues: per-sender admissible queues (nonce policy applied)
- rank_heads: priority order of the current per-sender heads
- trace_selection: admission loop plus per-transaction decisions
- select_transactions: single entry point returning SelectionResult
"""

from typing import Tuple

from txselect.config import DEFAULT_SELECTION_CONFIG, SelectionConfig
from txselect.models import (
    NoncePolicy,
    SelectionConstraints,
    SelectionResult,
    SelectionTrace,
    StopReason,
    Transaction,
    TxDecision,
    TxStatus,
)
from txselect.validation import validate_and_raise


# =============================================================================
# Eligibility
# =============================================================================


def is_eligible(tx: Transaction, constraints: SelectionConstraints) -> bool:
    """A transaction is eligible when it pays at least the base fee."""
    return tx.price >= constraints.base_fee


# =============================================================================
# Per-Sender Queues
# =============================================================================


def build_sender_queues(
    transactions: list[Transaction],
    constraints: SelectionConstraints,
    policy: NoncePolicy,
) -> Tuple[dict[str, list[int]], list[TxStatus]]:
    """
    Build the admissible queue of every sender.

    A queue holds input positions in the only order that sender's transactions
    may be admitted. Each sender's transactions are sorted by nonce (highest
    price first on a repeated nonce, then input position). Only the first
    transaction per nonce is queued.

    The queue starts at the sender's lowest nonce and stops at the first
    missing nonce. Under NoncePolicy.STRICT a fee-ineligible transaction also
    stops it; under NoncePolicy.LENIENT ineligible transactions are dropped
    first, so the queue starts at the lowest eligible nonce.

    Args:
        transactions: Pool snapshot
        constraints: Round constraints (base_fee is used here)
        policy: Nonce gap policy

    Returns:
        Tuple of (queues, statuses). queues maps sender -> positions, in order
        of first appearance, omitting senders with nothing admissible.
        statuses is aligned with the input; queued transactions are
        NOT_REACHED until the admission loop decides them.
    """
    statuses = [TxStatus.NOT_REACHED] * len(transactions)
    groups: dict[str, list[int]] = {}

    for i, tx in enumerate(transactions):
        if not is_eligible(tx, constraints):
            statuses[i] = TxStatus.BELOW_BASE_FEE
            if policy == NoncePolicy.LENIENT:
                continue
        groups.setdefault(tx.sender, []).append(i)

    queues: dict[str, list[int]] = {}
    for sender, positions in groups.items():
        positions.sort(key=lambda i: (transactions[i].nonce, -transactions[i].price, i))

        queue: list[int] = []
        last_nonce = None
        prev_nonce = None
        blocked = False
        for i in positions:
            tx = transactions[i]

            if tx.nonce == prev_nonce:
                if statuses[i] == TxStatus.NOT_REACHED:
                    statuses[i] = TxStatus.DUPLICATE_NONCE
                continue
            prev_nonce = tx.nonce

            if blocked:
                if statuses[i] == TxStatus.NOT_REACHED:
                    statuses[i] = TxStatus.NONCE_GAP
                continue

            # Only reachable under STRICT: an ineligible tx still holds its slot
            if statuses[i] == TxStatus.BELOW_BASE_FEE:
                blocked = True
                continue

            if last_nonce is not None and tx.nonce != last_nonce + 1:
                statuses[i] = TxStatus.NONCE_GAP
                blocked = True
                continue

            queue.append(i)
            last_nonce = tx.nonce

        if queue:
            queues[sender] = queue

    return queues, statuses


# =============================================================================
# Head Ranking
# =============================================================================


def rank_heads(
    transactions: list[Transaction],
    queues: dict[str, list[int]],
    heads: dict[str, int],
) -> list[str]:
    """
    Order active senders by their current head transaction.

    Price descending, then nonce ascending, then input position ascending.
    """

    def head_key(sender: str) -> Tuple[float, int, int]:
        i = queues[sender][heads[sender]]
        tx = transactions[i]
        return (-tx.price, tx.nonce, i)

    return sorted(heads, key=head_key)


# =============================================================================
# Selection Algorithm
# =============================================================================


def trace_selection(
    transactions: list[Transaction],
    constraints: SelectionConstraints,
    config: SelectionConfig = DEFAULT_SELECTION_CONFIG,
) -> SelectionTrace:
    """
    Run one admission round and record the decision for every transaction.

    Each pass scans the ranked heads once. A head that fits the remaining gas
    is admitted and its sender advances; a head that does not fit is skipped
    for the rest of the round and its sender is retired, since later nonces
    cannot be applied without it. Passes repeat until max_txs is reached, no
    heads remain, or a pass makes no progress.

    Args:
        transactions: Pool snapshot (never mutated)
        constraints: base_fee, max_gas, max_txs
        config: Selection configuration (nonce policy)

    Returns:
        SelectionTrace with the SelectionResult and per-tx decisions

    Raises:
        InvalidConstraint: max_gas or max_txs is negative
        InvalidTransaction: a transaction has negative gas
    """
    validate_and_raise(transactions, constraints)

    # Step 1: Eligibility count, independent of gas/count/nonce limits
    eligible_count = sum(1 for tx in transactions if is_eligible(tx, constraints))

    # Step 2: Per-sender queues
    queues, statuses = build_sender_queues(transactions, constraints, config.nonce_policy)

    # Step 3: Greedy admission
    heads: dict[str, int] = {sender: 0 for sender in queues}
    picked: list[int] = []
    skipped: list[int] = []
    gas_left = constraints.max_gas

    while heads and len(picked) < constraints.max_txs:
        progressed = False

        for sender in rank_heads(transactions, queues, heads):
            if len(picked) >= constraints.max_txs:
                break

            queue = queues[sender]
            i = queue[heads[sender]]
            tx = transactions[i]

            if tx.gas <= gas_left:
                picked.append(i)
                gas_left -= tx.gas
                statuses[i] = TxStatus.PICKED
                heads[sender] += 1
                if heads[sender] == len(queue):
                    del heads[sender]
            else:
                skipped.append(i)
                statuses[i] = TxStatus.GAS_SKIPPED
                for j in queue[heads[sender] + 1:]:
                    statuses[j] = TxStatus.PREDECESSOR_SKIPPED
                del heads[sender]

            progressed = True

        if not progressed:
            break

    # Step 4: Aggregates
    picked_txs = [transactions[i] for i in picked]
    gas_used = sum(tx.gas for tx in picked_txs)
    avg_price = sum(tx.price for tx in picked_txs) / len(picked_txs) if picked_txs else 0.0

    # Cap only counts as the stop when a remaining head could still fit
    admissible_left = any(
        transactions[queues[sender][heads[sender]]].gas <= gas_left for sender in heads
    )
    if admissible_left and len(picked) >= constraints.max_txs:
        stop_reason = StopReason.TX_LIMIT
    else:
        stop_reason = StopReason.EXHAUSTED

    result = SelectionResult(
        picked=picked_txs,
        gas_used=gas_used,
        avg_price=avg_price,
        eligible_count=eligible_count,
        skipped=[transactions[i].id for i in skipped],
        stop_reason=stop_reason,
    )

    decisions = [
        TxDecision(tx_id=tx.id, sender=tx.sender, nonce=tx.nonce, status=statuses[i])
        for i, tx in enumerate(transactions)
    ]

    return SelectionTrace(result=result, decisions=decisions)


def select_transactions(
    transactions: list[Transaction],
    constraints: SelectionConstraints,
    config: SelectionConfig = DEFAULT_SELECTION_CONFIG,
) -> SelectionResult:
    """
    Select the feasible, priority-ordered admission set for one round.

    This is the SINGLE entry point for selection - API/demo layers must not
    recompute picks or aggregates.

    Args:
        transactions: Pool snapshot (may be empty)
        constraints: base_fee, max_gas, max_txs
        config: Selection configuration

    Returns:
        SelectionResult with picked txs in admission order and aggregates
    """
    return trace_selection(transactions, constraints, config).result
