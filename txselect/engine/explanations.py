"""
Explanation generation for txselect.

Turns a SelectionTrace into structured ExplanationNode objects and a one-line
summary for display next to the selection preview. All functions are pure.

Node Categories:
- constraint: base fee, gas budget and count cap effects
- ordering: nonce gaps, duplicate nonces, successors of skipped txs
"""

from txselect.models import (
    Explanation,
    ExplanationNode,
    SelectionConstraints,
    SelectionResult,
    SelectionTrace,
    StopReason,
    TxStatus,
)


# Gas utilisation at or above this fraction is reported as nearly full
NEAR_FULL_GAS_RATIO = 0.9

EMPTY_SELECTION_SUMMARY = "No eligible transactions for current constraints."


# =============================================================================
# Main Entry Point
# =============================================================================


def generate_explanation_nodes(
    trace: SelectionTrace,
    constraints: SelectionConstraints,
) -> list[ExplanationNode]:
    """
    Generate structured explanation nodes from a selection trace.

    Args:
        trace: Result and per-tx decisions of one round
        constraints: Constraints the round ran with

    Returns:
        List of ExplanationNode objects for UI rendering
    """
    nodes: list[ExplanationNode] = []
    nodes.extend(_generate_constraint_nodes(trace, constraints))
    nodes.extend(_generate_ordering_nodes(trace))
    return nodes


def summarize_selection(
    result: SelectionResult,
    constraints: SelectionConstraints,
) -> str:
    """One-line summary of a selection result."""
    if not result.picked:
        return EMPTY_SELECTION_SUMMARY

    return (
        f"{len(result.picked)} of {result.eligible_count} eligible tx picked, "
        f"avg {result.avg_price:.2f}, "
        f"gas {result.gas_used:,} of {constraints.max_gas:,}."
    )


def explain_selection(
    trace: SelectionTrace,
    constraints: SelectionConstraints,
) -> Explanation:
    """Build the full Explanation (summary + nodes) for a selection trace."""
    return Explanation(
        summary=summarize_selection(trace.result, constraints),
        nodes=generate_explanation_nodes(trace, constraints),
    )


# =============================================================================
# Helpers
# =============================================================================


def _ids_with_status(trace: SelectionTrace, status: TxStatus) -> list[str]:
    return [d.tx_id for d in trace.decisions if d.status == status]


# =============================================================================
# Constraint Nodes
# =============================================================================


def _generate_constraint_nodes(
    trace: SelectionTrace,
    constraints: SelectionConstraints,
) -> list[ExplanationNode]:
    """Nodes for the base fee floor, gas budget and count cap."""
    nodes: list[ExplanationNode] = []
    result = trace.result

    if trace.decisions and result.eligible_count == 0:
        nodes.append(ExplanationNode(
            id="constraint_no_eligible",
            label="No Eligible Transactions",
            severity="error",
            category="constraint",
            metric="eligible_count",
            value=0,
            threshold=constraints.base_fee,
            detail=f"Every transaction pays less than the base fee {constraints.base_fee:g}",
        ))
    else:
        below = _ids_with_status(trace, TxStatus.BELOW_BASE_FEE)
        if below:
            nodes.append(ExplanationNode(
                id="constraint_below_base_fee",
                label="Below Base Fee",
                severity="info",
                category="constraint",
                metric="price",
                threshold=constraints.base_fee,
                tx_ids=below,
                detail=f"{len(below)} tx pay less than the base fee {constraints.base_fee:g}",
            ))

    if result.skipped:
        nodes.append(ExplanationNode(
            id="constraint_gas_budget",
            label="Gas Budget Exceeded",
            severity="warning",
            category="constraint",
            metric="gas_used",
            value=result.gas_used,
            threshold=constraints.max_gas,
            tx_ids=list(result.skipped),
            detail=f"{len(result.skipped)} tx did not fit the remaining gas and were skipped",
        ))
    elif constraints.max_gas > 0 and result.gas_used / constraints.max_gas >= NEAR_FULL_GAS_RATIO:
        ratio = result.gas_used / constraints.max_gas
        nodes.append(ExplanationNode(
            id="constraint_gas_near_budget",
            label="Gas Budget Nearly Full",
            severity="info",
            category="constraint",
            metric="gas_used",
            value=result.gas_used,
            threshold=constraints.max_gas,
            detail=f"Selection uses {ratio:.0%} of the {constraints.max_gas:,} gas budget",
        ))

    if result.stop_reason == StopReason.TX_LIMIT:
        waiting = _ids_with_status(trace, TxStatus.NOT_REACHED)
        nodes.append(ExplanationNode(
            id="constraint_tx_limit",
            label="Transaction Limit Reached",
            severity="warning",
            category="constraint",
            metric="picked",
            value=len(result.picked),
            threshold=constraints.max_txs,
            tx_ids=waiting,
            detail=f"{len(waiting)} queued tx left out by max_txs={constraints.max_txs}",
        ))

    return nodes


# =============================================================================
# Ordering Nodes
# =============================================================================


def _generate_ordering_nodes(trace: SelectionTrace) -> list[ExplanationNode]:
    """Nodes for transactions held back by per-sender nonce order."""
    nodes: list[ExplanationNode] = []

    gap = _ids_with_status(trace, TxStatus.NONCE_GAP)
    if gap:
        nodes.append(ExplanationNode(
            id="ordering_nonce_gap",
            label="Blocked By Nonce Gap",
            severity="warning",
            category="ordering",
            tx_ids=gap,
            detail="A lower nonce of the same sender is missing or below the base fee",
        ))

    duplicate = _ids_with_status(trace, TxStatus.DUPLICATE_NONCE)
    if duplicate:
        nodes.append(ExplanationNode(
            id="ordering_duplicate_nonce",
            label="Duplicate Nonce",
            severity="warning",
            category="ordering",
            tx_ids=duplicate,
            detail="Another tx of the same sender with this nonce pays more or arrived first",
        ))

    blocked = _ids_with_status(trace, TxStatus.PREDECESSOR_SKIPPED)
    if blocked:
        nodes.append(ExplanationNode(
            id="ordering_predecessor_skipped",
            label="Predecessor Skipped",
            severity="info",
            category="ordering",
            tx_ids=blocked,
            detail="An earlier nonce of the same sender did not fit the gas budget",
        ))

    return nodes
