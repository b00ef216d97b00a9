"""
Demo: selection preview over the demo mempool.

Runs the selection engine over the built-in demo pool with the default
constraints, then with a few variations, and prints the picks, the per-tx
decisions and the explanation.

Usage:
    python -m scripts.demo_preview
    python -m scripts.demo_preview --base-fee 17 --max-gas 100000 --max-txs 3
    python -m scripts.demo_preview --policy lenient --query 0x4f
"""

import argparse

from txselect.config import DEFAULT_SELECTION_CONFIG
from txselect.demo import demo_pool
from txselect.engine.explanations import explain_selection
from txselect.engine.pool import filter_pool, summarize_pool
from txselect.engine.selector import trace_selection
from txselect.exceptions import SelectionError
from txselect.models import NoncePolicy, SelectionConstraints


def print_preview(title: str, constraints: SelectionConstraints, policy: NoncePolicy, query: str = None) -> None:
    """Run one preview and print it."""
    config = DEFAULT_SELECTION_CONFIG.model_copy(update={"nonce_policy": policy})
    pool = filter_pool(demo_pool(), query)

    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)
    print(
        f"base_fee={constraints.base_fee:g}  max_gas={constraints.max_gas:,}  "
        f"max_txs={constraints.max_txs}  policy={policy.value}  query={query!r}"
    )

    try:
        trace = trace_selection(pool, constraints, config)
    except SelectionError as e:
        print(f"❌ Blocked: {e}")
        return

    summary = summarize_pool(pool, config)
    result = trace.result

    print(f"\nPool: {summary.pool_size} tx   Eligible: {result.eligible_count} tx   "
          f"Preview: {len(result.picked)} tx / {result.gas_used:,} gas")

    print("\nHistogram:")
    for bucket in summary.histogram:
        print(f"  {bucket.label:>8}  {'#' * bucket.count}")

    print("\nPicked:")
    if not result.picked:
        print("  (none)")
    for tx in result.picked:
        print(f"  {tx.id:<12} {tx.sender:<10} nonce={tx.nonce:<4} gas={tx.gas:>7,} price={tx.price:g}")

    print("\nDecisions:")
    for decision in trace.decisions:
        print(f"  {decision.tx_id:<12} {decision.sender:<10} nonce={decision.nonce:<4} {decision.status.value}")

    explanation = explain_selection(trace, constraints)
    print(f"\nSummary: {explanation.summary}")
    for node in explanation.nodes:
        print(f"  [{node.severity}] {node.label}: {node.detail}")


def main():
    parser = argparse.ArgumentParser(
        description="Preview transaction selection over the demo mempool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--base-fee", type=float, default=None, help="Minimum price")
    parser.add_argument("--max-gas", type=int, default=None, help="Gas budget")
    parser.add_argument("--max-txs", type=int, default=None, help="Tx count cap")
    parser.add_argument(
        "--policy",
        type=str,
        default=DEFAULT_SELECTION_CONFIG.nonce_policy.value,
        choices=[p.value for p in NoncePolicy],
        help="Nonce gap policy (default: strict)",
    )
    parser.add_argument("--query", type=str, default=None, help="Search filter on tx id or sender")

    args = parser.parse_args()
    policy = NoncePolicy(args.policy)
    defaults = DEFAULT_SELECTION_CONFIG.default_constraints()

    if args.base_fee is not None or args.max_gas is not None or args.max_txs is not None:
        constraints = SelectionConstraints(
            base_fee=defaults.base_fee if args.base_fee is None else args.base_fee,
            max_gas=defaults.max_gas if args.max_gas is None else args.max_gas,
            max_txs=defaults.max_txs if args.max_txs is None else args.max_txs,
        )
        print_preview("CUSTOM PREVIEW", constraints, policy, args.query)
        return

    print_preview("[1/4] Default constraints", defaults, policy, args.query)
    print_preview(
        "[2/4] Tight gas budget",
        defaults.model_copy(update={"max_gas": 60_000}),
        policy,
        args.query,
    )
    print_preview(
        "[3/4] Count cap of one",
        defaults.model_copy(update={"max_txs": 1}),
        policy,
        args.query,
    )
    print_preview(
        "[4/4] Negative gas budget (expected: blocked)",
        defaults.model_copy(update={"max_gas": -1}),
        policy,
        args.query,
    )


if __name__ == "__main__":
    main()
