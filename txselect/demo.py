"""
Demo mempool snapshot.

Static pool used by the demo endpoint and scripts/demo_preview.py until a
live pending-transaction source is wired in.
"""

from txselect.models import Transaction


DEMO_TRANSACTIONS: list[Transaction] = [
    Transaction(id="0xa1..88ef", sender="0x8a..9c", gas=21_000, price=18, nonce=5, age_sec=4),
    Transaction(id="0xa2..21aa", sender="0x8a..9c", gas=21_000, price=18, nonce=6, age_sec=3),
    Transaction(id="0x0f..aa91", sender="0x4f..77", gas=50_000, price=22, nonce=12, age_sec=8),
    Transaction(id="0x7a..9111", sender="0xb1..e4", gas=40_000, price=16, nonce=44, age_sec=13),
    Transaction(id="0x9c..19de", sender="0x2c..10", gas=90_000, price=15, nonce=3, age_sec=12),
    Transaction(id="0x5d..7312", sender="0x2c..10", gas=30_000, price=17, nonce=4, age_sec=6),
    Transaction(id="0x3a..00ab", sender="0x4f..77", gas=21_000, price=25, nonce=13, age_sec=2),
]


def demo_pool() -> list[Transaction]:
    """Return a fresh copy of the demo snapshot."""
    return [tx.model_copy() for tx in DEMO_TRANSACTIONS]
