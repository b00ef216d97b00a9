"""
txselect - mempool transaction selection preview.

Greedy fee-priority selection of pending transactions under a gas budget and
a transaction-count cap, with per-sender nonce ordering.
"""
