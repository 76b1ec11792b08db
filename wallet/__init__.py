"""
Wallet module - idempotent balance operations.

This module handles:
- WalletTransaction entity and its pending/completed/failed lifecycle
- Payments (debits) and reloads (credits) applied once per idempotency key
- Daily reload caps and double-submission cooldowns
- Atomic and degraded ledger paths
"""
