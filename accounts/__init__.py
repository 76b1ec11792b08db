"""
Accounts module - ledger accounts and the limited-account policy.

This module handles:
- LedgerAccount entity (balance and limited flag)
- Account repository (port) and Django ORM adapter
- Unlocking limited accounts after qualifying reloads
"""
