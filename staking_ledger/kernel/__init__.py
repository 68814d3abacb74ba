"""
Kernel Layer

Foundations every ledger operation stands on:
- Deterministic addressing of records (no stored keys)
- Record storage with size and deposit accounting
- Asset movement between custody accounts
- Immutable event log (all mutations logged before commit)
- Typed errors and the time source
"""
