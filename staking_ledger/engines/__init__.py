"""
Engines Layer

- policy: pure fee, lockup and input checks
- governance: platform authorities and project configuration
- ledger: the stake state machine
"""
