"""
Multi-tenant staking ledger.

Projects registered on a platform let depositors lock a fungible asset for a
chosen duration and withdraw it later, optionally early, subject to fees.
"""

__version__ = "1.0.0"
