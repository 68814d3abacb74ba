"""
Deterministic addressing for ledger records.
"""

from staking_ledger.kernel.addressing.pda import (
    AddressDerivationError,
    DerivedAddress,
    create_program_address,
    find_program_address,
    is_on_curve,
    verify_program_address,
)
from staking_ledger.kernel.addressing.seeds import (
    asset_account_address,
    platform_address,
    project_address,
    stake_address,
    unstake_address,
    vault_address,
    vault_authority_address,
)
from staking_ledger.kernel.addressing.signer import (
    AuthorizesTransfer,
    IdentitySigner,
    VaultAuthority,
)

__all__ = [
    "AddressDerivationError",
    "DerivedAddress",
    "create_program_address",
    "find_program_address",
    "is_on_curve",
    "verify_program_address",
    "asset_account_address",
    "platform_address",
    "project_address",
    "stake_address",
    "unstake_address",
    "vault_address",
    "vault_authority_address",
    "AuthorizesTransfer",
    "IdentitySigner",
    "VaultAuthority",
]
