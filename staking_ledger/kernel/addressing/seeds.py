"""
Seed tuples for every record the ledger stores.

Integers are encoded as little-endian u64 so the seeds are stable across
platforms and languages.
"""

from staking_ledger.kernel.addressing.pda import DerivedAddress, find_program_address

PLATFORM_SEED = b"platform"
PROJECT_SEED = b"project"
VAULT_SEED = b"vault"
VAULT_AUTHORITY_SEED = b"vault-authority"
STAKE_SEED = b"stake"
UNSTAKE_SEED = b"unstake"
ASSET_ACCOUNT_SEED = b"asset-account"


def u64_le(value: int) -> bytes:
    return value.to_bytes(8, "little", signed=False)


def platform_seeds() -> list[bytes]:
    return [PLATFORM_SEED]


def project_seeds(project_id: int) -> list[bytes]:
    return [PROJECT_SEED, u64_le(project_id)]


def vault_seeds(project_id: int) -> list[bytes]:
    return [VAULT_SEED, u64_le(project_id)]


def vault_authority_seeds(project_id: int) -> list[bytes]:
    return [VAULT_AUTHORITY_SEED, u64_le(project_id)]


def stake_seeds(project_address: bytes, depositor: bytes, stake_id: int) -> list[bytes]:
    return [STAKE_SEED, project_address, depositor, u64_le(stake_id)]


def unstake_seeds(stake_address: bytes) -> list[bytes]:
    return [UNSTAKE_SEED, stake_address]


def platform_address(program_id: bytes) -> DerivedAddress:
    return find_program_address(platform_seeds(), program_id)


def project_address(program_id: bytes, project_id: int) -> DerivedAddress:
    return find_program_address(project_seeds(project_id), program_id)


def vault_address(program_id: bytes, project_id: int) -> DerivedAddress:
    return find_program_address(vault_seeds(project_id), program_id)


def vault_authority_address(program_id: bytes, project_id: int) -> DerivedAddress:
    return find_program_address(vault_authority_seeds(project_id), program_id)


def stake_address(
    program_id: bytes,
    project_address: bytes,
    depositor: bytes,
    stake_id: int,
) -> DerivedAddress:
    return find_program_address(stake_seeds(project_address, depositor, stake_id), program_id)


def unstake_address(program_id: bytes, stake_address: bytes) -> DerivedAddress:
    return find_program_address(unstake_seeds(stake_address), program_id)


def asset_account_address(mover_namespace: bytes, owner: bytes, asset_id: bytes) -> DerivedAddress:
    """Default custody account of ``owner`` for ``asset_id`` under an asset mover."""
    return find_program_address([ASSET_ACCOUNT_SEED, owner, asset_id], mover_namespace)
