"""
Transfer authorization.

The asset mover only debits an account when the request carries an
``AuthorizesTransfer`` whose ``authority`` equals the account owner. Two kinds
exist: a depositor acting for their own account (identity verified upstream),
and a vault authority, which has no key at all and is proven by re-deriving
its address from public seeds.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from staking_ledger.kernel.addressing.pda import verify_program_address
from staking_ledger.kernel.addressing.seeds import vault_authority_address, vault_authority_seeds


@runtime_checkable
class AuthorizesTransfer(Protocol):
    @property
    def authority(self) -> str:
        """Hex identity that must own the source account."""
        ...


@dataclass(frozen=True)
class IdentitySigner:
    """A caller whose identity was verified by the transport layer."""

    identity: str

    @property
    def authority(self) -> str:
        return self.identity


@dataclass(frozen=True)
class VaultAuthority:
    """Keyless signer for one project's vault."""

    project_id: int
    address: bytes
    bump: int

    @classmethod
    def derive(cls, program_id: bytes, project_id: int) -> "VaultAuthority":
        derived = vault_authority_address(program_id, project_id)
        return cls(project_id=project_id, address=derived.address, bump=derived.bump)

    @property
    def authority(self) -> str:
        return self.address.hex()

    def verify(self, program_id: bytes) -> bool:
        """Re-derive from the public seeds; only the true vault authority passes."""
        return verify_program_address(
            self.address,
            vault_authority_seeds(self.project_id),
            self.bump,
            program_id,
        )
