"""
Program-derived addresses.

An address is ``sha256(seed_0 || ... || seed_n || bump || program_id || marker)``
for the highest ``bump`` in 255..0 whose digest is *not* a valid ed25519 point.
Since the address is off the curve, no private key can exist for it; the only
way to act for it is to re-derive it from the same public seeds.
"""

import hashlib
from dataclasses import dataclass
from typing import Sequence

from nacl.bindings import crypto_core_ed25519_is_valid_point

PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEED_LEN = 32
MAX_SEEDS = 16
ADDRESS_LEN = 32


class AddressDerivationError(ValueError):
    """Raised when seeds are malformed or no off-curve bump exists."""


@dataclass(frozen=True)
class DerivedAddress:
    """A derived address and the bump that pushed it off the curve."""

    address: bytes
    bump: int

    @property
    def hex(self) -> str:
        return self.address.hex()

    def __str__(self) -> str:
        return self.hex


def is_on_curve(candidate: bytes) -> bool:
    """True if the 32 bytes decode to a usable ed25519 public key."""
    return bool(crypto_core_ed25519_is_valid_point(candidate))


def _check_seeds(seeds: Sequence[bytes], program_id: bytes) -> None:
    if len(program_id) != ADDRESS_LEN:
        raise AddressDerivationError("program id must be 32 bytes")
    if len(seeds) > MAX_SEEDS:
        raise AddressDerivationError(f"at most {MAX_SEEDS} seeds allowed, got {len(seeds)}")
    for seed in seeds:
        if len(seed) > MAX_SEED_LEN:
            raise AddressDerivationError(
                f"seed of {len(seed)} bytes exceeds {MAX_SEED_LEN}"
            )


def create_program_address(seeds: Sequence[bytes], program_id: bytes) -> bytes:
    """
    Hash the seeds (bump included by the caller) into an address.

    Raises:
        AddressDerivationError: if the digest lands on the curve
    """
    _check_seeds(seeds, program_id)
    hasher = hashlib.sha256()
    for seed in seeds:
        hasher.update(seed)
    hasher.update(program_id)
    hasher.update(PDA_MARKER)
    digest = hasher.digest()
    if is_on_curve(digest):
        raise AddressDerivationError("derived address lies on the ed25519 curve")
    return digest


def find_program_address(seeds: Sequence[bytes], program_id: bytes) -> DerivedAddress:
    """
    Find the canonical (highest-bump) off-curve address for the seeds.

    Identical seeds and program id always yield the identical address.
    """
    _check_seeds(list(seeds) + [b""], program_id)
    for bump in range(255, -1, -1):
        try:
            address = create_program_address([*seeds, bytes([bump])], program_id)
        except AddressDerivationError:
            continue
        return DerivedAddress(address=address, bump=bump)
    raise AddressDerivationError("unable to find an off-curve bump for seeds")


def verify_program_address(
    address: bytes,
    seeds: Sequence[bytes],
    bump: int,
    program_id: bytes,
) -> bool:
    """Check that address is exactly what the seeds and bump derive to."""
    try:
        return create_program_address([*seeds, bytes([bump])], program_id) == address
    except AddressDerivationError:
        return False
