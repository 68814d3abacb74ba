"""
Caller identities.

An identity is a 32-byte ed25519 public key, carried through the ledger as
64 lowercase hex characters.
"""

from staking_ledger.kernel.errors import InvalidIdentity

IDENTITY_LEN = 32


def parse_identity(value: str) -> str:
    """Normalize a hex identity, rejecting anything that is not exactly 32 bytes."""
    if not isinstance(value, str):
        raise InvalidIdentity(identity=repr(value))
    candidate = value.strip().lower()
    try:
        raw = bytes.fromhex(candidate)
    except ValueError:
        raise InvalidIdentity(identity=value) from None
    if len(raw) != IDENTITY_LEN:
        raise InvalidIdentity(identity=value)
    return candidate


def identity_bytes(identity: str) -> bytes:
    return bytes.fromhex(parse_identity(identity))
