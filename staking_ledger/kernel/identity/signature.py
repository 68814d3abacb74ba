"""
Proof of key ownership for token issuance.

A caller proves it holds the private key for an identity by signing a login
message that binds the identity to a unix timestamp. Tokens are only issued
for fresh, valid signatures.
"""

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from staking_ledger.kernel.identity.keys import identity_bytes

LOGIN_DOMAIN = b"staking-ledger-login"


class SignatureRejected(Exception):
    """The login signature is malformed, stale, or does not verify."""


def login_message(identity: str, issued_at: int) -> bytes:
    return b":".join([LOGIN_DOMAIN, identity.lower().encode(), str(issued_at).encode()])


def verify_login(
    identity: str,
    issued_at: int,
    signature_hex: str,
    *,
    now: int,
    max_skew: int,
) -> str:
    """
    Check a signed login and return the normalized identity.

    Raises:
        SignatureRejected: if the timestamp is outside ``max_skew`` of ``now``
            or the signature does not verify
        InvalidIdentity: if identity is not 32 bytes of hex
    """
    key = identity_bytes(identity)
    if abs(now - issued_at) > max_skew:
        raise SignatureRejected("login timestamp outside the accepted window")
    try:
        signature = bytes.fromhex(signature_hex)
    except ValueError:
        raise SignatureRejected("signature is not hex") from None
    try:
        VerifyKey(key).verify(login_message(key.hex(), issued_at), signature)
    except (BadSignatureError, ValueError) as exc:
        raise SignatureRejected("signature does not verify") from exc
    return key.hex()
