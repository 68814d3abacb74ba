"""
Generate (or load) an ed25519 identity and print a bearer token for it.

    python scripts/issue_token.py                # new random identity
    python scripts/issue_token.py <seed-hex>     # deterministic identity
"""

import sys
sys.path.insert(0, ".")

import time

from nacl.signing import SigningKey

from staking_ledger.kernel.identity import create_access_token, login_message

if len(sys.argv) > 1:
    signing_key = SigningKey(bytes.fromhex(sys.argv[1]))
else:
    signing_key = SigningKey.generate()

identity = signing_key.verify_key.encode().hex()
issued_at = int(time.time())
signature = signing_key.sign(login_message(identity, issued_at)).signature.hex()
token, expires_at, _ = create_access_token(identity)

print(f"seed:      {signing_key.encode().hex()}")
print(f"identity:  {identity}")
print(f"login:     {{\"identity\": \"{identity}\", \"issued_at\": {issued_at}, \"signature\": \"{signature}\"}}")
print(f"token:     {token}")
print(f"expires:   {expires_at.isoformat()}")
