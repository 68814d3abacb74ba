"""Unit tests for identities, bearer tokens and signed logins."""

from datetime import timedelta

import pytest

from staking_ledger.kernel.errors import ErrorCategory, InvalidIdentity, LockupPeriodNotEnded
from staking_ledger.kernel.identity import (
    JWTManager,
    SignatureRejected,
    login_message,
    parse_identity,
    verify_login,
)
from tests.conftest import make_signing_key


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


class TestParseIdentity:

    def test_normalizes_case_and_whitespace(self):
        raw = "AB" * 32
        assert parse_identity(f"  {raw} ") == "ab" * 32

    @pytest.mark.parametrize("value", ["", "ab" * 31, "ab" * 33, "zz" * 32, None])
    def test_rejects_malformed(self, value):
        with pytest.raises(InvalidIdentity):
            parse_identity(value)


class TestJWTManager:
    """Tests for JWT creation and verification."""

    def test_round_trip_subject(self, jwt_manager):
        identity = "cd" * 32
        token, expires_at, jti = jwt_manager.create_access_token(identity)

        payload = jwt_manager.verify_access_token(token)

        assert payload is not None
        assert payload.sub == identity
        assert payload.jti == jti
        assert payload.exp == expires_at.replace(microsecond=0)

    def test_wrong_secret_rejected(self, jwt_manager):
        token, _, _ = jwt_manager.create_access_token("cd" * 32)
        other = JWTManager(secret_key="another-secret-key-for-testing-only")

        assert other.verify_access_token(token) is None

    def test_expired_token_rejected(self, jwt_manager):
        token, _, _ = jwt_manager.create_access_token("cd" * 32, expires_delta=timedelta(seconds=-5))

        assert jwt_manager.verify_access_token(token) is None

    def test_garbage_rejected(self, jwt_manager):
        assert jwt_manager.verify_access_token("not-a-token") is None


class TestSignedLogin:
    """Tests for ed25519 login verification."""

    NOW = 1_700_000_000

    def _sign(self, seed: int, issued_at: int):
        key = make_signing_key(seed)
        identity = key.verify_key.encode().hex()
        signature = key.sign(login_message(identity, issued_at)).signature.hex()
        return identity, signature

    def test_valid_signature(self):
        identity, signature = self._sign(7, self.NOW)

        assert verify_login(identity, self.NOW, signature, now=self.NOW, max_skew=300) == identity

    def test_uppercase_identity_accepted(self):
        identity, signature = self._sign(7, self.NOW)

        assert verify_login(identity.upper(), self.NOW, signature, now=self.NOW, max_skew=300) == identity

    def test_stale_login_rejected(self):
        identity, signature = self._sign(7, self.NOW - 301)

        with pytest.raises(SignatureRejected):
            verify_login(identity, self.NOW - 301, signature, now=self.NOW, max_skew=300)

    def test_signature_for_other_timestamp_rejected(self):
        identity, signature = self._sign(7, self.NOW)

        with pytest.raises(SignatureRejected):
            verify_login(identity, self.NOW + 1, signature, now=self.NOW, max_skew=300)

    def test_signature_by_other_key_rejected(self):
        identity, _ = self._sign(7, self.NOW)
        _, other_signature = self._sign(8, self.NOW)

        with pytest.raises(SignatureRejected):
            verify_login(identity, self.NOW, other_signature, now=self.NOW, max_skew=300)

    def test_non_hex_signature_rejected(self):
        identity, _ = self._sign(7, self.NOW)

        with pytest.raises(SignatureRejected):
            verify_login(identity, self.NOW, "zz" * 64, now=self.NOW, max_skew=300)


class TestStakingError:

    def test_to_dict_carries_code_and_category(self):
        error = LockupPeriodNotEnded(lockup_end=10, now=5)

        body = error.to_dict()

        assert body["code"] == "LockupPeriodNotEnded"
        assert body["category"] == ErrorCategory.TEMPORAL.value
        assert body["context"] == {"lockup_end": 10, "now": 5}
        assert str(error) == LockupPeriodNotEnded.message
