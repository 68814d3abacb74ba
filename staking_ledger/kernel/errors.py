"""
Typed rejections for every ledger operation.

Each error carries a stable ``code`` (the name callers match on) and a
``category`` describing how a caller can recover:

- policy: the input is outside project/platform policy; adjust and resend
- authorization: the caller lacks the required role; never retried
- temporal: valid request at the wrong time; retry later or use the other path
- state: the request conflicts with current record state
- not_found: the addressed record does not exist
- asset_mover: the asset mover refused the transfer; surfaced unmodified
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    POLICY = "policy"
    AUTHORIZATION = "authorization"
    TEMPORAL = "temporal"
    STATE = "state"
    NOT_FOUND = "not_found"
    ASSET_MOVER = "asset_mover"


class StakingError(Exception):
    """Base class for all ledger rejections."""

    code: str = "StakingError"
    category: ErrorCategory = ErrorCategory.STATE
    message: str = "Operation rejected."

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.detail = message or self.message
        self.context = context
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "detail": self.detail,
            "code": self.code,
            "category": self.category.value,
        }
        if self.context:
            data["context"] = {k: v for k, v in self.context.items() if v is not None}
        return data

    def __repr__(self) -> str:
        return f"<{self.code} {self.detail!r}>"


# Policy violations

class InvalidDuration(StakingError):
    code = "InvalidDuration"
    category = ErrorCategory.POLICY
    message = "Invalid staking duration. The provided duration is not in the allowed list for this project."


class NameTooLong(StakingError):
    code = "NameTooLong"
    category = ErrorCategory.POLICY
    message = "Project name cannot exceed 32 bytes."


class TooManyDurations(StakingError):
    code = "TooManyDurations"
    category = ErrorCategory.POLICY
    message = "Too many durations provided. Maximum is 10."


class InvalidFeeBps(StakingError):
    code = "InvalidFeeBps"
    category = ErrorCategory.POLICY
    message = "Fee cannot exceed 10000 basis points (100%)."


class InvalidAmount(StakingError):
    code = "InvalidAmount"
    category = ErrorCategory.POLICY
    message = "Amount must be a positive integer no larger than 2^64-1."


class InvalidStakeId(StakingError):
    code = "InvalidStakeId"
    category = ErrorCategory.POLICY
    message = "Stake id must be an integer in the range 0..2^64-1."


class InvalidIdentity(StakingError):
    code = "InvalidIdentity"
    category = ErrorCategory.POLICY
    message = "Identity must be a 32-byte key encoded as 64 hex characters."


class InvalidAssetMover(StakingError):
    code = "InvalidAssetMover"
    category = ErrorCategory.POLICY
    message = "The asset mover does not match the one configured for this project."


# Authorization failures

class NotPlatformAuthority(StakingError):
    code = "NotPlatformAuthority"
    category = ErrorCategory.AUTHORIZATION
    message = "Signer is not a platform authority."


class NotProjectAuthority(StakingError):
    code = "NotProjectAuthority"
    category = ErrorCategory.AUTHORIZATION
    message = "Signer is not the project authority."


# Temporal failures

class LockupPeriodNotEnded(StakingError):
    code = "LockupPeriodNotEnded"
    category = ErrorCategory.TEMPORAL
    message = "Lockup period has not ended yet."


class LockupPeriodEnded(StakingError):
    code = "LockupPeriodEnded"
    category = ErrorCategory.TEMPORAL
    message = "Lockup period has already ended. Use the standard unstake function."


# State-consistency failures

class StakeNotActive(StakingError):
    code = "StakeNotActive"
    category = ErrorCategory.STATE
    message = "Stake is not active."


class AuthorityAlreadyExists(StakingError):
    code = "AuthorityAlreadyExists"
    category = ErrorCategory.STATE
    message = "The authority to add already exists."


class AuthorityNotFound(StakingError):
    code = "AuthorityNotFound"
    category = ErrorCategory.STATE
    message = "The authority to remove was not found."


class CannotRemoveLastAuthority(StakingError):
    code = "CannotRemoveLastAuthority"
    category = ErrorCategory.STATE
    message = "Cannot remove the last authority."


class InvalidFeeWallet(StakingError):
    code = "InvalidFeeWallet"
    category = ErrorCategory.STATE
    message = "Invalid fee wallet."


class RecordAlreadyExists(StakingError):
    code = "RecordAlreadyExists"
    category = ErrorCategory.STATE
    message = "A record already exists at the derived address."


# Missing records

class PlatformNotInitialized(StakingError):
    code = "PlatformNotInitialized"
    category = ErrorCategory.NOT_FOUND
    message = "The platform has not been initialized."


class ProjectNotFound(StakingError):
    code = "ProjectNotFound"
    category = ErrorCategory.NOT_FOUND
    message = "Project not found."


class StakeNotFound(StakingError):
    code = "StakeNotFound"
    category = ErrorCategory.NOT_FOUND
    message = "Stake not found."


class UnstakeRecordNotFound(StakingError):
    code = "UnstakeRecordNotFound"
    category = ErrorCategory.NOT_FOUND
    message = "Stake has not been withdrawn."


# Asset mover refusals

class AssetMoverError(StakingError):
    code = "AssetMoverError"
    category = ErrorCategory.ASSET_MOVER
    message = "The asset mover rejected the transfer."


class AccountNotFound(AssetMoverError):
    code = "AccountNotFound"
    message = "Asset account not found."


class InsufficientFunds(AssetMoverError):
    code = "InsufficientFunds"
    message = "Insufficient funds."


class AccountFrozen(AssetMoverError):
    code = "AccountFrozen"
    message = "Account is frozen."


class AssetMismatch(AssetMoverError):
    code = "AssetMismatch"
    message = "Account does not hold the expected asset."


class OwnerMismatch(AssetMoverError):
    code = "OwnerMismatch"
    message = "Transfer is not authorized by the source account owner."


class ArithmeticOverflow(AssetMoverError):
    code = "ArithmeticOverflow"
    message = "Balance would exceed 2^64-1."
