"""
Fee & Lockup Policy Engine.

Pure functions: every stake-ledger transition is gated here before any
record or balance changes.
"""

from staking_ledger.engines.policy.constants import (
    BPS_DENOMINATOR,
    MAX_ALLOWED_DURATIONS,
    MAX_FEE_BPS,
    MAX_PROJECT_NAME_BYTES,
    SECONDS_PER_DAY,
)
from staking_ledger.engines.policy.fee_calculator import (
    FeeSplit,
    compute_fee,
    split_amount,
    validate_fee_bps,
)
from staking_ledger.engines.policy.lockup import (
    ensure_lockup_ended,
    ensure_within_lockup,
    is_locked,
    lockup_end,
    remaining_lockup,
)
from staking_ledger.engines.policy.validation import (
    validate_amount,
    validate_duration,
    validate_durations,
    validate_project_name,
    validate_stake_id,
)

__all__ = [
    "BPS_DENOMINATOR",
    "MAX_ALLOWED_DURATIONS",
    "MAX_FEE_BPS",
    "MAX_PROJECT_NAME_BYTES",
    "SECONDS_PER_DAY",
    "FeeSplit",
    "compute_fee",
    "split_amount",
    "validate_fee_bps",
    "ensure_lockup_ended",
    "ensure_within_lockup",
    "is_locked",
    "lockup_end",
    "remaining_lockup",
    "validate_amount",
    "validate_duration",
    "validate_durations",
    "validate_project_name",
    "validate_stake_id",
]
