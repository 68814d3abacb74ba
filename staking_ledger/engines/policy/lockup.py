"""
Lockup window checks.

A stake is locked on ``[deposit_time, lockup_end)``: standard unstake opens
at exactly ``lockup_end``, and emergency unstake closes at the same instant.
"""

from staking_ledger.engines.policy.constants import SECONDS_PER_DAY
from staking_ledger.kernel.errors import LockupPeriodEnded, LockupPeriodNotEnded
from staking_ledger.kernel.limits import I64_MAX


def lockup_end(deposit_time: int, duration_days: int) -> int:
    end = deposit_time + duration_days * SECONDS_PER_DAY
    if end > I64_MAX:
        raise OverflowError("lockup end exceeds i64")
    return end


def is_locked(now: int, deposit_time: int, duration_days: int) -> bool:
    return now < lockup_end(deposit_time, duration_days)


def remaining_lockup(now: int, deposit_time: int, duration_days: int) -> int:
    """Seconds until unstake opens; 0 once it has."""
    return max(0, lockup_end(deposit_time, duration_days) - now)


def ensure_lockup_ended(now: int, deposit_time: int, duration_days: int) -> int:
    end = lockup_end(deposit_time, duration_days)
    if now < end:
        raise LockupPeriodNotEnded(lockup_end=end, now=now)
    return end


def ensure_within_lockup(now: int, deposit_time: int, duration_days: int) -> int:
    end = lockup_end(deposit_time, duration_days)
    if now >= end:
        raise LockupPeriodEnded(lockup_end=end, now=now)
    return end
