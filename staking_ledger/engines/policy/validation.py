"""
Input validation for governance and staking requests.
"""

from typing import Iterable, List

from staking_ledger.engines.policy.constants import MAX_ALLOWED_DURATIONS, MAX_PROJECT_NAME_BYTES
from staking_ledger.kernel.errors import (
    InvalidAmount,
    InvalidDuration,
    InvalidStakeId,
    NameTooLong,
    TooManyDurations,
)
from staking_ledger.kernel.limits import U32_MAX, U64_MAX


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_project_name(name: str) -> str:
    """Names are limited by UTF-8 byte length, not character count."""
    if len(name.encode("utf-8")) > MAX_PROJECT_NAME_BYTES:
        raise NameTooLong(name_bytes=len(name.encode("utf-8")))
    return name


def validate_durations(durations: Iterable[int]) -> List[int]:
    """
    Validate an allowed-durations list, preserving order.

    Raises:
        TooManyDurations: more than 10 entries
        InvalidDuration: an entry outside u32, or a repeated entry
    """
    values = list(durations)
    if len(values) > MAX_ALLOWED_DURATIONS:
        raise TooManyDurations(count=len(values))
    seen = set()
    for value in values:
        if not _is_int(value) or value < 0 or value > U32_MAX:
            raise InvalidDuration(duration_days=value)
        if value in seen:
            raise InvalidDuration("Duplicate duration in allowed list.", duration_days=value)
        seen.add(value)
    return values


def validate_duration(duration_days: int, allowed: List[int]) -> int:
    if not _is_int(duration_days) or duration_days not in allowed:
        raise InvalidDuration(duration_days=duration_days, allowed=list(allowed))
    return duration_days


def validate_amount(amount: int) -> int:
    if not _is_int(amount) or amount <= 0 or amount > U64_MAX:
        raise InvalidAmount(amount=amount)
    return amount


def validate_stake_id(stake_id: int) -> int:
    if not _is_int(stake_id) or stake_id < 0 or stake_id > U64_MAX:
        raise InvalidStakeId(stake_id=stake_id)
    return stake_id
