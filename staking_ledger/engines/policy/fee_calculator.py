"""
Basis-point fee arithmetic.

``fee = amount * bps // 10000`` (floor) and ``payout = amount - fee``, so the
two always sum to the staked amount exactly. Intermediate products are
checked against u64 bounds the way the persisted fields are.
"""

from dataclasses import dataclass

from staking_ledger.engines.policy.constants import BPS_DENOMINATOR, MAX_FEE_BPS
from staking_ledger.kernel.errors import InvalidFeeBps
from staking_ledger.kernel.limits import U64_MAX, checked_u64


@dataclass(frozen=True)
class FeeSplit:
    amount: int
    fee_bps: int
    fee: int
    payout: int


def validate_fee_bps(fee_bps: int) -> int:
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool) or fee_bps < 0 or fee_bps > MAX_FEE_BPS:
        raise InvalidFeeBps(fee_bps=fee_bps)
    return fee_bps


def compute_fee(amount: int, fee_bps: int) -> int:
    """
    Floor of ``amount * fee_bps / 10000``.

    The product is at most (2^64-1) * 10000, which exceeds u64; it is held in
    a u128-sized intermediate and the quotient is checked back into u64.
    """
    if amount < 0 or amount > U64_MAX:
        raise OverflowError(f"amount {amount} does not fit in u64")
    product = amount * fee_bps
    if product >= 2**128:
        raise OverflowError("fee product exceeds u128")
    return checked_u64(product // BPS_DENOMINATOR)


def split_amount(amount: int, fee_bps: int) -> FeeSplit:
    validate_fee_bps(fee_bps)
    fee = compute_fee(amount, fee_bps)
    payout = checked_u64(amount - fee)
    return FeeSplit(amount=amount, fee_bps=fee_bps, fee=fee, payout=payout)
