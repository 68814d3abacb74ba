"""Integer widths of the persisted ledger fields."""

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
I64_MAX = 2**63 - 1


def checked_u64(value: int) -> int:
    """Return value unchanged if it fits in a u64; overflow is a defect, not a rejection."""
    if value < 0 or value > U64_MAX:
        raise OverflowError(f"{value} does not fit in u64")
    return value
