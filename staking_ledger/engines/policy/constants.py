"""Policy limits shared by governance and the stake ledger."""

from staking_ledger.kernel.storage.layout import MAX_DURATIONS, MAX_NAME_BYTES

BPS_DENOMINATOR = 10_000  # 1 bps = 0.01%
MAX_FEE_BPS = BPS_DENOMINATOR
SECONDS_PER_DAY = 86_400

MAX_ALLOWED_DURATIONS = MAX_DURATIONS
MAX_PROJECT_NAME_BYTES = MAX_NAME_BYTES
