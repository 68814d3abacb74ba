"""
Byte layouts of the ledger records.

The storage substrate charges a deposit per allocated byte, so each record's
``data_len`` must track the serialized size of its contents. Every record
starts with an 8-byte type discriminator; lists carry a 4-byte length prefix.
"""

DISCRIMINATOR = 8
IDENTITY = 32
U64 = 8
U32 = 4
U16 = 2
I64 = 8
BOOL = 1
ENUM_TAG = 1
VEC_PREFIX = 4

MAX_NAME_BYTES = 32
MAX_DURATIONS = 10


def platform_size(authority_count: int) -> int:
    """Discriminator, authorities vec, project_count."""
    return DISCRIMINATOR + VEC_PREFIX + IDENTITY * authority_count + U64


def project_size(name_bytes: int, duration_count: int) -> int:
    return (
        DISCRIMINATOR
        + U64  # project_id
        + IDENTITY  # project_authority
        + IDENTITY  # asset_id
        + IDENTITY  # custody_ref
        + VEC_PREFIX + name_bytes
        + IDENTITY  # fee_recipient
        + IDENTITY  # asset_mover_id
        + U16  # unstake_fee_bps
        + U16  # emergency_unstake_fee_bps
        + VEC_PREFIX + U32 * duration_count
    )


PROJECT_MAX_SIZE = project_size(MAX_NAME_BYTES, MAX_DURATIONS)

STAKE_SIZE = (
    DISCRIMINATOR
    + IDENTITY  # depositor
    + IDENTITY  # project_ref
    + U64  # project_id
    + U64  # stake_id
    + U64  # amount
    + I64  # deposit_time
    + U32  # duration_days
    + BOOL  # active
    + ENUM_TAG  # status
)

UNSTAKE_SIZE = (
    DISCRIMINATOR
    + IDENTITY  # depositor
    + IDENTITY  # project_ref
    + IDENTITY  # stake_ref
    + U64  # stake_id
    + U64  # amount
    + U64  # fee
    + U64  # payout
    + I64  # settlement_time
    + ENUM_TAG  # status
)


def required_size(record) -> int:
    """Size the record's current contents need, dispatched on table name."""
    table = record.__tablename__
    if table == "platform_registry":
        return platform_size(len(record.authorities))
    if table == "project_registry":
        return project_size(len(record.name.encode("utf-8")), len(record.allowed_durations))
    if table == "stake_records":
        return STAKE_SIZE
    if table == "unstake_records":
        return UNSTAKE_SIZE
    raise ValueError(f"no layout for {table}")
