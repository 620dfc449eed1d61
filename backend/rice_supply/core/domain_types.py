"""Domain Types — enums and identity types shared across the record layer.

Invariants:
    - RecordId wraps the address-shaped identifier string (see core/identity.py)
    - Every enum-constrained field has a str Enum here; schemas derive their
      allowed-value lists from these, never from raw string literals

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import Any, NewType


# ─── Identity Types ──────────────────────────────────────────────

RecordId = NewType("RecordId", str)

Record = dict[str, Any]


# ─── Enums ───────────────────────────────────────────────────────

class EntityKind(str, Enum):
    """The five record kinds exposed by the API."""
    CHAIN_ACTOR = "chain_actor"
    PRODUCTION_SEASON = "production_season"
    MILLED_RICE = "milled_rice"
    RICE_BATCH = "rice_batch"
    CHAIN_TRANSACTION = "chain_transaction"


class Organization(str, Enum):
    BLO = "blo"
    BUYBACK = "buyback"
    COOP = "coop"
    NONE = "none"


class ValidationStatus(str, Enum):
    """Production season review state — new seasons start pending."""
    PENDING = "pending"
    VALIDATED = "validated"
    REJECTED = "rejected"


class BatchStatus(str, Enum):
    FOR_SALE = "forSale"
    STOCK = "stock"
    CONSUMED = "consumed"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CHEQUE = "cheque"
    ONLINE = "online"


class TransactionStatus(str, Enum):
    """Chain transaction lifecycle — new transactions start pending."""
    PENDING = "pending"
    LOADING = "loading"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


def enum_values(enum_cls: type[Enum]) -> tuple[str, ...]:
    """Allowed wire values of a str Enum, in declaration order."""
    return tuple(member.value for member in enum_cls)
