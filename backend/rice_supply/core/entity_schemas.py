"""Entity Schemas — the field tables for the five supply-chain record kinds.

Invariants:
    - Moisture fields are basis-point percentages: 0–10000
    - Weight, price, yield and balance fields are non-negative
    - List fields carry their maximum length (actorType 10, photoUrls 20,
      batchIds 50, paymentReference 10, geotagging 10)
    - Reference fields are shape-checked only; no existence check

Design Decisions:
    - Schemas are data, not subclasses: RecordStore/RecordService are generic
      and instantiated once per schema
    - Field declaration order is validation order (first violation wins)
"""

from rice_supply.core.domain_types import (
    BatchStatus,
    EntityKind,
    Organization,
    PaymentMethod,
    TransactionStatus,
    ValidationStatus,
    enum_values,
)
from rice_supply.core.validation import EntitySchema, FieldKind, FieldRule

MOISTURE_MAX = 10_000

_REF = FieldKind.REFERENCE
_NUM = FieldKind.NUMBER
_LIST = FieldKind.LIST


CHAIN_ACTOR = EntitySchema(
    kind=EntityKind.CHAIN_ACTOR,
    path="chain-actors",
    label="Chain actor",
    plural_label="Chain actors",
    snapshot_name="chainActors",
    fields=(
        FieldRule("name", required=True),
        FieldRule("actorType", _LIST, required=True, max_items=10),
        FieldRule("farmId", _REF),
        FieldRule("farmerId", _REF),
        FieldRule("assignedTps", _NUM, required=True),
        FieldRule("balance", _NUM, creatable=False, default=lambda: 0),
        FieldRule("pin", required=True),
        FieldRule(
            "organization", FieldKind.ENUM, required=True,
            choices=enum_values(Organization),
        ),
        FieldRule("address"),
    ),
)

PRODUCTION_SEASON = EntitySchema(
    kind=EntityKind.PRODUCTION_SEASON,
    path="production-seasons",
    label="Production season",
    plural_label="Production seasons",
    snapshot_name="productionSeasons",
    fields=(
        FieldRule("farmerId", _REF, required=True),
        FieldRule("cropYear", required=True),
        FieldRule("processedYieldKg", _NUM, required=True),
        FieldRule("totalYieldKg", _NUM),
        FieldRule("moistureContent", _NUM, maximum=MOISTURE_MAX),
        FieldRule("variety"),
        FieldRule("plannedPractice"),
        FieldRule("plantingDate", FieldKind.DATE),
        FieldRule("harvestDate", FieldKind.DATE),
        FieldRule("irrigationPractice"),
        FieldRule("fertilizerUsed"),
        FieldRule("pesticideUsed"),
        FieldRule("carbonSmartCertified", FieldKind.BOOLEAN, required=True),
        FieldRule(
            "validationStatus", FieldKind.ENUM,
            choices=enum_values(ValidationStatus),
            default=lambda: ValidationStatus.PENDING.value,
        ),
        FieldRule("validatorId", _REF, default=lambda: None),
    ),
)

MILLED_RICE = EntitySchema(
    kind=EntityKind.MILLED_RICE,
    path="milled-rice",
    label="Milled rice",
    plural_label="Milled rice",
    snapshot_name="milledRice",
    fields=(
        FieldRule("farmerId", _REF, required=True),
        FieldRule("totalWeightKg", _NUM, required=True),
        FieldRule("millingType", required=True),
        FieldRule("quality", required=True),
        FieldRule("photoUrls", _LIST, max_items=20, default=list),
        FieldRule("moisture", _NUM, required=True, maximum=MOISTURE_MAX),
        FieldRule("totalWeightProcessedKg", _NUM, required=True),
    ),
)

RICE_BATCH = EntitySchema(
    kind=EntityKind.RICE_BATCH,
    path="rice-batches",
    label="Rice batch",
    plural_label="Rice batches",
    snapshot_name="riceBatches",
    alternate_key="qrCode",
    alternate_key_path="qr",
    fields=(
        FieldRule("qrCode", required=True),
        FieldRule("millingId", _REF),
        FieldRule("batchWeightKg", _NUM, required=True),
        FieldRule("moistureContent", _NUM, maximum=MOISTURE_MAX),
        FieldRule("seasonId", _REF, required=True),
        FieldRule("currentHolderId", _REF),
        FieldRule("pricePerKg", _NUM),
        FieldRule("dryingId", _REF),
        FieldRule("validator", _REF),
        FieldRule(
            "status", FieldKind.ENUM, required=True,
            choices=enum_values(BatchStatus),
        ),
    ),
)

CHAIN_TRANSACTION = EntitySchema(
    kind=EntityKind.CHAIN_TRANSACTION,
    path="chain-transactions",
    label="Chain transaction",
    plural_label="Chain transactions",
    snapshot_name="chainTransactions",
    fields=(
        FieldRule("batchIds", _LIST, required=True, max_items=50, default=list),
        FieldRule("fromActorId", _REF),
        FieldRule("toActorId", _REF, required=True),
        FieldRule("paymentReference", _LIST, max_items=10),
        FieldRule("geotagging", _LIST, max_items=10),
        FieldRule("pricePerKg", _NUM),
        FieldRule("moisture", _NUM, maximum=MOISTURE_MAX),
        FieldRule("quality"),
        FieldRule(
            "paymentMethod", FieldKind.ENUM, choices=enum_values(PaymentMethod),
        ),
        FieldRule(
            "status", FieldKind.ENUM,
            choices=enum_values(TransactionStatus),
            default=lambda: TransactionStatus.PENDING.value,
        ),
    ),
)

ALL_SCHEMAS: tuple[EntitySchema, ...] = (
    CHAIN_ACTOR,
    PRODUCTION_SEASON,
    MILLED_RICE,
    RICE_BATCH,
    CHAIN_TRANSACTION,
)

SCHEMAS_BY_KIND: dict[EntityKind, EntitySchema] = {
    schema.kind: schema for schema in ALL_SCHEMAS
}
