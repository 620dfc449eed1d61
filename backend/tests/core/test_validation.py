"""Tests for the validation rules and the schema evaluator — pure, no IO."""

import pytest

from rice_supply.core.entity_schemas import (
    CHAIN_ACTOR,
    CHAIN_TRANSACTION,
    MILLED_RICE,
    PRODUCTION_SEASON,
    RICE_BATCH,
)
from rice_supply.core.errors import ValidationError
from rice_supply.core.identity import new_record_id
from rice_supply.core.validation import (
    require_array_bound,
    require_boolean,
    require_enum,
    require_fields,
    require_identifier_shape,
    require_numeric_range,
    require_parseable_date,
    to_number,
    validate_create,
    validate_update,
)
from tests.fakes import valid_payload


# ─── require_fields ──────────────────────────────────────────────

def test_require_fields_lists_every_missing_field_in_order():
    with pytest.raises(ValidationError) as exc:
        require_fields({"name": "x"}, ["name", "actorType", "pin"])
    assert exc.value.message == "Missing required fields: actorType, pin"
    assert exc.value.http_status == 400


def test_require_fields_treats_empty_string_and_none_as_missing():
    with pytest.raises(ValidationError) as exc:
        require_fields({"name": "", "pin": None}, ["name", "pin"])
    assert exc.value.message == "Missing required fields: name, pin"


def test_require_fields_accepts_false_and_zero():
    require_fields({"flag": False, "count": 0}, ["flag", "count"])


# ─── require_identifier_shape ────────────────────────────────────

def test_identifier_shape_accepts_generated_ids():
    require_identifier_shape({"farmerId": new_record_id()}, ["farmerId"])


def test_identifier_shape_skips_absent_references():
    require_identifier_shape({"farmerId": None, "farmId": ""}, ["farmerId", "farmId"])


def test_identifier_shape_lists_every_malformed_field():
    payload = {"farmId": "farm-1", "farmerId": 42, "validator": new_record_id()}
    with pytest.raises(ValidationError) as exc:
        require_identifier_shape(payload, ["farmId", "farmerId", "validator"])
    assert exc.value.message == "Invalid identifier format in fields: farmId, farmerId"


# ─── require_enum ────────────────────────────────────────────────

def test_enum_rejects_value_outside_allowed_set():
    with pytest.raises(ValidationError) as exc:
        require_enum({"status": "sold"}, "status", ("forSale", "stock", "consumed"))
    assert exc.value.message == "Invalid status. Must be one of: forSale, stock, consumed"


def test_enum_is_case_sensitive():
    with pytest.raises(ValidationError):
        require_enum({"status": "ForSale"}, "status", ("forSale",))


def test_enum_skips_absent_value():
    require_enum({}, "status", ("forSale",))


# ─── require_array_bound ─────────────────────────────────────────

def test_array_bound_accepts_exactly_max_items():
    require_array_bound({"actorType": ["a"] * 10}, "actorType", 10)


def test_array_bound_rejects_one_over_max():
    with pytest.raises(ValidationError) as exc:
        require_array_bound({"actorType": ["a"] * 11}, "actorType", 10)
    assert exc.value.message == "actorType must be an array with maximum 10 items"


def test_array_bound_rejects_non_list():
    with pytest.raises(ValidationError):
        require_array_bound({"actorType": "farmer"}, "actorType", 10)


# ─── require_numeric_range ───────────────────────────────────────

@pytest.mark.parametrize("value", [0, 10000, "5000", 12.5])
def test_numeric_range_accepts_in_range_values(value):
    require_numeric_range({"moisture": value}, "moisture", 0, 10000)


@pytest.mark.parametrize("value", [-1, 10001, "wet", True, [1]])
def test_numeric_range_rejects_out_of_range_or_non_numeric(value):
    with pytest.raises(ValidationError) as exc:
        require_numeric_range({"moisture": value}, "moisture", 0, 10000)
    assert exc.value.message == "moisture must be a number between 0 and 10000"


def test_to_number_rejects_non_finite():
    assert to_number("nan") is None
    assert to_number(float("inf")) is None
    assert to_number(" 7 ") == 7.0


def test_to_number_rejects_integers_too_large_for_a_float():
    assert to_number(10**400) is None
    with pytest.raises(ValidationError):
        require_numeric_range({"assignedTps": 10**400}, "assignedTps")


# ─── require_parseable_date / require_boolean ───────────────────

@pytest.mark.parametrize("value", ["2024-06-01", "2024-06-01T08:30:00Z", "2024-06-01T08:30:00+08:00"])
def test_date_accepts_iso_forms(value):
    require_parseable_date({"plantingDate": value}, "plantingDate")


def test_date_rejects_garbage():
    with pytest.raises(ValidationError) as exc:
        require_parseable_date({"plantingDate": "next tuesday"}, "plantingDate")
    assert exc.value.message == "plantingDate must be a valid date"


def test_boolean_rejects_string_true():
    with pytest.raises(ValidationError) as exc:
        require_boolean({"carbonSmartCertified": "true"}, "carbonSmartCertified")
    assert exc.value.message == "carbonSmartCertified must be a boolean"


# ─── validate_create ─────────────────────────────────────────────

@pytest.mark.parametrize(
    "schema",
    [CHAIN_ACTOR, PRODUCTION_SEASON, MILLED_RICE, RICE_BATCH, CHAIN_TRANSACTION],
)
def test_valid_payloads_pass_create_validation(schema):
    validate_create(schema, valid_payload(schema.kind))


def test_create_rejects_non_object_body():
    with pytest.raises(ValidationError) as exc:
        validate_create(CHAIN_ACTOR, ["not", "an", "object"])
    assert exc.value.message == "Request body must be a JSON object"


def test_create_reports_missing_fields_before_other_violations():
    with pytest.raises(ValidationError) as exc:
        validate_create(CHAIN_ACTOR, {"organization": "nope"})
    assert exc.value.message.startswith("Missing required fields: name, actorType")


def test_create_checks_references_before_field_rules():
    payload = valid_payload(RICE_BATCH.kind) | {"seasonId": "season-1", "status": "sold"}
    with pytest.raises(ValidationError) as exc:
        validate_create(RICE_BATCH, payload)
    assert exc.value.message == "Invalid identifier format in fields: seasonId"


def test_create_enforces_moisture_upper_bound():
    payload = valid_payload(MILLED_RICE.kind) | {"moisture": 10001}
    with pytest.raises(ValidationError) as exc:
        validate_create(MILLED_RICE, payload)
    assert exc.value.message == "moisture must be a number between 0 and 10000"


def test_create_enforces_batch_id_bound():
    payload = valid_payload(CHAIN_TRANSACTION.kind)
    payload["batchIds"] = [new_record_id() for _ in range(51)]
    with pytest.raises(ValidationError) as exc:
        validate_create(CHAIN_TRANSACTION, payload)
    assert exc.value.message == "batchIds must be an array with maximum 50 items"


def test_transaction_list_rules_run_before_number_rules():
    payload = valid_payload(CHAIN_TRANSACTION.kind) | {
        "paymentReference": ["ref"] * 11,
        "pricePerKg": -1,
        "paymentMethod": "barter",
    }
    with pytest.raises(ValidationError) as exc:
        validate_create(CHAIN_TRANSACTION, payload)
    assert exc.value.message == "paymentReference must be an array with maximum 10 items"


def test_season_moisture_is_checked_before_dates():
    payload = valid_payload(PRODUCTION_SEASON.kind) | {
        "moistureContent": 10001,
        "plantingDate": "someday",
    }
    with pytest.raises(ValidationError) as exc:
        validate_create(PRODUCTION_SEASON, payload)
    assert exc.value.fields == ["moistureContent"]


def test_create_ignores_rules_for_non_creatable_fields():
    payload = valid_payload(CHAIN_ACTOR.kind) | {"balance": -5}
    validate_create(CHAIN_ACTOR, payload)


# ─── validate_update ─────────────────────────────────────────────

def test_update_requires_nothing():
    validate_update(CHAIN_ACTOR, {})


def test_update_still_checks_supplied_fields():
    with pytest.raises(ValidationError) as exc:
        validate_update(CHAIN_ACTOR, {"organization": "guild"})
    assert exc.value.message == "Invalid organization. Must be one of: blo, buyback, coop, none"


def test_update_checks_server_seeded_fields():
    with pytest.raises(ValidationError):
        validate_update(CHAIN_ACTOR, {"balance": -1})


def test_update_checks_balance_before_organization():
    with pytest.raises(ValidationError) as exc:
        validate_update(CHAIN_ACTOR, {"organization": "guild", "balance": -1})
    assert exc.value.fields == ["balance"]


def test_update_rejects_non_boolean_is_active():
    with pytest.raises(ValidationError) as exc:
        validate_update(RICE_BATCH, {"isActive": "no"})
    assert exc.value.message == "isActive must be a boolean"
