"""Tests for record construction, merge and soft delete — pure, no IO."""

from datetime import datetime, timezone

from rice_supply.core.entity_schemas import (
    CHAIN_ACTOR,
    CHAIN_TRANSACTION,
    MILLED_RICE,
    PRODUCTION_SEASON,
)
from rice_supply.core.identity import new_record_id
from rice_supply.core.records import (
    build_record,
    deactivate,
    merge_update,
    next_timestamp,
    parse_timestamp,
    updatable_changes,
)
from tests.fakes import valid_payload

NOON = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_build_record_sets_identity_and_timestamps():
    record_id = new_record_id()
    record = build_record(CHAIN_ACTOR, valid_payload(CHAIN_ACTOR.kind), record_id, NOON)
    assert record["id"] == record_id
    assert record["createdAt"] == record["updatedAt"]
    assert parse_timestamp(record["createdAt"]) == NOON
    assert record["isActive"] is True


def test_build_record_seeds_actor_balance_even_if_supplied():
    payload = valid_payload(CHAIN_ACTOR.kind) | {"balance": 999}
    record = build_record(CHAIN_ACTOR, payload, new_record_id(), NOON)
    assert record["balance"] == 0


def test_build_record_applies_defaults_only_when_absent():
    season = build_record(
        PRODUCTION_SEASON, valid_payload(PRODUCTION_SEASON.kind), new_record_id(), NOON,
    )
    assert season["validationStatus"] == "pending"
    assert season["validatorId"] is None

    payload = valid_payload(PRODUCTION_SEASON.kind) | {"validationStatus": "validated"}
    season = build_record(PRODUCTION_SEASON, payload, new_record_id(), NOON)
    assert season["validationStatus"] == "validated"


def test_build_record_defaults_lists():
    milled = build_record(MILLED_RICE, valid_payload(MILLED_RICE.kind), new_record_id(), NOON)
    assert milled["photoUrls"] == []
    tx = build_record(
        CHAIN_TRANSACTION, valid_payload(CHAIN_TRANSACTION.kind), new_record_id(), NOON,
    )
    assert tx["status"] == "pending"


def test_build_record_drops_unknown_and_server_managed_keys():
    payload = valid_payload(CHAIN_ACTOR.kind) | {
        "id": "0xdead", "createdAt": "yesterday", "blockchainTx": "0xabc", "color": "red",
    }
    record_id = new_record_id()
    record = build_record(CHAIN_ACTOR, payload, record_id, NOON)
    assert record["id"] == record_id
    assert "blockchainTx" not in record
    assert "color" not in record
    assert record["createdAt"] != "yesterday"


def test_updatable_changes_filters_to_schema_fields_and_is_active():
    changes = updatable_changes(CHAIN_ACTOR, {
        "name": "New", "isActive": False, "id": "0x1", "updatedAt": "x",
        "blockchainTx": "0x2", "unknown": 1,
    })
    assert changes == {"name": "New", "isActive": False}


def test_merge_update_keeps_identity_and_untouched_fields():
    record = build_record(CHAIN_ACTOR, valid_payload(CHAIN_ACTOR.kind), new_record_id(), NOON)
    merged = merge_update(record, {"name": "Maria"})
    assert merged["name"] == "Maria"
    assert merged["pin"] == record["pin"]
    assert merged["id"] == record["id"]
    assert merged["createdAt"] == record["createdAt"]
    assert merged is not record


def test_merge_update_overwrites_with_explicit_null():
    record = build_record(CHAIN_ACTOR, valid_payload(CHAIN_ACTOR.kind), new_record_id(), NOON)
    merged = merge_update(record, {"address": None})
    assert merged["address"] is None


def test_updated_at_moves_forward_even_when_clock_stands_still():
    record = build_record(CHAIN_ACTOR, valid_payload(CHAIN_ACTOR.kind), new_record_id(), NOON)
    first = merge_update(record, {"name": "A"}, now=NOON)
    second = merge_update(first, {"name": "B"}, now=NOON)
    assert parse_timestamp(first["updatedAt"]) > parse_timestamp(record["updatedAt"])
    assert parse_timestamp(second["updatedAt"]) > parse_timestamp(first["updatedAt"])


def test_next_timestamp_uses_clock_when_it_is_ahead():
    assert parse_timestamp(next_timestamp("2024-01-01T00:00:00.000000+00:00", NOON)) == NOON


def test_deactivate_only_flips_is_active():
    record = build_record(CHAIN_ACTOR, valid_payload(CHAIN_ACTOR.kind), new_record_id(), NOON)
    retired = deactivate(record)
    assert retired["isActive"] is False
    assert {k: v for k, v in retired.items() if k not in ("isActive", "updatedAt")} == {
        k: v for k, v in record.items() if k not in ("isActive", "updatedAt")
    }
    assert deactivate(retired)["isActive"] is False
