"""Tests for SnapshotFile — atomic JSON array persistence."""

import json

import pytest

from rice_supply.infrastructure.snapshot_file import SnapshotError, SnapshotFile


def test_missing_file_loads_empty(tmp_path):
    assert SnapshotFile(tmp_path, "chainActors").load() == []


def test_save_then_load_preserves_order(tmp_path):
    snapshot = SnapshotFile(tmp_path / "data", "riceBatches")
    records = [{"id": "0xb", "qrCode": "B"}, {"id": "0xa", "qrCode": "A"}]
    snapshot.save(records)
    assert snapshot.path == tmp_path / "data" / "riceBatches.json"
    assert snapshot.load() == records


def test_save_writes_pretty_json_array(tmp_path):
    snapshot = SnapshotFile(tmp_path, "milledRice")
    snapshot.save([{"id": "0x1"}])
    text = snapshot.path.read_text(encoding="utf-8")
    assert text.startswith("[\n")
    assert json.loads(text) == [{"id": "0x1"}]


def test_save_leaves_no_temp_files(tmp_path):
    snapshot = SnapshotFile(tmp_path, "chainTransactions")
    snapshot.save([{"id": "0x1"}])
    snapshot.save([{"id": "0x1"}, {"id": "0x2"}])
    assert [p.name for p in tmp_path.iterdir()] == ["chainTransactions.json"]


def test_corrupt_file_raises_snapshot_error(tmp_path):
    (tmp_path / "chainActors.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotError):
        SnapshotFile(tmp_path, "chainActors").load()


def test_non_array_document_raises_snapshot_error(tmp_path):
    (tmp_path / "chainActors.json").write_text('{"id": "0x1"}', encoding="utf-8")
    with pytest.raises(SnapshotError):
        SnapshotFile(tmp_path, "chainActors").load()


def test_entries_without_string_id_are_skipped(tmp_path):
    (tmp_path / "chainActors.json").write_text(
        json.dumps([{"id": "0x1"}, {"name": "no id"}, "junk", {"id": 7}]),
        encoding="utf-8",
    )
    assert SnapshotFile(tmp_path, "chainActors").load() == [{"id": "0x1"}]


def test_unserializable_record_raises_snapshot_error(tmp_path):
    with pytest.raises(SnapshotError):
        SnapshotFile(tmp_path, "chainActors").save([{"id": "0x1", "bad": object()}])
