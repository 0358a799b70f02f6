"""
Tests for the Record Store and Record Service

Tests covering:
1. Create maps fields, drops blanks and inserts once
2. Create with nothing left is rejected before any write
3. Update keeps explicit None and skips empty diffs
4. Unknown and read-only fields are rejected before any write
5. Store constraint violations propagate unchanged
6. JSON persistence
"""

from __future__ import annotations

import warnings
from datetime import datetime, timedelta, timezone

import pytest

from core.mapping import CONTACT, PROPERTY, UNSET, UnknownFieldError, ValidationError
from core.records import (
    InMemoryRecordStore,
    IntegrityError,
    RecordNotFoundError,
    RecordService,
    get_record_store,
    reset_record_store,
)


# =============================================================================
# Fixtures
# =============================================================================


class RecordingStore:
    """Store double recording every call."""

    def __init__(self):
        self.calls = []

    def insert(self, table, fields):
        self.calls.append(("insert", table, dict(fields)))
        return {"id": 1, **fields}

    def update(self, table, record_id, fields):
        self.calls.append(("update", table, record_id, dict(fields)))

    def select_by_id(self, table, record_id):
        return None

    def delete(self, table, record_id):
        return False


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def properties(recording_store):
    return RecordService(recording_store, PROPERTY)


@pytest.fixture
def property_service(store):
    return RecordService(store, PROPERTY)


@pytest.fixture
def minimal_property():
    return {"title": "Test", "propertyType": "wohnung", "marketingType": "kauf"}


# =============================================================================
# Create
# =============================================================================


class TestCreateEntity:

    def test_maps_and_inserts_once(self, properties, recording_store):
        properties.create_entity({"price": 135000, "coldRent": 500, "title": "Test"})

        assert recording_store.calls == [
            ("insert", "properties", {"purchasePrice": 135000, "baseRent": 500, "title": "Test"})
        ]

    def test_drops_none_and_empty_strings(self, properties, recording_store):
        properties.create_entity({"title": "Test", "price": None, "headline": "", "city": "  "})

        assert recording_store.calls[0][2] == {"title": "Test"}

    def test_keeps_falsy_values(self, properties, recording_store):
        properties.create_entity({"title": "Test", "price": 0, "hasBalcony": False})

        assert recording_store.calls[0][2] == {
            "title": "Test",
            "purchasePrice": 0,
            "hasBalcony": False,
        }

    def test_nothing_left_raises_validation_error(self, properties, recording_store):
        with pytest.raises(ValidationError) as exc_info:
            properties.create_entity({"price": None, "title": UNSET})

        assert not isinstance(exc_info.value, UnknownFieldError)
        assert exc_info.value.entity == "property"
        assert recording_store.calls == []

    def test_empty_payload_raises_validation_error(self, properties, recording_store):
        with pytest.raises(ValidationError):
            properties.create_entity({})
        assert recording_store.calls == []

    def test_unknown_fields_rejected_before_write(self, properties, recording_store):
        with pytest.raises(UnknownFieldError) as exc_info:
            properties.create_entity({"title": "Test", "heatingKind": "gas", "foo": 1})

        assert exc_info.value.fields == ("heatingKind", "foo")
        assert recording_store.calls == []

    def test_read_only_fields_rejected(self, properties, recording_store):
        with pytest.raises(ValidationError) as exc_info:
            properties.create_entity({"title": "Test", "id": 5})

        assert "id" in str(exc_info.value)
        assert recording_store.calls == []

    def test_values_normalised(self, properties, recording_store):
        properties.create_entity({
            "title": "Test",
            "heatingType": "waermepumpe",
            "availableFrom": "2025-03-01",
        })

        assert recording_store.calls[0][2] == {
            "title": "Test",
            "heatingType": "zentralheizung",
            "availableFrom": "2025-03-01 00:00:00",
        }

    def test_unknown_enum_value_dropped_on_create(self, properties, recording_store):
        properties.create_entity({"title": "Test", "heatingType": "kaminofen"})
        assert recording_store.calls[0][2] == {"title": "Test"}


# =============================================================================
# Update
# =============================================================================


class TestUpdateEntity:

    def test_null_clears_mapped_column(self, properties, recording_store):
        properties.update_entity(7, {"price": None})

        assert recording_store.calls == [("update", "properties", 7, {"purchasePrice": None})]

    def test_empty_string_stored_as_null(self, properties, recording_store):
        properties.update_entity(7, {"headline": ""})

        assert recording_store.calls[0][3] == {"headline": None}

    def test_unset_fields_left_out(self, properties, recording_store):
        properties.update_entity(7, {"title": "New", "headline": UNSET})

        assert recording_store.calls[0][3] == {"title": "New"}

    def test_empty_diff_skips_write(self, properties, recording_store, caplog):
        properties.update_entity(7, {"title": UNSET})

        assert recording_store.calls == []
        assert "No fields to update" in caplog.text

    def test_unknown_fields_rejected(self, properties, recording_store):
        with pytest.raises(UnknownFieldError):
            properties.update_entity(7, {"title": "x", "descriptionShort": "y"})
        assert recording_store.calls == []


# =============================================================================
# Against the In-Memory Store
# =============================================================================


class TestServiceWithStore:

    def test_create_returns_row_with_defaults(self, property_service, minimal_property):
        record = property_service.create_entity({**minimal_property, "price": 250000})

        assert record["id"] == 1
        assert record["purchasePrice"] == 250000
        assert record["status"] == "available"
        assert record["country"] == "Deutschland"
        assert record["createdAt"] == record["updatedAt"]

    def test_ids_increment(self, property_service, minimal_property):
        first = property_service.create_entity(minimal_property)
        second = property_service.create_entity(minimal_property)
        assert (first["id"], second["id"]) == (1, 2)

    def test_not_null_violation_propagates(self, property_service):
        with pytest.raises(IntegrityError) as exc_info:
            property_service.create_entity({"title": "Only a title"})
        assert "propertyType" in str(exc_info.value)

    def test_update_then_read(self, property_service, minimal_property):
        record = property_service.create_entity({**minimal_property, "price": 1})

        property_service.update_entity(record["id"], {"price": None, "coldRent": 900})
        stored = property_service.get_entity(record["id"])

        assert stored["purchasePrice"] is None
        assert stored["baseRent"] == 900

    def test_update_cannot_null_required_column(self, property_service, minimal_property):
        record = property_service.create_entity(minimal_property)

        with pytest.raises(IntegrityError):
            property_service.update_entity(record["id"], {"title": None})

    def test_update_missing_row(self, property_service):
        with pytest.raises(RecordNotFoundError):
            property_service.update_entity(99, {"title": "x"})

    def test_get_missing_row(self, property_service):
        assert property_service.get_entity(99) is None

    def test_contacts(self, store):
        contacts = RecordService(store, CONTACT)

        record = contacts.create_entity({"firstName": "Max", "lastName": "Mustermann"})

        assert record["contactType"] == "kunde"
        assert record["type"] == "person"
        with pytest.raises(UnknownFieldError):
            contacts.create_entity({"firstName": "Max", "price": 1})


class TestInMemoryRecordStore:

    def test_rejects_unknown_columns(self, store):
        with pytest.raises(IntegrityError):
            store.insert("contacts", {"firstName": "Max", "shoeSize": 44})

    def test_rejects_read_only_columns(self, store):
        with pytest.raises(IntegrityError):
            store.insert("contacts", {"id": 3})

    def test_unknown_table(self, store):
        with pytest.raises(KeyError):
            store.insert("invoices", {})

    def test_delete(self, store):
        row = store.insert("contacts", {"firstName": "Max"})
        assert store.delete("contacts", row["id"]) is True
        assert store.delete("contacts", row["id"]) is False
        assert store.select_by_id("contacts", row["id"]) is None

    def test_returned_rows_are_copies(self, store):
        row = store.insert("contacts", {"firstName": "Max"})
        row["firstName"] = "Moritz"
        assert store.select_by_id("contacts", row["id"])["firstName"] == "Max"

    def test_timestamps_are_utc_without_deprecation(self, store):
        before = datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None)

        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            row = store.insert("contacts", {"firstName": "Max"})
            store.update("contacts", row["id"], {"lastName": "Mustermann"})

        created = datetime.strptime(row["createdAt"], "%Y-%m-%d %H:%M:%S")
        assert before <= created <= before + timedelta(minutes=1)
        assert row["createdAt"] == row["updatedAt"]

    def test_persistence(self, temp_persist_path):
        first = InMemoryRecordStore(persist_path=temp_persist_path)
        first.insert("contacts", {"firstName": "Max"})

        second = InMemoryRecordStore(persist_path=temp_persist_path)

        assert second.select_by_id("contacts", 1)["firstName"] == "Max"
        assert second.insert("contacts", {"firstName": "Erika"})["id"] == 2

    def test_singleton(self, temp_persist_path):
        reset_record_store()
        try:
            assert get_record_store(temp_persist_path) is get_record_store()
        finally:
            reset_record_store()
