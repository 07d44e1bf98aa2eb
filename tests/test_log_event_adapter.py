"""Tests for the Azure log event adapter."""

import json

import pytest

from lm_logs_forwarder.log_event_adapter import LogEventAdapter
from lm_logs_forwarder.models import LogEntry


RESOURCE_ID = "/subscriptions/0000/resourcegroups/rg/providers/microsoft.web/sites/app"


@pytest.fixture
def adapter():
    return LogEventAdapter()


class TestRecordsEnvelope:
    def test_one_entry_per_record(self, adapter, activity_log_event):
        entries = adapter.adapt(activity_log_event)
        assert len(entries) == 2
        assert entries[0].timestamp == "2020-06-10T13:27:05.8670000Z"
        assert entries[1].message == "Application started"

    def test_non_object_records_skipped(self, adapter, activity_log_event):
        activity_log_event["records"].insert(1, "garbage")
        activity_log_event["records"].append(42)
        assert len(adapter.adapt(activity_log_event)) == 2

    def test_empty_records(self, adapter):
        assert adapter.adapt({"records": []}) == []

    def test_records_not_a_list(self, adapter):
        """A 'records' field of another type is just part of a single record."""
        entries = adapter.adapt({"records": "n/a", "time": "2020-06-10T13:00:00Z"})
        assert len(entries) == 1
        assert json.loads(entries[0].message) == {"records": "n/a", "time": "2020-06-10T13:00:00Z"}

    def test_callable(self, adapter, activity_log_event):
        assert adapter(activity_log_event) == adapter.adapt(activity_log_event)


class TestEntryFields:
    def test_message_from_log_property(self, adapter):
        entry, = adapter.adapt({"properties": {"log": "GET /health 200"}})
        assert entry.message == "GET /health 200"

    def test_message_falls_back_to_record_json(self, adapter, activity_log_event):
        record = activity_log_event["records"][0]
        entry, = adapter.adapt(record)
        assert json.loads(entry.message) == record

    def test_non_string_log_property_ignored(self, adapter):
        record = {"properties": {"log": {"nested": True}}}
        entry, = adapter.adapt(record)
        assert json.loads(entry.message) == record

    def test_resource_id_lower_cased(self, adapter, activity_log_event):
        entries = adapter.adapt(activity_log_event)
        assert all(entry.resource_id == RESOURCE_ID for entry in entries)

    def test_alternative_field_names(self, adapter):
        entry, = adapter.adapt({
            "timeStamp": "2021-01-01T00:00:00Z",
            "ResourceId": "/SUBSCRIPTIONS/1",
            "properties": {"message": "hello"},
        })
        assert entry.timestamp == "2021-01-01T00:00:00Z"
        assert entry.resource_id == "/subscriptions/1"
        assert entry.message == "hello"

    def test_metadata_keeps_scalar_common_fields(self, adapter, activity_log_event):
        entry = adapter.adapt(activity_log_event)[0]
        assert dict(entry.metadata) == {
            "category": "Administrative",
            "operationName": "MICROSOFT.WEB/SITES/WRITE",
            "resultType": "Success",
            "level": "Information",
        }

    def test_metadata_skips_structured_values(self, adapter):
        entry, = adapter.adapt({"category": {"name": "x"}, "level": 4})
        assert dict(entry.metadata) == {"level": 4}

    def test_empty_object(self, adapter):
        assert adapter.adapt({}) == [LogEntry(message="{}")]

    @pytest.mark.parametrize("record", [
        {"time": 1591795625, "resourceId": None},
        {"properties": None, "records": None},
        {"properties": ["a", "b"]},
        {"nested": {"deep": [1, {"x": None}]}},
    ])
    def test_unusual_shapes_never_raise(self, adapter, record):
        entries = adapter.adapt(record)
        assert len(entries) == 1
        assert entries[0].timestamp is None
        assert entries[0].resource_id is None


class TestPayload:
    def test_payload_shape(self, adapter, activity_log_event):
        payload = adapter.adapt(activity_log_event)[1].to_payload()
        assert payload == {
            "message": "Application started",
            "timestamp": "2020-06-10T13:27:06.1000000Z",
            "_lm.resourceId": {"system.azure.resourceid": RESOURCE_ID},
            "category": "AppServiceConsoleLogs",
        }

    def test_payload_omits_absent_fields(self):
        assert LogEntry(message="m").to_payload() == {"message": "m"}

    def test_entry_immutable(self):
        entry = LogEntry(message="m", metadata={"level": "Error"})
        with pytest.raises(AttributeError):
            entry.message = "x"
        with pytest.raises(TypeError):
            entry.metadata["level"] = "Warning"
