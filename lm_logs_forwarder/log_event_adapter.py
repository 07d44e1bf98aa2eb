"""
Log event adapter for Azure events.
Transforms raw events consumed from the Event Hub into LogicMonitor log entries.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from .models import LogEntry


class LogEventAdapter:
    """Transforms Azure log events into log entries."""

    RECORDS_PROPERTY = "records"
    PROPERTIES_PROPERTY = "properties"

    # Checked in order, first string value wins
    MESSAGE_PROPERTIES = ("log", "message", "Msg")
    TIMESTAMP_FIELDS = ("time", "timeStamp", "TimeGenerated")
    RESOURCE_ID_FIELDS = ("resourceId", "ResourceId", "_ResourceId")

    # Azure resource log common schema fields kept as entry metadata
    METADATA_FIELDS = (
        "category",
        "operationName",
        "resultType",
        "level",
        "location",
        "correlationId",
        "callerIpAddress",
        "tenantId",
    )

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def __call__(self, raw_event: Dict) -> List[LogEntry]:
        return self.adapt(raw_event)

    def adapt(self, raw_event: Dict) -> List[LogEntry]:
        """
        Transforms one raw event into log entries.

        Diagnostic settings wrap several records in a 'records' array; each
        object in it becomes one entry. Any other event becomes a single entry.

        Args:
            raw_event: Event decoded from the Event Hub message

        Returns:
            List of log entries, in record order
        """
        records = raw_event.get(self.RECORDS_PROPERTY)
        if isinstance(records, list):
            entries = [self._create_entry(record) for record in records if isinstance(record, dict)]
            skipped = len(records) - len(entries)
            if skipped:
                self.logger.debug(f"Skipped {skipped} non-object records")
            return entries

        return [self._create_entry(raw_event)]

    def _create_entry(self, record: Dict) -> LogEntry:
        """
        Creates a log entry from a single Azure record.

        Args:
            record: Single Azure log record

        Returns:
            LogEntry with message, timestamp, resource id and metadata
        """
        return LogEntry(
            message=self._extract_message(record),
            timestamp=self._first_string(record, self.TIMESTAMP_FIELDS),
            resource_id=self._extract_resource_id(record),
            metadata=self._extract_metadata(record),
        )

    def _extract_message(self, record: Dict) -> str:
        """Uses the logged line when present, else the whole record as JSON."""
        properties = record.get(self.PROPERTIES_PROPERTY)
        if isinstance(properties, dict):
            message = self._first_string(properties, self.MESSAGE_PROPERTIES)
            if message is not None:
                return message

        return json.dumps(record, separators=(",", ":"), ensure_ascii=False, default=str)

    def _extract_resource_id(self, record: Dict) -> Optional[str]:
        # Azure resource ids are case-insensitive; LogicMonitor stores them lower-cased
        resource_id = self._first_string(record, self.RESOURCE_ID_FIELDS)
        return resource_id.lower() if resource_id else None

    def _extract_metadata(self, record: Dict) -> Dict[str, Any]:
        return {
            field: record[field]
            for field in self.METADATA_FIELDS
            if self._is_scalar(record.get(field))
        }

    @staticmethod
    def _first_string(source: Dict, keys) -> Optional[str]:
        for key in keys:
            value = source.get(key)
            if isinstance(value, str):
                return value
        return None

    @staticmethod
    def _is_scalar(value: Any) -> bool:
        return isinstance(value, (str, int, float, bool))
