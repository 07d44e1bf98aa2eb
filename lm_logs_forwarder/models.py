"""
Data objects exchanged between the adapter, the forwarder and the ingestion client.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


LM_RESOURCE_ID_PROPERTY = "_lm.resourceId"
AZURE_RESOURCE_ID_PROPERTY = "system.azure.resourceid"


@dataclass(frozen=True)
class LogEntry:
    """Normalized log entry sent to LogicMonitor."""

    message: str
    timestamp: Optional[str] = None
    resource_id: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def to_payload(self) -> Dict[str, Any]:
        """
        Renders the entry in the shape accepted by the log ingestion endpoint.

        Returns:
            Dictionary ready for JSON serialization; absent optional fields are omitted
        """
        payload: Dict[str, Any] = dict(self.metadata)
        payload["message"] = self.message
        if self.timestamp is not None:
            payload["timestamp"] = self.timestamp
        if self.resource_id is not None:
            payload[LM_RESOURCE_ID_PROPERTY] = {AZURE_RESOURCE_ID_PROPERTY: self.resource_id}
        return payload


@dataclass(frozen=True)
class IngestionResponse:
    """Response received from the log ingestion endpoint."""

    status_code: int
    request_id: Optional[str] = None
    success: bool = False
    data: Any = None
