"""
Forwards batches of Azure log events to LogicMonitor.
Adapts the raw events, sends the resulting entries and logs the outcome.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, List, Optional

from .client_registry import get_client
from .log_event_adapter import LogEventAdapter
from .log_ingestion_client import LogIngestionApiError, LogIngestionClient
from .models import IngestionResponse, LogEntry


class LogEventForwarder:
    """Sends Azure log events received from the Event Hub to LogicMonitor."""

    DEFAULT_MAX_WORKERS = 4

    def __init__(self,
                 adapter: Optional[Callable[[dict], List[LogEntry]]] = None,
                 client_provider: Optional[Callable[[], LogIngestionClient]] = None,
                 max_workers: int = DEFAULT_MAX_WORKERS):
        """
        Initialize the forwarder.

        Args:
            adapter: Transforms one raw event into log entries (defaults to LogEventAdapter)
            client_provider: Returns the ingestion client (defaults to the process-wide registry)
            max_workers: Threads used to adapt events; 1 adapts sequentially
        """
        self.adapter = adapter or LogEventAdapter()
        self.client_provider = client_provider or get_client
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)

    def forward(self, log_events: Iterable[Any], context) -> None:
        """
        Sends one batch of events. Delivery failures are logged, never raised.

        Args:
            log_events: Raw events; anything that is not a JSON object is dropped
            context: Invocation context with function_name and invocation_id

        Raises:
            ConfigurationError: If the client cannot be configured
        """
        log_entries = self.process_events(log_events)
        if not log_entries:
            self._log(context, logging.INFO, "No entries to send")
            return

        self._log(context, logging.INFO, "Sending %d log entries", len(log_entries))
        if self.logger.isEnabledFor(logging.DEBUG):
            self._log(context, logging.DEBUG, "Request body: %s", self._serialize(log_entries))

        client = self.client_provider()
        try:
            response = client.send_logs(log_entries)
            self._log_response(context, response.success, response)
        except LogIngestionApiError as e:
            self._log(context, logging.WARNING, "Sending failed: %s", e)
            self._log_response(context, False, e.response)

    def process_events(self, log_events: Iterable[Any]) -> List[LogEntry]:
        """
        Adapts the events and flattens the entries, keeping the order of the events.

        Args:
            log_events: Raw events

        Returns:
            List of log entries
        """
        json_objects = [event for event in log_events if isinstance(event, dict)]

        if self.max_workers > 1 and len(json_objects) > 1:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(json_objects))) as executor:
                adapted = list(executor.map(self.adapter, json_objects))
        else:
            adapted = [self.adapter(event) for event in json_objects]

        return [entry for entries in adapted for entry in entries]

    def _log(self, context, level: int, msg: str, *args) -> None:
        """Logs a message prefixed with the function name and invocation ID."""
        self.logger.log(
            level,
            "[%s][%s] " + msg,
            context.function_name, context.invocation_id, *args
        )

    def _log_response(self, context, success: bool, response: Optional[IngestionResponse]) -> None:
        """
        Logs a response received from LogicMonitor.

        Args:
            context: Invocation context
            success: If the request was successful
            response: The response to log, None when the request got no answer
        """
        status_code = response.status_code if response is not None else None
        request_id = response.request_id if response is not None else None
        data = response.data if response is not None else None

        self._log(context, logging.INFO if success else logging.WARNING,
                  "Received: status = %s, id = %s", status_code, request_id)
        self._log(context, logging.DEBUG if success else logging.WARNING,
                  "Response body: %s", data)

    @staticmethod
    def _serialize(log_entries: List[LogEntry]) -> str:
        return json.dumps([entry.to_payload() for entry in log_entries], ensure_ascii=False)
