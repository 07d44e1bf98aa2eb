import azure.functions as func
import json
import logging
from typing import Any, List

from .log_event_forwarder import LogEventForwarder

# Configure logging for Azure
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

_forwarder = LogEventForwarder()


def main(events: List[func.EventHubEvent], context: func.Context) -> None:
    """
    Azure Function forwarding Azure logs to LogicMonitor.
    Triggered by batches of events consumed from the configured Event Hub.
    """
    _forwarder.forward(decode_events(events), context)


def decode_events(events: List[func.EventHubEvent]) -> List[Any]:
    """
    Decodes Event Hub message bodies into JSON values.

    A body holding a JSON array contributes its elements; a body that is not
    valid JSON is kept as text so the forwarder drops it as a non-object.
    """
    records: List[Any] = []
    for event in events:
        decoded = _decode_body(event.get_body())
        if isinstance(decoded, list):
            records.extend(decoded)
        else:
            records.append(decoded)
    return records


def _decode_body(body: bytes) -> Any:
    text = body.decode('utf-8', errors='replace')
    try:
        return json.loads(text)
    except ValueError:
        logging.getLogger(__name__).debug(f"Event body is not JSON ({len(text)} characters)")
        return text
