"""
Shared code package for the LogicMonitor log forwarder Azure Function.
Contains modular components following Single Responsibility Principle.
"""

from .environment_configuration import ClientConfiguration, ConfigurationError, ConfigurationResolver
from .models import IngestionResponse, LogEntry
from .log_ingestion_client import LogIngestionApiError, LogIngestionClient
from .client_registry import ClientRegistry, get_client
from .log_event_adapter import LogEventAdapter
from .log_event_forwarder import LogEventForwarder

__version__ = "1.0.0"

__all__ = [
    'ClientConfiguration',
    'ConfigurationError',
    'ConfigurationResolver',
    'IngestionResponse',
    'LogEntry',
    'LogIngestionApiError',
    'LogIngestionClient',
    'ClientRegistry',
    'get_client',
    'LogEventAdapter',
    'LogEventForwarder'
]
