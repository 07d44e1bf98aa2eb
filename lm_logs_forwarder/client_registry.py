"""
Process-wide holder of the log ingestion client.
The client is built on first use, once, from the resolved environment configuration.
"""

import logging
import threading
from typing import Callable, Optional

from .environment_configuration import ClientConfiguration, resolve_configuration
from .log_ingestion_client import LogIngestionClient


class ClientRegistry:
    """Lazily constructs and caches a single log ingestion client."""

    def __init__(self,
                 client_factory: Optional[Callable[[ClientConfiguration], LogIngestionClient]] = None,
                 configuration_resolver: Optional[Callable[[], ClientConfiguration]] = None):
        """
        Initialize the registry in the uninitialized state.

        Args:
            client_factory: Builds the client from a configuration (defaults to LogIngestionClient)
            configuration_resolver: Produces the configuration (defaults to reading os.environ)
        """
        self.client_factory = client_factory or LogIngestionClient
        self.configuration_resolver = configuration_resolver or resolve_configuration
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._client: Optional[LogIngestionClient] = None

    @property
    def initialized(self) -> bool:
        return self._client is not None

    def get_client(self) -> LogIngestionClient:
        """
        Returns the client, building it on the first call.

        The environment is only read here, not at import time, because the
        Function App settings may be populated after the module is loaded.

        Raises:
            ConfigurationError: If the configuration cannot be resolved; the
                registry stays uninitialized and the next call tries again
        """
        client = self._client
        if client is not None:
            return client

        with self._lock:
            if self._client is None:
                self.logger.info("Initializing LogicMonitor log ingestion client")
                configuration = self.configuration_resolver()
                self._client = self.client_factory(configuration)
            return self._client

    def reset(self) -> None:
        """Drops the cached client so the next call builds a new one."""
        with self._lock:
            self._client = None


_default_registry = ClientRegistry()


def get_client() -> LogIngestionClient:
    """Returns the process-wide log ingestion client."""
    return _default_registry.get_client()


def get_default_registry() -> ClientRegistry:
    return _default_registry
