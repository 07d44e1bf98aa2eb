"""
Environment configuration for the LogicMonitor log forwarder Azure Function.
Resolves the ingestion client settings from the Function App environment.
"""

import os
import logging
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, TypeVar


T = TypeVar("T")

COMPANY_NAME_VARIABLE = "LogicMonitorCompanyName"
ACCESS_ID_VARIABLE = "LogicMonitorAccessId"
ACCESS_KEY_VARIABLE = "LogicMonitorAccessKey"
CONNECT_TIMEOUT_VARIABLE = "LogApiClientConnectTimeout"
READ_TIMEOUT_VARIABLE = "LogApiClientReadTimeout"
DEBUGGING_VARIABLE = "LogApiClientDebugging"

DEFAULT_TIMEOUT_MILLIS = 10000

_TRUE_VALUES = {"true", "yes", "1", "on"}
_FALSE_VALUES = {"false", "no", "0", "off"}


class ConfigurationError(ValueError):
    """Raised when an environment variable holds a value that cannot be parsed."""


@dataclass(frozen=True)
class ClientConfiguration:
    """Immutable settings of the log ingestion client."""

    company_name: Optional[str]
    access_id: Optional[str]
    access_key: Optional[str]
    connect_timeout: int = DEFAULT_TIMEOUT_MILLIS
    read_timeout: int = DEFAULT_TIMEOUT_MILLIS
    debugging: bool = False

    def __repr__(self) -> str:
        # access_key stays out of logs and tracebacks
        return (
            f"ClientConfiguration(company_name={self.company_name!r}, "
            f"access_id={self.access_id!r}, access_key={'***' if self.access_key else None}, "
            f"connect_timeout={self.connect_timeout}, read_timeout={self.read_timeout}, "
            f"debugging={self.debugging})"
        )


def parse_bool(value: str) -> bool:
    """Parses a boolean flag, raising ValueError for anything unrecognized."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value!r}")


class ConfigurationResolver:
    """Resolves the client configuration from environment variables."""

    REQUIRED_VARIABLES = [
        COMPANY_NAME_VARIABLE,
        ACCESS_ID_VARIABLE,
        ACCESS_KEY_VARIABLE,
    ]

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the resolver.

        Args:
            environ: Mapping to read variables from (defaults to os.environ)
        """
        self.environ = os.environ if environ is None else environ
        self.logger = logging.getLogger(__name__)

    def resolve(self) -> ClientConfiguration:
        """
        Reads the environment and builds the client configuration.

        Required variables are passed through as read; a missing one is only
        reported here and fails later, when the client sends.

        Returns:
            ClientConfiguration: Immutable client settings

        Raises:
            ConfigurationError: If an optional variable is set to an unparsable value
        """
        self._warn_about_missing_variables()

        config = ClientConfiguration(
            company_name=self.environ.get(COMPANY_NAME_VARIABLE),
            access_id=self.environ.get(ACCESS_ID_VARIABLE),
            access_key=self.environ.get(ACCESS_KEY_VARIABLE),
            connect_timeout=self._get_optional(CONNECT_TIMEOUT_VARIABLE, int, DEFAULT_TIMEOUT_MILLIS),
            read_timeout=self._get_optional(READ_TIMEOUT_VARIABLE, int, DEFAULT_TIMEOUT_MILLIS),
            debugging=self._get_optional(DEBUGGING_VARIABLE, parse_bool, False),
        )

        self._log_configuration_summary(config)
        return config

    def _warn_about_missing_variables(self) -> None:
        missing_vars = self._find_missing_variables()
        if missing_vars:
            self.logger.warning(f"Missing required environment variables: {missing_vars}")

    def _find_missing_variables(self) -> List[str]:
        return [var for var in self.REQUIRED_VARIABLES if not self.environ.get(var)]

    def _get_optional(self, name: str, parser: Callable[[str], T], default: T) -> T:
        """
        Gets an optional variable, keeping the default when it is unset or blank.

        Args:
            name: Environment variable name
            parser: Converts the stripped value to the target type
            default: Value used when the variable is unset or blank

        Raises:
            ConfigurationError: If the value is present but cannot be parsed
        """
        raw_value = self.environ.get(name)
        if raw_value is None or not raw_value.strip():
            return default

        value = raw_value.strip()
        try:
            return parser(value)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {name}: {value!r}") from e

    def _log_configuration_summary(self, config: ClientConfiguration) -> None:
        self.logger.info(f"Company: '{config.company_name}'")
        self.logger.info(f"Access ID: '{config.access_id}'")
        self.logger.info(
            f"Timeouts: connect={config.connect_timeout}ms, read={config.read_timeout}ms"
        )
        self.logger.info(f"Client debugging: {config.debugging}")


def resolve_configuration(environ: Optional[Mapping[str, str]] = None) -> ClientConfiguration:
    """Shortcut for ConfigurationResolver(environ).resolve()."""
    return ConfigurationResolver(environ).resolve()
