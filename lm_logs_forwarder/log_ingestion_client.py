"""
LogicMonitor log ingestion client.
Sends batches of log entries to the LogicMonitor REST log ingestion endpoint.
"""

import base64
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict, Optional, Sequence

import requests

from .environment_configuration import ClientConfiguration
from .models import IngestionResponse, LogEntry


class LogIngestionApiError(Exception):
    """Raised when a batch could not be delivered; carries the response when one was received."""

    def __init__(self, message: str, response: Optional[IngestionResponse] = None):
        super().__init__(message)
        self.response = response


class LogIngestionClient:
    """Client for the LogicMonitor log ingestion API."""

    BASE_URL_TEMPLATE = 'https://{company}.logicmonitor.com/rest'
    INGEST_ENDPOINT = '/log/ingest'
    USER_AGENT = 'lm-logs-azure-forwarder/1.0.0'
    REQUEST_ID_HEADER = 'x-request-id'

    def __init__(self, configuration: ClientConfiguration):
        """
        Initialize the log ingestion client.

        Args:
            configuration: Resolved client settings
        """
        self.configuration = configuration
        self.logger = logging.getLogger(__name__)

        if configuration.debugging:
            self._enable_debugging()

    @property
    def url(self) -> str:
        return self.BASE_URL_TEMPLATE.format(company=self.configuration.company_name) + self.INGEST_ENDPOINT

    @property
    def timeout(self) -> tuple:
        """Connect and read timeouts in seconds, as expected by requests."""
        return (self.configuration.connect_timeout / 1000, self.configuration.read_timeout / 1000)

    def send_logs(self, entries: Sequence[LogEntry]) -> IngestionResponse:
        """
        Sends log entries to LogicMonitor in a single request.

        Args:
            entries: Log entries to send

        Returns:
            IngestionResponse for a 2xx answer; its success flag reports whether
            every entry was accepted

        Raises:
            LogIngestionApiError: If the request could not be made or was rejected
        """
        self._validate_credentials()

        body = json.dumps([entry.to_payload() for entry in entries])
        headers = self._build_request_headers(body)

        if self.configuration.debugging:
            self.logger.debug(f"POST {self.url} ({len(entries)} entries)")

        try:
            response = requests.post(
                self.url,
                data=body.encode('utf-8'),
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise LogIngestionApiError(f"Log ingestion request failed: {str(e)}") from e

        return self._process_response(response)

    def _validate_credentials(self) -> None:
        """Checks that the settings needed to address and sign the request are present."""
        missing = [
            name for name, value in (
                ('company name', self.configuration.company_name),
                ('access id', self.configuration.access_id),
                ('access key', self.configuration.access_key),
            )
            if not value
        ]
        if missing:
            raise LogIngestionApiError(f"LogicMonitor client is not configured, missing: {', '.join(missing)}")

    def _build_request_headers(self, body: str) -> Dict[str, str]:
        """Builds the HTTP headers, including the LMv1 authorization."""
        return {
            'Authorization': self._build_authorization(body),
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'User-Agent': self.USER_AGENT
        }

    def _build_authorization(self, body: str, epoch_millis: Optional[int] = None) -> str:
        """
        Builds the LMv1 authorization header value.

        The signature is the base64-encoded hex HMAC-SHA256 digest of
        verb + epoch + body + resource path, keyed with the access key.
        """
        if epoch_millis is None:
            epoch_millis = int(time.time() * 1000)

        request_vars = f"POST{epoch_millis}{body}{self.INGEST_ENDPOINT}"
        digest = hmac.new(
            self.configuration.access_key.encode('utf-8'),
            msg=request_vars.encode('utf-8'),
            digestmod=hashlib.sha256
        ).hexdigest()
        signature = base64.b64encode(digest.encode('utf-8')).decode('utf-8')

        return f"LMv1 {self.configuration.access_id}:{signature}:{epoch_millis}"

    def _process_response(self, response: requests.Response) -> IngestionResponse:
        """
        Converts the HTTP response, raising for anything that is not a readable 2xx answer.
        """
        data = self._decode_body(response)
        success = isinstance(data, dict) and data.get('success') is True

        ingestion_response = IngestionResponse(
            status_code=response.status_code,
            request_id=response.headers.get(self.REQUEST_ID_HEADER),
            success=success,
            data=data
        )

        if self.configuration.debugging:
            self.logger.debug(f"Response {response.status_code}: {response.text}")

        if not 200 <= response.status_code < 300:
            raise LogIngestionApiError(
                f"Log ingestion rejected: {response.status_code} - {response.text}",
                ingestion_response
            )

        if not isinstance(data, dict):
            raise LogIngestionApiError(
                f"Unexpected log ingestion response body: {response.text}",
                ingestion_response
            )

        return ingestion_response

    def _decode_body(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _enable_debugging(self) -> None:
        """Turns on verbose diagnostics for this client and the underlying HTTP stack."""
        self.logger.setLevel(logging.DEBUG)
        logging.getLogger('urllib3').setLevel(logging.DEBUG)
        self.logger.debug(f"HTTP client debugging enabled for {self.url}")
