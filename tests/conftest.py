"""
Pytest configuration and shared fixtures.
"""

import logging
from types import SimpleNamespace

import pytest

from lm_logs_forwarder.client_registry import get_default_registry


@pytest.fixture
def context():
    """Invocation context as handed over by the Azure Functions host."""
    return SimpleNamespace(function_name="LogForwarder", invocation_id="3f2a9c1e-0000-4d7e-9a43-1b2c3d4e5f60")


@pytest.fixture
def environ():
    """Complete set of forwarder environment variables."""
    return {
        "LogicMonitorCompanyName": "acme",
        "LogicMonitorAccessId": "abcd1234",
        "LogicMonitorAccessKey": "s3cr3t-key",
    }


@pytest.fixture
def debug_logs(caplog):
    """Captures everything the forwarder package logs, DEBUG included."""
    caplog.set_level(logging.DEBUG, logger="lm_logs_forwarder")
    return caplog


@pytest.fixture(autouse=True)
def reset_default_registry():
    """Keeps the process-wide client from leaking between tests."""
    get_default_registry().reset()
    yield
    get_default_registry().reset()


@pytest.fixture
def activity_log_event():
    """Diagnostic settings envelope with two activity log records."""
    return {
        "records": [
            {
                "time": "2020-06-10T13:27:05.8670000Z",
                "resourceId": "/SUBSCRIPTIONS/0000/RESOURCEGROUPS/RG/PROVIDERS/MICROSOFT.WEB/SITES/APP",
                "operationName": "MICROSOFT.WEB/SITES/WRITE",
                "category": "Administrative",
                "resultType": "Success",
                "level": "Information",
                "properties": {"statusCode": "OK"},
            },
            {
                "time": "2020-06-10T13:27:06.1000000Z",
                "resourceId": "/SUBSCRIPTIONS/0000/RESOURCEGROUPS/RG/PROVIDERS/MICROSOFT.WEB/SITES/APP",
                "category": "AppServiceConsoleLogs",
                "properties": {"log": "Application started"},
            },
        ]
    }
