"""
Azure Functions entry point for the LogicMonitor log forwarder.
This module imports and exposes the main forwarding function from lm_logs_forwarder.
"""

from lm_logs_forwarder.log_forwarder_function import main

# Export the main function for Azure Functions runtime
__all__ = ['main']
