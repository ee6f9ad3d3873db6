"""
Observability module.

Logging configuration shared by every component.
"""

from vault_index.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
