"""
Structured logging with correlation IDs across tool calls.

Provides a consistent logging setup for all MCP servers
so that a tool call can be traced through its remote requests.
"""

import logging
import uuid


def setup_logging(name: str, level: str = "INFO") -> logging.Logger:
    """
    Configure structured logging for a server component.

    Args:
        name: Logger name (used as prefix in every line).
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    )
    return logging.getLogger(name)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for tracing one tool call."""
    return uuid.uuid4().hex[:12]
