"""Structured JSON logging for goldsync."""

from goldsync.core.logging.logger import JsonLineSink, configure_logging, log_context, logger

__all__ = ["JsonLineSink", "configure_logging", "log_context", "logger"]
