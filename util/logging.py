"""
Structured logging for the data server.
Every pipeline step reports through log_operation so log lines share one shape.
"""

import logging
import os
from typing import Any, Dict

PAYLOAD_PREVIEW_CHARS = 50


def _preview(text: str) -> str:
    if text is None:
        return None
    return text[:PAYLOAD_PREVIEW_CHARS] + "..." if len(text) > PAYLOAD_PREVIEW_CHARS else text


class StructuredLogger:
    """Structured logger for ingestion, persistence, forwarding and query operations."""

    def __init__(self, name: str = "dataserver", level: str = None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level or os.getenv("LOG_LEVEL", "INFO").upper())

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None,
                      level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_ingestion(self, name: str, status: str, payload: str = None):
        """Log the verdict for an ingested envelope."""
        details = {"name": name}
        if payload is not None:
            details["payload"] = _preview(payload)

        level = logging.INFO if status == "accepted" else logging.ERROR
        self.log_operation("ingest", status, details, level)

    def log_persistence(self, name: str, status: str = "success", error: Exception = None):
        """Log a store write."""
        details = {"name": name}
        if error is not None:
            details["error"] = str(error)[:100]

        level = logging.INFO if error is None else logging.ERROR
        self.log_operation("store.save", status, details, level)

    def log_forward(self, name: str, status: str, details: Dict[str, Any] = None):
        """Log an archival forward attempt."""
        log_details = {"name": name}
        if details:
            log_details.update(details)

        level = logging.INFO if status in ("sent", "dispatched", "skipped") else logging.WARNING
        self.log_operation("archive.forward", status, log_details, level)

    def log_query(self, block_type: str, count: int):
        """Log a block-type query."""
        self.log_operation("query", "success", {"block_type": block_type, "count": count})

    def log_reclassification(self, name: str, new_type: str, status: str):
        """Log a block-type change."""
        level = logging.INFO if status == "updated" else logging.ERROR
        self.log_operation("reclassify", status, {"name": name, "new_block_type": new_type}, level)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()
