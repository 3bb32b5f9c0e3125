"""
Archival forwarding - best-effort copy of accepted envelopes to the archival sink.

Posts run on a small worker pool with a request timeout, so a slow or absent
sink never holds up ingestion. Failures are logged and counted, never raised
to the caller and never retried.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Optional

import requests

from util.logging import logger

from . import config
from .errors import ForwardFailure
from .schema import DataEnvelope


class ArchivalForwarder:
    """Fire-and-forget sender for the downstream archival sink."""

    def __init__(self, url: str = None, timeout: float = None, enabled: bool = None,
                 run_async: bool = None, max_workers: int = None, session: requests.Session = None):
        self.url = url or config.ARCHIVE_URL
        self.timeout = timeout if timeout is not None else config.ARCHIVE_TIMEOUT_SEC
        self.enabled = config.ARCHIVE_ENABLED if enabled is None else enabled
        self.run_async = config.ARCHIVE_ASYNC if run_async is None else run_async
        # An injected session is used as-is; otherwise each worker thread gets its own
        self._session = session
        self._local = threading.local()

        self._executor = None
        if self.run_async:
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers or config.ARCHIVE_MAX_WORKERS,
                thread_name_prefix="archive-forward",
            )

        self._lock = threading.Lock()
        self._counters = {"sent": 0, "failed": 0, "skipped": 0}

    def forward(self, envelope: DataEnvelope) -> Optional[Future]:
        """
        Send an envelope to the archival sink.

        Returns the pending future when running asynchronously, otherwise None.
        """
        if not self.enabled:
            self._count("skipped")
            logger.log_forward(envelope.name, "skipped", {"reason": "archive disabled"})
            return None

        if self._executor is None:
            self._send(envelope)
            return None

        try:
            future = self._executor.submit(self._send, envelope)
        except RuntimeError as e:
            # pool already shut down
            self._count("failed")
            logger.log_forward(envelope.name, "failed", {"error": str(e)[:200]})
            return None

        logger.log_forward(envelope.name, "dispatched", {"url": self.url})
        return future

    def _send(self, envelope: DataEnvelope) -> bool:
        try:
            self._post(envelope)
        except ForwardFailure as e:
            self._count("failed")
            logger.log_forward(envelope.name, "failed", {"error": str(e)[:200]})
            return False
        except Exception as e:
            # Forwarding must never break ingestion, whatever the sink or transport does
            self._count("failed")
            logger.log_forward(envelope.name, "failed", {"error": f"{type(e).__name__}: {str(e)[:200]}"})
            return False

        self._count("sent")
        logger.log_forward(envelope.name, "sent")
        return True

    def _post(self, envelope: DataEnvelope) -> None:
        try:
            response = self._get_session().post(self.url, json=envelope.to_dict(), timeout=self.timeout)
        except requests.Timeout as e:
            raise ForwardFailure(f"Archive sink timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise ForwardFailure(f"Archive sink unreachable: {e}") from e

        if not 200 <= response.status_code < 300:
            raise ForwardFailure(f"Archive sink returned status code {response.status_code}")

    def _get_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        if not hasattr(self._local, "session"):
            self._local.session = requests.Session()
        return self._local.session

    def _count(self, key: str):
        with self._lock:
            self._counters[key] += 1

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def shutdown(self, wait: bool = True):
        """Stop accepting forwards; optionally wait for in-flight posts."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
