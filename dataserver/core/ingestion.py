"""
Ingestion pipeline: validate -> persist -> forward.

A checksum match alone does not mean acceptance. The store write has to
succeed too, unless SWALLOW_PERSISTENCE_ERRORS restores the legacy
behaviour of reporting acceptance regardless.
"""

from typing import Optional

from util.logging import logger

from . import config
from .dao import EnvelopeStore
from .errors import PersistenceFailure
from .forwarder import ArchivalForwarder
from .integrity import verify
from .schema import DataEnvelope, IngestionResult, IngestionStatus


class IngestionService:

    def __init__(self, store: EnvelopeStore, forwarder: ArchivalForwarder,
                 swallow_persistence_errors: Optional[bool] = None):
        self.store = store
        self.forwarder = forwarder
        if swallow_persistence_errors is None:
            swallow_persistence_errors = config.SWALLOW_PERSISTENCE_ERRORS
        self.swallow_persistence_errors = swallow_persistence_errors

    def ingest(self, envelope: DataEnvelope) -> IngestionResult:
        name = envelope.name

        if not verify(envelope):
            logger.log_ingestion(name, IngestionStatus.CHECKSUM_MISMATCH.value)
            return IngestionResult(IngestionStatus.CHECKSUM_MISMATCH, name)

        try:
            self.store.save(envelope.header, envelope.body, envelope.checksum)
        except PersistenceFailure as e:
            logger.log_persistence(name, "failed", e)
            if not self.swallow_persistence_errors:
                logger.log_ingestion(name, IngestionStatus.PERSISTENCE_FAILURE.value)
                return IngestionResult(IngestionStatus.PERSISTENCE_FAILURE, name, error=e)

        self.forwarder.forward(envelope)

        logger.log_ingestion(name, IngestionStatus.ACCEPTED.value, envelope.body.payload)
        return IngestionResult(IngestionStatus.ACCEPTED, name)
