"""Block-type queries, reassembling stored blocks into envelopes."""

from typing import List

from util.logging import logger

from .dao import EnvelopeStore
from .mapper import entity_to_envelope
from .schema import BlockType, DataEnvelope


class QueryService:

    def __init__(self, store: EnvelopeStore):
        self.store = store

    def get_by_block_type(self, block_type) -> List[DataEnvelope]:
        """
        Return every stored envelope with the given tag.

        Raises InvalidBlockType for an unknown tag. The checksum on each result is the
        one accepted at ingestion, not a fresh digest of the stored payload.
        """
        tag = BlockType.parse(block_type)
        envelopes = [entity_to_envelope(entity) for entity in self.store.find_by_block_type(tag)]
        logger.log_query(tag.value, len(envelopes))
        return envelopes
