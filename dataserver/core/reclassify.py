"""Reclassification of stored blocks."""

from util.logging import logger

from .dao import EnvelopeStore


class ReclassificationService:

    def __init__(self, store: EnvelopeStore):
        self.store = store

    def reclassify(self, name: str, new_type) -> bool:
        """Move a named block to a new tag. Tag validity is enforced by the store."""
        if not name or not name.strip():
            logger.error("Invalid block name provided for block type update")
            return False

        updated = self.store.update_block_type(name, new_type)
        logger.log_reclassification(name, str(getattr(new_type, "value", new_type)),
                                    "updated" if updated else "not_found")
        return updated
