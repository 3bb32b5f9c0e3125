"""Error types raised by the ingestion, query and reclassification paths."""


class DataServerError(Exception):
    """Base class for all data server errors."""


class InvalidInput(DataServerError, ValueError):
    """A caller-supplied argument failed validation before reaching the store."""


class InvalidBlockType(InvalidInput):
    """A classification tag outside the BlockType enumeration."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown block type: {value!r}")


class PersistenceFailure(DataServerError):
    """The envelope store could not complete a write or read."""


class DuplicateBlockName(PersistenceFailure):
    """A block with the same name is already stored."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Block '{name}' already exists")


class ForwardFailure(DataServerError):
    """The archival sink could not be reached or rejected the envelope."""
