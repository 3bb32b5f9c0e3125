"""
Domain and storage records for data blocks.
Domain objects travel through the services; entities mirror the SQLite rows.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .errors import InvalidBlockType, InvalidInput, PersistenceFailure


class BlockType(str, Enum):
    """Closed set of classification tags agreed with producers."""
    TYPE_A = "TYPE_A"
    TYPE_B = "TYPE_B"

    @classmethod
    def parse(cls, value) -> "BlockType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidBlockType(value) from None

    @classmethod
    def values(cls):
        return [member.value for member in cls]


@dataclass
class DataHeader:
    name: str
    block_type: BlockType

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidInput("block name must not be empty")
        self.block_type = BlockType.parse(self.block_type)


@dataclass
class DataBody:
    payload: str


@dataclass
class DataEnvelope:
    header: DataHeader
    body: DataBody
    checksum: str

    @property
    def name(self) -> str:
        return self.header.name

    def to_dict(self):
        """Wire representation shared by the API, the client and the archival sink."""
        return {
            "header": {
                "name": self.header.name,
                "blockType": self.header.block_type.value,
            },
            "body": {"payload": self.body.payload},
            "checksum": self.checksum,
        }


@dataclass
class DataHeaderEntity:
    name: str
    block_type: str
    header_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class DataBodyEntity:
    """A stored block: the body row with its header attached."""
    header: DataHeaderEntity
    payload: str
    checksum: Optional[str] = None
    body_id: Optional[int] = None


class IngestionStatus(str, Enum):
    ACCEPTED = "accepted"
    CHECKSUM_MISMATCH = "checksum_mismatch"
    PERSISTENCE_FAILURE = "persistence_failure"


@dataclass
class IngestionResult:
    status: IngestionStatus
    name: str
    error: Optional[PersistenceFailure] = None

    @property
    def accepted(self) -> bool:
        return self.status == IngestionStatus.ACCEPTED
