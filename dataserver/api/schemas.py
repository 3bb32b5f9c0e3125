"""
Request and response models for the data server API.
The wire shape is {header: {name, blockType}, body: {payload}, checksum}.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict

from ..core.schema import BlockType, DataBody, DataEnvelope, DataHeader


class DataHeaderModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    block_type: BlockType = Field(alias="blockType")

    @field_validator('name')
    @classmethod
    def name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('name cannot be empty')
        return v


class DataBodyModel(BaseModel):
    payload: str


class DataEnvelopeModel(BaseModel):
    header: DataHeaderModel
    body: DataBodyModel
    checksum: str

    def to_domain(self) -> DataEnvelope:
        return DataEnvelope(
            header=DataHeader(name=self.header.name, block_type=self.header.block_type),
            body=DataBody(payload=self.body.payload),
            checksum=self.checksum,
        )

    @classmethod
    def from_domain(cls, envelope: DataEnvelope) -> "DataEnvelopeModel":
        return cls(
            header=DataHeaderModel(name=envelope.header.name, block_type=envelope.header.block_type),
            body=DataBodyModel(payload=envelope.body.payload),
            checksum=envelope.checksum,
        )


class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool
    block_count: int
    forwarder: Dict[str, int]
