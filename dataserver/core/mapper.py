"""Field-by-field conversion between domain objects and store entities."""

from typing import Optional

from .schema import (
    BlockType,
    DataBody,
    DataBodyEntity,
    DataEnvelope,
    DataHeader,
    DataHeaderEntity,
)


def header_to_entity(header: DataHeader) -> DataHeaderEntity:
    return DataHeaderEntity(
        name=header.name,
        block_type=BlockType.parse(header.block_type).value,
    )


def body_to_entity(body: DataBody, header_entity: DataHeaderEntity,
                   checksum: Optional[str] = None) -> DataBodyEntity:
    return DataBodyEntity(
        header=header_entity,
        payload=body.payload,
        checksum=checksum,
    )


def entity_to_header(entity: DataHeaderEntity) -> DataHeader:
    return DataHeader(
        name=entity.name,
        block_type=BlockType.parse(entity.block_type),
    )


def entity_to_body(entity: DataBodyEntity) -> DataBody:
    return DataBody(payload=entity.payload)


def entity_to_envelope(entity: DataBodyEntity) -> DataEnvelope:
    """Rebuild an envelope from a stored block. The checksum is the stored one, never recomputed."""
    return DataEnvelope(
        header=entity_to_header(entity.header),
        body=entity_to_body(entity),
        checksum=entity.checksum or "",
    )
