"""Block-type queries and reclassification."""

from unittest.mock import MagicMock

import pytest

from dataserver.core.errors import InvalidBlockType
from dataserver.core.ingestion import IngestionService
from dataserver.core.query import QueryService
from dataserver.core.reclassify import ReclassificationService
from dataserver.core.schema import BlockType

from conftest import make_envelope


@pytest.fixture
def ingestion(store):
    return IngestionService(store, MagicMock(), swallow_persistence_errors=False)


@pytest.fixture
def query(store):
    return QueryService(store)


@pytest.fixture
def reclassifier(store):
    return ReclassificationService(store)


def names(envelopes):
    return [envelope.name for envelope in envelopes]


def test_query_returns_reassembled_envelopes(ingestion, query):
    original = make_envelope(payload="hello")
    ingestion.ingest(original)

    results = query.get_by_block_type("TYPE_A")

    assert len(results) == 1
    envelope = results[0]
    assert envelope.header.name == "block-1"
    assert envelope.header.block_type == BlockType.TYPE_A
    assert envelope.body.payload == "hello"
    assert envelope.checksum == original.checksum


def test_query_with_no_matches_is_empty(query):
    assert query.get_by_block_type(BlockType.TYPE_B) == []


def test_query_unknown_tag_raises(query):
    with pytest.raises(InvalidBlockType):
        query.get_by_block_type("BLOCKTYPEZ")


def test_reclassify_moves_block_between_tags(ingestion, query, reclassifier):
    assert ingestion.ingest(make_envelope(name="block-1", block_type=BlockType.TYPE_A)).accepted
    assert "block-1" in names(query.get_by_block_type("TYPE_A"))

    assert reclassifier.reclassify("block-1", "TYPE_B") is True

    assert "block-1" not in names(query.get_by_block_type("TYPE_A"))
    moved = query.get_by_block_type("TYPE_B")
    assert names(moved) == ["block-1"]
    assert moved[0].body.payload == "hello"


def test_reclassify_missing_name_leaves_store_unchanged(ingestion, query, reclassifier, store):
    ingestion.ingest(make_envelope(name="block-1"))

    assert reclassifier.reclassify("ghost", "TYPE_B") is False

    assert store.count() == 1
    assert names(query.get_by_block_type("TYPE_A")) == ["block-1"]
    assert query.get_by_block_type("TYPE_B") == []


@pytest.mark.parametrize("name", ["", "   ", None])
def test_reclassify_blank_name_never_reaches_store(name):
    store = MagicMock()
    assert ReclassificationService(store).reclassify(name, "TYPE_B") is False
    store.update_block_type.assert_not_called()


def test_reclassify_invalid_tag_rejected_by_store(ingestion, reclassifier, store):
    ingestion.ingest(make_envelope(name="block-1"))

    with pytest.raises(InvalidBlockType):
        reclassifier.reclassify("block-1", "TYPE_Z")
    assert store.get("block-1").header.block_type == "TYPE_A"


def test_rejected_envelope_is_never_queryable(ingestion, query):
    result = ingestion.ingest(make_envelope(name="block-1", payload="hello", checksum="deadbeef"))

    assert result.accepted is False
    for tag in BlockType:
        assert "block-1" not in names(query.get_by_block_type(tag))
