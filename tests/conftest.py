"""Shared fixtures: every test gets its own SQLite file and a stubbed archive sink."""

from unittest.mock import MagicMock

import pytest

from dataserver.core.dao import EnvelopeStore
from dataserver.core.forwarder import ArchivalForwarder
from dataserver.core.integrity import digest
from dataserver.core.schema import BlockType, DataBody, DataEnvelope, DataHeader


@pytest.fixture
def store(tmp_path):
    """Envelope store backed by a fresh temporary database."""
    return EnvelopeStore(str(tmp_path / "blocks.db"))


@pytest.fixture
def archive_session():
    """requests.Session stand-in whose posts succeed unless told otherwise."""
    session = MagicMock()
    session.post.return_value = MagicMock(status_code=200)
    return session


@pytest.fixture
def forwarder(archive_session):
    """Synchronous forwarder posting to the stubbed session."""
    return ArchivalForwarder(
        url="http://archive.test/hadoopserver/pushbigdata",
        timeout=1.0,
        enabled=True,
        run_async=False,
        session=archive_session,
    )


def make_envelope(name="block-1", block_type=BlockType.TYPE_A, payload="hello", checksum=None):
    return DataEnvelope(
        header=DataHeader(name=name, block_type=block_type),
        body=DataBody(payload=payload),
        checksum=digest(payload) if checksum is None else checksum,
    )
