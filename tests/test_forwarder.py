"""Archival forwarding: best-effort, counted, never raising."""

import threading
from unittest.mock import MagicMock

import requests

from dataserver.core.forwarder import ArchivalForwarder

from conftest import make_envelope


def test_forward_posts_envelope_json(forwarder, archive_session):
    envelope = make_envelope()

    assert forwarder.forward(envelope) is None

    archive_session.post.assert_called_once_with(
        "http://archive.test/hadoopserver/pushbigdata",
        json={
            "header": {"name": "block-1", "blockType": "TYPE_A"},
            "body": {"payload": "hello"},
            "checksum": "5d41402abc4b2a76b9719d911017c592",
        },
        timeout=1.0,
    )
    assert forwarder.stats() == {"sent": 1, "failed": 0, "skipped": 0}


def test_non_success_status_is_counted_not_raised(forwarder, archive_session):
    archive_session.post.return_value = MagicMock(status_code=500)

    forwarder.forward(make_envelope())

    assert forwarder.stats()["failed"] == 1
    assert forwarder.stats()["sent"] == 0


def test_connection_error_is_swallowed(forwarder, archive_session):
    archive_session.post.side_effect = requests.ConnectionError("refused")

    forwarder.forward(make_envelope())

    assert forwarder.stats()["failed"] == 1


def test_timeout_is_a_forward_failure(forwarder, archive_session):
    archive_session.post.side_effect = requests.Timeout("slow sink")

    forwarder.forward(make_envelope())

    assert forwarder.stats()["failed"] == 1


def test_no_retry_after_failure(forwarder, archive_session):
    archive_session.post.side_effect = requests.ConnectionError("refused")

    forwarder.forward(make_envelope())

    assert archive_session.post.call_count == 1


def test_disabled_forwarder_skips(archive_session):
    forwarder = ArchivalForwarder(url="http://archive.test/push", enabled=False,
                                  run_async=False, session=archive_session)

    forwarder.forward(make_envelope())

    archive_session.post.assert_not_called()
    assert forwarder.stats()["skipped"] == 1


def test_async_forward_runs_on_worker_pool(archive_session):
    forwarder = ArchivalForwarder(url="http://archive.test/push", enabled=True,
                                  run_async=True, max_workers=2, session=archive_session)
    try:
        future = forwarder.forward(make_envelope())
        assert future is not None
        assert future.result(timeout=5) is True
    finally:
        forwarder.shutdown(wait=True)

    assert forwarder.stats()["sent"] == 1


def test_async_failure_resolves_false(archive_session):
    archive_session.post.side_effect = requests.ConnectionError("refused")
    forwarder = ArchivalForwarder(url="http://archive.test/push", enabled=True,
                                  run_async=True, max_workers=1, session=archive_session)
    try:
        assert forwarder.forward(make_envelope()).result(timeout=5) is False
    finally:
        forwarder.shutdown(wait=True)

    assert forwarder.stats()["failed"] == 1


def test_forward_after_shutdown_is_counted_not_raised(archive_session):
    forwarder = ArchivalForwarder(url="http://archive.test/push", enabled=True,
                                  run_async=True, max_workers=1, session=archive_session)
    forwarder.shutdown(wait=True)

    assert forwarder.forward(make_envelope()) is None
    assert forwarder.stats()["failed"] == 1
    archive_session.post.assert_not_called()


def test_unexpected_transport_error_is_counted_not_raised(forwarder, archive_session):
    archive_session.post.side_effect = ValueError("boom from transport adapter")

    assert forwarder.forward(make_envelope()) is None

    assert forwarder.stats() == {"sent": 0, "failed": 1, "skipped": 0}


def test_unexpected_error_in_worker_resolves_false(archive_session):
    archive_session.post.side_effect = ValueError("boom from transport adapter")
    forwarder = ArchivalForwarder(url="http://archive.test/push", enabled=True,
                                  run_async=True, max_workers=1, session=archive_session)
    try:
        assert forwarder.forward(make_envelope()).result(timeout=5) is False
    finally:
        forwarder.shutdown(wait=True)

    assert forwarder.stats()["failed"] == 1


def test_each_worker_thread_gets_its_own_session(monkeypatch):
    created = []

    def fake_session():
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=200)
        created.append(session)
        return session

    monkeypatch.setattr(requests, "Session", fake_session)
    forwarder = ArchivalForwarder(url="http://archive.test/push", enabled=True,
                                  run_async=False)

    forwarder.forward(make_envelope())
    forwarder.forward(make_envelope())
    worker = threading.Thread(target=forwarder.forward, args=(make_envelope(),))
    worker.start()
    worker.join()

    assert len(created) == 2
    assert created[0].post.call_count == 2
    assert created[1].post.call_count == 1
