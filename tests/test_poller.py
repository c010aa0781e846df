"""Tests for JobPoller and the feed fetch it relies on."""

from typing import List

import pytest

from conftest import clip
from suno_failover.errors import UpstreamRequestError
from suno_failover.models import AudioInfo
from suno_failover.poller import JobPoller, fetch_feed


class FakeClock:
    """Monotonic clock that moves forward a fixed step on every read."""

    def __init__(self, step: float = 1.0):
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current


def audios(*statuses: str) -> List[AudioInfo]:
    return [AudioInfo(id=f"clip-{i}", status=status) for i, status in enumerate(statuses)]


class ScriptedFetch:
    def __init__(self, *snapshots: List[AudioInfo]):
        self.snapshots = list(snapshots)
        self.calls: List[list] = []

    def __call__(self, session, ids):
        self.calls.append(list(ids))
        return self.snapshots[0] if len(self.snapshots) == 1 else self.snapshots.pop(0)


@pytest.fixture
def session(session_builder, credential):
    return session_builder(credential)


def test_returns_terminal_snapshot_without_waiting_for_window(session, sleeps):
    fetch = ScriptedFetch(audios("submitted", "queued"), audios("complete", "complete"))
    poller = JobPoller(session, fetch=fetch, clock=FakeClock())

    result = poller.await_completion(["clip-0", "clip-1"], poll_window_ms=100000)

    assert [a.status for a in result] == ["complete", "complete"]
    assert len(result) == 2
    assert len(fetch.calls) == 2
    assert fetch.calls[0] == ["clip-0", "clip-1"]


def test_empty_job_list_returns_without_reading_the_feed(session, sleeps):
    fetch = ScriptedFetch(audios("complete", "complete"))

    assert JobPoller(session, fetch=fetch, clock=FakeClock()).await_completion([]) == []
    assert fetch.calls == []
    assert sleeps == []


def test_streaming_counts_as_done(session, sleeps):
    fetch = ScriptedFetch(audios("streaming", "complete"))
    result = JobPoller(session, fetch=fetch, clock=FakeClock()).await_completion(["a", "b"])
    assert [a.status for a in result] == ["streaming", "complete"]
    assert len(fetch.calls) == 1


def test_all_error_is_terminal_and_returned_as_is(session, sleeps):
    fetch = ScriptedFetch(audios("error", "error"))
    result = JobPoller(session, fetch=fetch, clock=FakeClock()).await_completion(["a", "b"])
    assert [a.status for a in result] == ["error", "error"]


def test_single_straggler_blocks_the_batch_until_timeout(session, sleeps):
    fetch = ScriptedFetch(audios("complete", "queued"))
    poller = JobPoller(session, fetch=fetch, clock=FakeClock(step=1.0))

    result = poller.await_completion(["a", "b"], poll_window_ms=5000, initial_delay=0, poll_interval=(1, 1))

    assert [a.status for a in result] == ["complete", "queued"]
    assert 1 <= len(fetch.calls) <= 5


def test_timeout_returns_last_snapshot_not_an_error(session, sleeps):
    fetch = ScriptedFetch(audios("submitted"), audios("queued"), audios("queued"))
    poller = JobPoller(session, fetch=fetch, clock=FakeClock(step=10.0))

    result = poller.await_completion(["clip-0"], poll_window_ms=45000)

    assert [a.status for a in result] == ["queued"]


def test_returns_empty_list_when_window_closes_before_first_fetch(session, sleeps):
    fetch = ScriptedFetch(audios("complete"))
    poller = JobPoller(session, fetch=fetch, clock=FakeClock(step=1000.0))

    assert poller.await_completion(["clip-0"], poll_window_ms=1000) == []
    assert fetch.calls == []


def test_each_retry_sleeps_then_renews_with_blocking_delay(session, sleeps):
    fetch = ScriptedFetch(audios("queued"), audios("complete"))
    renewals_before = len(session.http.calls_to("/tokens"))
    poller = JobPoller(session, fetch=fetch, clock=FakeClock())

    poller.await_completion(["clip-0"], initial_delay=5, poll_interval=(3, 6))

    assert sleeps[0] == 5
    assert 3 <= sleeps[1] <= 6
    assert 1 <= sleeps[2] <= 2
    assert len(session.http.calls_to("/tokens")) == renewals_before + 1


def test_fetch_feed_maps_clips_and_cleans_lyrics(session):
    session.http.route("GET", "/api/feed/", [clip("a", "complete"), clip("b", "streaming")])

    result = fetch_feed(session, ["a", "b"])

    call = session.http.calls_to("/api/feed/")[-1]
    assert call["params"] == {"ids": "a,b"}
    assert call["timeout"] == session.settings.feed_timeout_seconds
    assert [a.id for a in result] == ["a", "b"]
    assert result[0].lyric == "line one\nline two"
    assert result[0].prompt == "line one\n\nline two"
    assert result[0].tags == "ambient"


def test_fetch_feed_without_ids_reads_whole_feed(session):
    session.http.route("GET", "/api/feed/", [])
    assert fetch_feed(session) == []
    assert session.http.calls_to("/api/feed/")[-1]["params"] is None


def test_fetch_feed_rejects_non_list_body(session):
    session.http.route("GET", "/api/feed/", {"detail": "Unauthorized"})
    with pytest.raises(UpstreamRequestError):
        fetch_feed(session, ["a"])
