#!/usr/bin/env python3
""" Polls submitted clips until the whole batch finishes or the window closes """

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Sequence

from suno_utilities.network import random_sleep

from .errors import UpstreamRequestError
from .models import AudioInfo
from .session import SunoSession

# Public API - functions and classes that external scripts should use
__all__ = [
    'JobPoller',
    'fetch_feed'
]


def fetch_feed(session: SunoSession, song_ids: Sequence[str] | None = None) -> List[AudioInfo]:
    """ Renew, then read clip status from the feed endpoint """
    session.renew(blocking_delay=False)
    params = {"ids": ",".join(song_ids)} if song_ids else None
    logging.getLogger(__name__).info("Get audio status: %s", params["ids"] if params else "<all>")

    clips = session.request_json(
        "GET", "/api/feed/",
        timeout=session.settings.feed_timeout_seconds,
        params=params
    )
    if not isinstance(clips, list):
        raise UpstreamRequestError("Feed returned an unexpected body")
    try:
        return [AudioInfo.from_clip(clip, clean_lyrics=True) for clip in clips]
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise UpstreamRequestError(f"Feed returned a malformed clip: {exc}") from exc


class JobPoller:
    """ Two state loop (polling, done) over one batch of clip ids """

    def __init__(self, session: SunoSession,
                 fetch: Callable[[SunoSession, Sequence[str]], List[AudioInfo]] = fetch_feed,
                 clock: Callable[[], float] = time.monotonic):
        self.session = session
        self.fetch = fetch
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def is_done(snapshot: List[AudioInfo]) -> bool:
        """ Every clip playable, or every clip failed """
        if not snapshot:
            return False
        all_completed = all(audio.is_playable for audio in snapshot)
        all_error = all(audio.is_error for audio in snapshot)
        return all_completed or all_error

    def await_completion(self, job_ids: Iterable[str],
                         poll_window_ms: int | None = None,
                         initial_delay: int | None = None,
                         poll_interval: Sequence[int] | None = None) -> List[AudioInfo]:
        """ Return the terminal snapshot, or the last one fetched when the window closes.

        A snapshot returned on timeout may still hold clips that are submitted or
        queued; callers re-check status later if they need a final answer.
        """
        settings = self.session.settings
        ids = list(dict.fromkeys(job_ids))
        if not ids:
            # An empty id list would read the whole feed
            return []
        window_ms = poll_window_ms if poll_window_ms is not None else settings.poll_window_ms
        delay = initial_delay if initial_delay is not None else settings.initial_poll_delay_seconds
        interval = poll_interval if poll_interval is not None else settings.poll_interval_seconds

        start = self.clock()
        last_snapshot: List[AudioInfo] = []
        random_sleep(delay)

        while (self.clock() - start) * 1000 < window_ms:
            snapshot = self.fetch(self.session, ids)
            if self.is_done(snapshot):
                self.logger.info("Clips finished: %s",
                                 ", ".join(f"{audio.id}={audio.status}" for audio in snapshot))
                return snapshot

            last_snapshot = snapshot
            for audio in snapshot:
                self.logger.debug("  * %s - %s", audio.id, audio.status)

            random_sleep(interval)
            self.session.renew(blocking_delay=True)

        self.logger.warning("Poll window of %s ms elapsed, returning last snapshot for %s",
                            window_ms, ", ".join(ids))
        return last_snapshot
