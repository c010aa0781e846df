#!/usr/bin/env python3
""" Quota consuming Suno operations, wired through the credit failover """

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from suno_utilities.configuration import SettingsModel
from suno_utilities.network import random_sleep

from .errors import UpstreamRequestError
from .failover import CreditFailover
from .models import AudioInfo
from .poller import JobPoller, fetch_feed
from .session import SunoSession

# Public API - functions and classes that external scripts should use
__all__ = [
    'SunoOperations',
    'build_generation_payload'
]


def build_generation_payload(prompt: str, is_custom: bool, default_model: str,
                             tags: Optional[str] = None, title: Optional[str] = None,
                             make_instrumental: bool = False, model: Optional[str] = None,
                             negative_tags: Optional[str] = None) -> Dict[str, Any]:
    """ Body for /api/generate/v2/ in simple (description) or custom (lyrics) mode """
    payload: Dict[str, Any] = {
        "make_instrumental": make_instrumental is True,
        "mv": model or default_model,
        "prompt": "",
    }
    if is_custom:
        payload["tags"] = tags
        payload["title"] = title
        payload["negative_tags"] = negative_tags
        payload["prompt"] = prompt
    else:
        payload["gpt_description_prompt"] = prompt
    return payload


class SunoOperations:
    """ Generation, extension, concatenation, lyrics and status calls.

    Submissions, concatenation and feed reads go through CreditFailover.guard.
    Extension and lyrics run on the active session without a credit check.
    """

    def __init__(self, failover: CreditFailover,
                 poller_factory: Callable[[SunoSession], JobPoller] = JobPoller):
        self.failover = failover
        self.poller_factory = poller_factory
        self.logger = logging.getLogger(__name__)

    @property
    def settings(self) -> SettingsModel:
        """ Settings of the active session """
        return self.failover.session.settings

    def generate(self, prompt: str, make_instrumental: bool = False,
                 model: Optional[str] = None, wait_audio: bool = False) -> List[AudioInfo]:
        """ Generate from a free text description """
        start_time = time.monotonic()
        audios = self.failover.guard(
            lambda session: self._generate_songs(
                session, prompt, False,
                make_instrumental=make_instrumental, model=model, wait_audio=wait_audio
            ),
            self.settings.generation_threshold
        )
        self.logger.info("Generate finished with %s clips, cost time: %.2f s",
                         len(audios), time.monotonic() - start_time)
        return audios

    def custom_generate(self, prompt: str, tags: str, title: str, make_instrumental: bool = False,
                        model: Optional[str] = None, wait_audio: bool = False,
                        negative_tags: Optional[str] = None) -> List[AudioInfo]:
        """ Generate from explicit lyrics, style tags and title """
        start_time = time.monotonic()
        audios = self.failover.guard(
            lambda session: self._generate_songs(
                session, prompt, True, tags=tags, title=title,
                make_instrumental=make_instrumental, model=model,
                wait_audio=wait_audio, negative_tags=negative_tags
            ),
            self.settings.generation_threshold
        )
        self.logger.info("Custom generate finished with %s clips, cost time: %.2f s",
                         len(audios), time.monotonic() - start_time)
        return audios

    def _generate_songs(self, session: SunoSession, prompt: str, is_custom: bool,
                        tags: Optional[str] = None, title: Optional[str] = None,
                        make_instrumental: bool = False, model: Optional[str] = None,
                        wait_audio: bool = False, negative_tags: Optional[str] = None) -> List[AudioInfo]:
        session.renew(blocking_delay=False)
        payload = build_generation_payload(
            prompt, is_custom, session.settings.default_model,
            tags=tags, title=title, make_instrumental=make_instrumental,
            model=model, negative_tags=negative_tags
        )
        self.logger.debug("generateSongs payload: %s", payload)

        response = session.request_json(
            "POST", "/api/generate/v2/",
            timeout=session.settings.submit_timeout_seconds,
            json=payload
        )
        clips = response.get("clips") if isinstance(response, dict) else None
        if not isinstance(clips, list):
            raise UpstreamRequestError("Generate returned no clips")

        try:
            song_ids = [clip["id"] for clip in clips]
            audios = [AudioInfo.from_clip(clip) for clip in clips]
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise UpstreamRequestError(f"Generate returned a malformed clip: {exc}") from exc

        if wait_audio and not song_ids:
            self.logger.warning("Generate accepted the request but returned no clips to wait for")
            return []
        if wait_audio:
            return self.poller_factory(session).await_completion(song_ids)

        session.renew(blocking_delay=True)
        return audios

    def concatenate(self, clip_id: str) -> Any:
        """ Stitch an extended clip and its parents into one song """
        def run(session: SunoSession) -> Any:
            session.renew(blocking_delay=False)
            result = session.request_json(
                "POST", "/api/generate/concat/v2/",
                timeout=session.settings.submit_timeout_seconds,
                json={"clip_id": clip_id}
            )
            session.renew(blocking_delay=True)
            return result

        return self.failover.guard(run, self.settings.generation_threshold)

    def extend_audio(self, audio_id: str, prompt: str = "", continue_at: str = "0",
                     tags: str = "", title: str = "", model: Optional[str] = None) -> Any:
        """ Continue a clip from continue_at; not credit checked """
        session = self.failover.session
        session.renew(blocking_delay=False)
        result = session.request_json(
            "POST", "/api/generate/v2/",
            json={
                "continue_clip_id": audio_id,
                "continue_at": continue_at,
                "mv": model or session.settings.default_model,
                "prompt": prompt,
                "tags": tags,
                "title": title,
            }
        )
        session.renew(blocking_delay=True)
        return result

    def generate_lyrics(self, prompt: str) -> Dict[str, Any]:
        """ Submit a lyrics job and wait for it on a fixed interval.

        Waits without limit unless lyrics_timeout_seconds is configured.
        """
        session = self.failover.session
        session.renew(blocking_delay=False)
        submitted = session.request_json("POST", "/api/generate/lyrics/", json={"prompt": prompt})
        try:
            generate_id = submitted["id"]
        except (KeyError, TypeError) as exc:
            raise UpstreamRequestError("Lyrics submission returned no id") from exc

        timeout = session.settings.lyrics_timeout_seconds
        start_time = time.monotonic()
        lyrics = session.request_json("GET", f"/api/generate/lyrics/{generate_id}")
        while not (isinstance(lyrics, dict) and lyrics.get("status") == "complete"):
            if timeout is not None and time.monotonic() - start_time >= timeout:
                raise UpstreamRequestError(f"Lyrics {generate_id} not complete after {timeout} seconds")
            random_sleep(session.settings.lyrics_poll_seconds)
            lyrics = session.request_json("GET", f"/api/generate/lyrics/{generate_id}")

        return lyrics

    def get(self, song_ids: Optional[Sequence[str]] = None) -> List[AudioInfo]:
        """ Current status of the given clips, or the account's whole feed """
        return self.failover.guard(
            lambda session: fetch_feed(session, song_ids),
            self.settings.feed_threshold
        )

    def get_clip(self, clip_id: str) -> Any:
        """ Raw clip object """
        session = self.failover.session
        session.renew(blocking_delay=False)
        return session.request_json("GET", f"/api/clip/{clip_id}")

    def get_limit(self) -> Dict[str, Any]:
        """ Credits of the active account """
        return self.failover.session.get_quota().to_limit()
