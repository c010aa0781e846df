"""Shared fixtures: a scripted HTTP session, an in-memory credential store and no-op sleeps."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Optional

import pytest
import requests

from suno_failover.session import SunoSession
from suno_utilities.configuration import SettingsModel
from suno_utilities.credentials import Credential, CredentialStore


class FakeResponse:
    """Just enough of requests.Response for NetworkRetry and the session."""

    def __init__(self, payload: Any = None, status_code: int = 200, url: str = ""):
        self.payload = payload
        self.status_code = status_code
        self.url = url
        self.headers: Dict[str, str] = {}

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return str(self.payload)

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


class FakeHttp:
    """Routes requests by method and URL fragment; the longest matching fragment wins.

    Later routes win ties. A route holds a list of responses consumed in order (the last one repeats)
    or a callable taking the recorded call.
    """

    def __init__(self) -> None:
        self.routes: List[tuple] = []
        self.calls: List[Dict[str, Any]] = []

    def route(self, method: str, fragment: str, *responses: Any) -> "FakeHttp":
        self.routes.append((method, fragment, list(responses)))
        return self

    def request(self, method: str, url: str, headers: Optional[dict] = None,
                timeout: Optional[float] = None, **kwargs: Any) -> FakeResponse:
        call = {"method": method, "url": url, "headers": headers or {}, "timeout": timeout, **kwargs}
        self.calls.append(call)

        matches = [r for r in self.routes if r[0] == method and r[1] in url]
        if not matches:
            raise requests.exceptions.ConnectionError(f"No route for {method} {url}")
        _, _, responses = max(reversed(matches), key=lambda r: len(r[1]))

        item = responses[0] if len(responses) == 1 else responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if callable(item):
            item = item(call)
        if not isinstance(item, FakeResponse):
            item = FakeResponse(item)
        item.url = url
        return item

    def calls_to(self, fragment: str, method: Optional[str] = None) -> List[Dict[str, Any]]:
        return [c for c in self.calls if fragment in c["url"] and (method is None or c["method"] == method)]


def clerk_http(credits: Any = 100, version: str = "5.35.1", session_id: str = "sess_test",
               tokens: Optional[List[str]] = None) -> FakeHttp:
    """A FakeHttp answering the three init calls and the billing call."""
    http = FakeHttp()
    http.route("GET", "/v1/package/npm/@clerk/clerk-js", {"tags": {"latest": version}})
    http.route("GET", "/v1/client", {"response": {"last_active_session_id": session_id}})
    token_responses = [{"jwt": token} for token in (tokens or ["jwt-1", "jwt-2", "jwt-3", "jwt-n"])]
    http.route("POST", f"/v1/client/sessions/{session_id}/tokens", *token_responses)
    if isinstance(credits, (list, tuple)):
        http.route("GET", "/api/billing/info/", *[billing(c) for c in credits])
    else:
        http.route("GET", "/api/billing/info/", billing(credits))
    return http


def billing(credits: Any) -> Dict[str, Any]:
    return {
        "total_credits_left": credits,
        "period": "month",
        "monthly_limit": 500,
        "monthly_usage": 500 - credits if isinstance(credits, int) else 0,
    }


def clip(clip_id: str, status: str = "submitted", prompt: str = "line one\n\nline two") -> Dict[str, Any]:
    return {
        "id": clip_id,
        "title": f"title {clip_id}",
        "image_url": f"https://cdn.example/{clip_id}.png",
        "audio_url": f"https://cdn.example/{clip_id}.mp3",
        "video_url": "",
        "created_at": "2024-10-27T12:00:00Z",
        "model_name": "chirp-v3",
        "status": status,
        "metadata": {
            "prompt": prompt,
            "gpt_description_prompt": "a calm song",
            "type": "gen",
            "tags": "ambient",
            "negative_tags": "metal",
            "duration": 120.5,
            "error_message": None,
        },
    }


class InMemoryCredentialStore(CredentialStore):
    """Credential store that records every set_active call."""

    def __init__(self, candidates: List[Credential], active: Optional[Credential] = None):
        self.candidates = list(candidates)
        self.active = active
        self.writes: List[tuple] = []

    def list_candidates(self) -> List[Credential]:
        return list(self.candidates)

    def get_active(self) -> Optional[Credential]:
        return self.active

    def set_active(self, account: str, secret: str) -> None:
        self.writes.append((account, secret))
        self.active = Credential(account=account, secret=secret)


@pytest.fixture
def sleeps(monkeypatch) -> List[float]:
    """Record sleeps instead of performing them."""
    recorded: List[float] = []
    monkeypatch.setattr(time, "sleep", lambda seconds: recorded.append(seconds))
    return recorded


@pytest.fixture
def settings() -> SettingsModel:
    return SettingsModel()


@pytest.fixture
def credential() -> Credential:
    return Credential(account="primary", secret="__client=primary-cookie; __client_uat=1")


@pytest.fixture
def session_builder(settings, sleeps) -> Callable[..., SunoSession]:
    """Build an initialised session whose HTTP traffic is scripted."""
    def build(credential: Credential, credits: Any = 100, **kwargs: Any) -> SunoSession:
        http = kwargs.pop("http", None) or clerk_http(credits, **kwargs)
        return SunoSession.initialize(credential, settings, http=http)
    return build
