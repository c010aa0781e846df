#!/usr/bin/env python3
"""
Suno session management over Clerk cookie authentication.

A session is bound to exactly one credential (the raw cookie header of a logged
in suno.com browser). Standing one up takes three calls, each one required
before the next:

1. VERSION LOOKUP
   - GET {jsdelivr}/v1/package/npm/@clerk/clerk-js
   - tags.latest is the clerk-js version the browser would be running
   - Clerk rejects client calls that do not name a version

2. SESSION ESTABLISH
   - GET {clerk}/v1/client?_clerk_js_version={version}
   - response.last_active_session_id identifies the server side session
   - A missing id means the cookie is invalid or the session expired, the
     user has to log in again in the browser

3. TOKEN RENEWAL
   - POST {clerk}/v1/client/sessions/{session_id}/tokens?_clerk_js_version={version}
   - jwt is a short lived (about a minute) bearer token for the studio API
   - Renewed before every quota consuming call, and again afterwards so the
     next call starts from a fresh token

Quota is read from {api}/api/billing/info/ and is never cached.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Final, Optional

import requests

from suno_utilities.configuration import SettingsModel
from suno_utilities.credentials import Credential
from suno_utilities.logging_utils import mask_secret
from suno_utilities.network import NetworkRetry, random_sleep

from .errors import (
    AuthInitError,
    QuotaQueryError,
    SessionEstablishError,
    TokenRenewError,
    UpstreamRequestError,
    VersionLookupError,
)
from .models import QuotaSnapshot

# Public API - functions and classes that external scripts should use
__all__ = [
    'Config',
    'SunoSession',
    'parse_cookie_header'
]


class Config:
    """ Constants for talking to Clerk and the studio API """
    CLERK_JS_PACKAGE: Final[str] = "/v1/package/npm/@clerk/clerk-js"
    USER_AGENT: Final[str] = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    DEFAULT_HEADERS: Final[Dict[str, str]] = {
        "Origin": "https://suno.com",
        "Referer": "https://suno.com/",
        "Accept": "application/json",
    }


def parse_cookie_header(cookie: str) -> Dict[str, str]:
    """ Split a browser Cookie header into name/value pairs """
    cookies: Dict[str, str] = {}
    for part in cookie.split(";"):
        name_value = part.strip()
        if "=" not in name_value:
            continue
        name, value = name_value.split("=", 1)
        cookies[name.strip()] = value.strip()
    return cookies


class SunoSession:
    """ One authenticated Suno session bound to one credential """

    def __init__(self, credential: Credential, settings: SettingsModel,
                 http: Optional[requests.Session] = None):
        self.credential = credential
        self.settings = settings
        self.logger = logging.getLogger(__name__)
        self.http = http if http is not None else self._create_http(credential)

        self.client_version: Optional[str] = None
        self.session_id: Optional[str] = None
        self.bearer_token: Optional[str] = None

    @classmethod
    def initialize(cls, credential: Credential, settings: SettingsModel,
                   http: Optional[requests.Session] = None) -> 'SunoSession':
        """ Build a fully usable session or raise AuthInitError """
        session = cls(credential, settings, http)
        session.logger.info("Initialising session for %s (cookie %s)",
                            credential.account, mask_secret(credential.secret))

        session._lookup_client_version()
        session._establish_session()
        try:
            session.renew(blocking_delay=False)
        except TokenRenewError as exc:
            raise AuthInitError(f"Initial token renewal failed for {credential.account}: {exc}") from exc

        session.logger.info("Session ready for %s", credential.account)
        return session

    @staticmethod
    def _create_http(credential: Credential) -> requests.Session:
        """ Create the cookie carrying HTTP session """
        s = requests.Session()
        s.headers.update({"User-Agent": Config.USER_AGENT, **Config.DEFAULT_HEADERS})
        s.cookies.update(parse_cookie_header(credential.secret))
        return s

    @property
    def is_established(self) -> bool:
        """ Both identifiers are known """
        return bool(self.client_version and self.session_id)

    @property
    def is_ready(self) -> bool:
        """ Established and holding a bearer token """
        return self.is_established and bool(self.bearer_token)

    def _send(self, method: str, url: str, timeout: Optional[float] = None, **kwargs: Any) -> requests.Response:
        """ Send one request with the current bearer token attached """
        headers = dict(kwargs.pop("headers", None) or {})
        if self.bearer_token:
            headers["Authorization"] = f"Bearer {self.bearer_token}"
        if timeout is None:
            timeout = self.settings.request_timeout_seconds

        return NetworkRetry.execute(
            lambda: self.http.request(method, url, headers=headers, timeout=timeout, **kwargs),
            max_retries=self.settings.request_retries
        )

    def _lookup_client_version(self) -> None:
        url = f"{self.settings.jsdelivr_url}{Config.CLERK_JS_PACKAGE}"
        try:
            data = self._send("GET", url).json()
            version = data["tags"]["latest"]
        except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as exc:
            raise VersionLookupError("Failed to get clerk version info, please try again later") from exc

        if not version or not isinstance(version, str):
            raise VersionLookupError("Failed to get clerk version info, please try again later")

        self.client_version = version
        self.logger.debug("Resolved clerk-js version %s", version)

    def _establish_session(self) -> None:
        url = f"{self.settings.clerk_url}/v1/client"
        try:
            data = self._send("GET", url, params={"_clerk_js_version": self.client_version}).json()
            session_id = data["response"]["last_active_session_id"]
        except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as exc:
            raise SessionEstablishError(
                f"Failed to get session id for {self.credential.account}, the cookie may need updating"
            ) from exc

        if not session_id:
            raise SessionEstablishError(
                f"Failed to get session id for {self.credential.account}, the cookie may need updating"
            )

        self.session_id = session_id
        self.logger.debug("Established clerk session %s", session_id)

    def renew(self, blocking_delay: bool = False) -> None:
        """ Swap in a fresh bearer token, optionally pausing afterwards """
        if not self.session_id:
            raise TokenRenewError("Session ID is not set. Cannot renew token.")

        url = f"{self.settings.clerk_url}/v1/client/sessions/{self.session_id}/tokens"
        try:
            data = self._send("POST", url, params={"_clerk_js_version": self.client_version}).json()
            token = data["jwt"]
        except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as exc:
            raise TokenRenewError(f"Token renewal failed for {self.credential.account}: {exc}") from exc

        if not token:
            raise TokenRenewError(f"Token renewal for {self.credential.account} returned no token")

        self.bearer_token = token
        self.logger.info("KeepAlive...")

        if blocking_delay:
            random_sleep(self.settings.keep_alive_delay_seconds)

    def get_quota(self, fresh: bool = False) -> QuotaSnapshot:
        """ Read the account's credits; raises QuotaQueryError when unreadable """
        if not fresh:
            self.renew(blocking_delay=False)

        url = f"{self.settings.api_url}/api/billing/info/"
        try:
            data = self._send("GET", url).json()
            quota = QuotaSnapshot.from_billing(data)
        except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as exc:
            raise QuotaQueryError(f"Could not read credits for {self.credential.account}: {exc}") from exc

        self.logger.info("Credits left for %s: %s", self.credential.account, quota.remaining)
        return quota

    def request_json(self, method: str, path: str, timeout: Optional[float] = None, **kwargs: Any) -> Any:
        """ Call the studio API and return the decoded JSON body """
        url = f"{self.settings.api_url}{path}"
        try:
            response = self._send(method, url, timeout=timeout, **kwargs)
            return response.json()
        except requests.exceptions.RequestException as exc:
            raise UpstreamRequestError(f"{method} {path} failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamRequestError(f"{method} {path} returned a malformed body") from exc
