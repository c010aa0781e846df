#!/usr/bin/env python3
""" Credit based failover between stored Suno credentials """

from __future__ import annotations

import logging
import threading
from functools import partial
from typing import Callable, Optional, TypeVar

from suno_utilities.configuration import SettingsModel
from suno_utilities.credentials import Credential, CredentialStore

from .errors import (
    AuthInitError,
    NoViableCredentialError,
    QuotaQueryError,
    TokenRenewError,
)
from .session import SunoSession

# Public API - functions and classes that external scripts should use
__all__ = [
    'CreditFailover',
    'SessionFactory'
]

T = TypeVar("T")
SessionFactory = Callable[[Credential], SunoSession]


class CreditFailover:
    """ Owns the active session and swaps it when credits run low.

    Operations are passed in as callables taking the session they should run
    on, so a promoted session is handed straight to the same operation.
    Promotion happens under a lock; the store write is still a plain
    read-modify-write against whatever backs the store.
    """

    def __init__(self, session: SunoSession, store: CredentialStore,
                 session_factory: Optional[SessionFactory] = None):
        self._session = session
        self.store = store
        self.session_factory = session_factory or partial(SunoSession.initialize, settings=session.settings)
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()

    @classmethod
    def bootstrap(cls, store: CredentialStore, settings: SettingsModel,
                  credential: Optional[Credential] = None,
                  session_factory: Optional[SessionFactory] = None) -> 'CreditFailover':
        """ Start from the given credential, or from the store's active one.

        When neither exists, or the starting credential fails to initialise, the
        store's candidates are tried in order and the first one that initialises
        becomes the active credential. Credits are not checked here; guard does
        that on the first quota consuming call.
        """
        logger = logging.getLogger(__name__)
        factory = session_factory or partial(SunoSession.initialize, settings=settings)

        if credential is None:
            credential = store.get_active()
            if credential is not None:
                logger.info("Starting from active credential: %s", credential.account)

        if credential is None:
            logger.warning("No cookie supplied and the credential store has no active credential")
        else:
            try:
                return cls(factory(credential), store, factory)
            except AuthInitError as exc:
                logger.warning("Credential %s failed to initialise: %s", credential.account, exc)

        for candidate in store.list_candidates():
            if candidate == credential:
                continue
            try:
                session = factory(candidate)
            except AuthInitError as exc:
                logger.warning("Credential not usable: %s (%s)", candidate.account, exc)
                continue

            logger.info("Starting from candidate credential: %s", candidate.account)
            store.set_active(candidate.account, candidate.secret)
            return cls(session, store, factory)

        raise NoViableCredentialError("No credential could be initialised, supply a fresh cookie")

    @property
    def session(self) -> SunoSession:
        """ Session currently treated as active """
        return self._session

    def guard(self, operation: Callable[[SunoSession], T], threshold: int) -> T:
        """ Run operation on a session holding at least threshold credits.

        Falls back to the original session when no candidate qualifies, so the
        caller sees whatever the upstream answers rather than an error from
        here. A QuotaQueryError on the active session propagates unchanged.
        """
        original = self._session
        credits = original.get_quota()
        if credits.remaining >= threshold:
            return operation(original)

        self.logger.warning("Credits for %s are %s (< %s), looking for another credential",
                            original.credential.account, credits.remaining, threshold)
        promoted = self._promote_candidate(original, threshold)
        if promoted is None:
            self.logger.warning("No credential was good, calling original account %s",
                                original.credential.account)
            return operation(original)

        return operation(promoted)

    def _promote_candidate(self, original: SunoSession, threshold: int) -> Optional[SunoSession]:
        with self._lock:
            if self._session is not original:
                # Another call promoted while this one waited for the lock
                current = self._session
                try:
                    if current.get_quota().remaining >= threshold:
                        self.logger.info("Using credential promoted by a concurrent call: %s",
                                         current.credential.account)
                        return current
                except (TokenRenewError, QuotaQueryError) as exc:
                    self.logger.warning("Concurrently promoted credential %s is unusable: %s",
                                        current.credential.account, exc)

            for candidate in self.store.list_candidates():
                try:
                    session = self.session_factory(candidate)
                    credits = session.get_quota()
                except (AuthInitError, TokenRenewError, QuotaQueryError) as exc:
                    self.logger.warning("Credential not usable: %s (%s)", candidate.account, exc)
                    continue

                if credits.remaining >= threshold:
                    self.logger.info("Found valid credential: %s (%s credits)",
                                     candidate.account, credits.remaining)
                    self.store.set_active(candidate.account, candidate.secret)
                    self._session = session
                    return session

                self.logger.info("Credential not good: %s (%s credits)", candidate.account, credits.remaining)

        return None
