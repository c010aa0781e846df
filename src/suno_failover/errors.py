#!/usr/bin/env python3
""" Exceptions raised by the Suno session and failover client """

# Public API - functions and classes that external scripts should use
__all__ = [
    'SunoClientError',
    'AuthInitError',
    'VersionLookupError',
    'SessionEstablishError',
    'TokenRenewError',
    'QuotaQueryError',
    'UpstreamRequestError',
    'NoViableCredentialError'
]


class SunoClientError(Exception):
    """ Base class for every error raised by this package """


class AuthInitError(SunoClientError):
    """ A session could not be stood up for a credential """


class VersionLookupError(AuthInitError):
    """ The clerk-js version lookup returned no usable version """


class SessionEstablishError(AuthInitError):
    """ Clerk reported no active session, the cookie is invalid or expired """


class TokenRenewError(SunoClientError):
    """ The bearer token could not be renewed """


class QuotaQueryError(SunoClientError):
    """ The billing endpoint could not be read; never a reason to fail over """


class UpstreamRequestError(SunoClientError):
    """ A generation, feed, lyrics or clip call failed or returned garbage """


class NoViableCredentialError(SunoClientError):
    """ No credential is available to start a session from """
