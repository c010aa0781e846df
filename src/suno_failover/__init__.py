"""Suno session management with credit based credential failover"""

__version__ = "0.1.0"

from .errors import (
    SunoClientError,
    AuthInitError,
    VersionLookupError,
    SessionEstablishError,
    TokenRenewError,
    QuotaQueryError,
    UpstreamRequestError,
    NoViableCredentialError
)
from .models import AudioInfo, QuotaSnapshot
from .session import SunoSession
from .poller import JobPoller
from .failover import CreditFailover
from .operations import SunoOperations

__all__ = [
    'SunoClientError',
    'AuthInitError',
    'VersionLookupError',
    'SessionEstablishError',
    'TokenRenewError',
    'QuotaQueryError',
    'UpstreamRequestError',
    'NoViableCredentialError',
    'AudioInfo',
    'QuotaSnapshot',
    'SunoSession',
    'JobPoller',
    'CreditFailover',
    'SunoOperations'
]
