"""Shared utilities for the Suno failover client"""

__version__ = "0.1.0"

# Import and expose configuration model components
from .configuration import (
    SettingsModel,
    ConfigurationLoader,
    load_configuration
)

# Import and expose credential store components
from .credentials import (
    Credential,
    CredentialStore,
    JsonCredentialStore,
    load_credentials
)

__all__ = [
    'SettingsModel',
    'ConfigurationLoader',
    'load_configuration',
    'Credential',
    'CredentialStore',
    'JsonCredentialStore',
    'load_credentials'
]
