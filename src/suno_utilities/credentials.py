#!/usr/bin/env python3
""" Credential records and the stores that hand them out """

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .pydantics import JsonFileLoader, StrictBaseModel, write_json_atomic

# Public API - functions and classes that external scripts should use
__all__ = [
    'Credential',
    'CredentialsModel',
    'CredentialsLoader',
    'CredentialStore',
    'JsonCredentialStore',
    'load_credentials'
]


class Credential(BaseModel):
    """ One Suno account: a raw cookie header plus a readable label """
    model_config = ConfigDict(frozen=True, extra="forbid")

    account: str = Field(description="Human readable account label")
    secret: str = Field(description="Cookie header string for the account", min_length=1)

    def __eq__(self, other: object) -> bool:
        # The cookie is the identity, labels can be renamed in the store
        if not isinstance(other, Credential):
            return NotImplemented
        return self.secret == other.secret

    def __hash__(self) -> int:
        return hash(self.secret)


class CredentialsModel(StrictBaseModel):
    """ Layout of credentials.json """
    active: Optional[Credential] = Field(default=None, description="Credential currently in use")
    candidates: List[Credential] = Field(default_factory=list, description="Ordered failover candidates")


class CredentialsLoader(JsonFileLoader):
    """ Loader for credential files """

    def __init__(self, file_path: str):
        """ Initialize the credentials loader """
        super().__init__(file_path, CredentialsModel, allow_missing=True)

    @property
    def data(self) -> CredentialsModel:
        """ Get read-only access to the structured credential data """
        return self._data


# Convenience function for loading credential files
load_credentials = JsonFileLoader.create_loader_function(CredentialsLoader, "credentials.json")


class CredentialStore(ABC):
    """ Source of candidate credentials and keeper of the active pointer """

    @abstractmethod
    def list_candidates(self) -> List[Credential]:
        """ Return every candidate credential in store order """

    @abstractmethod
    def get_active(self) -> Optional[Credential]:
        """ Return the credential marked active, if any """

    @abstractmethod
    def set_active(self, account: str, secret: str) -> None:
        """ Mark the given credential as active """


class JsonCredentialStore(CredentialStore):
    """ Credential store backed by a JSON file, re-read on every access """

    def __init__(self, file_path: str | Path):
        self.file_path = Path(file_path)
        self.logger = logging.getLogger(__name__)

    def _load(self) -> CredentialsModel:
        return load_credentials(str(self.file_path)).data

    def list_candidates(self) -> List[Credential]:
        candidates = self._load().candidates
        self.logger.debug("Loaded %s candidate credentials from %s", len(candidates), self.file_path)
        return list(candidates)

    def get_active(self) -> Optional[Credential]:
        return self._load().active

    def set_active(self, account: str, secret: str) -> None:
        data = self._load()
        data.active = Credential(account=account, secret=secret)
        write_json_atomic(self.file_path, data.model_dump(mode="json"))
        self.logger.info("Persisted active credential: %s", account)
