#!/usr/bin/env python3
""" Pydantic backed JSON files: strict models, readable load errors, atomic writes """

import json
import tempfile
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, ConfigDict, ValidationError

# Public API - functions and classes that external scripts should use
__all__ = [
    'StrictBaseModel',
    'JsonFileLoader',
    'write_json_atomic'
]


class StrictBaseModel(BaseModel):
    """ Base model with strict validation (no extra fields allowed) """
    model_config = ConfigDict(extra="forbid")


class JsonFileLoader:
    """ Loads one JSON file into a pydantic model, optionally defaulting when absent """

    def __init__(self, file_path: str, model_class: type[StrictBaseModel], allow_missing: bool = False):
        self.file_path = Path(file_path)
        self.model_class = model_class
        self.allow_missing = allow_missing
        try:
            self._data = self._load_and_validate()
        except ValueError as exc:
            # Re-raise with clean traceback
            raise ValueError(str(exc)) from None

    @property
    def data(self) -> StrictBaseModel:
        """ Get read-only access to the structured data """
        return self._data

    def _load_and_validate(self) -> StrictBaseModel:
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                raw_data = json.load(f)
        except FileNotFoundError as exc:
            if self.allow_missing:
                return self.model_class()
            raise FileNotFoundError(f"File not found: {self.file_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in file {self.file_path}: {exc}") from exc

        if not isinstance(raw_data, dict):
            raise ValueError(f"Expected a JSON object in {self.file_path}")

        try:
            return self.model_class.model_validate(raw_data)
        except ValidationError as exc:
            raise ValueError(f"{self.file_path.name}: {self._format_validation_error(exc)}") from None

    @staticmethod
    def _format_validation_error(exc: ValidationError) -> str:
        """ One line per offending field, joined with ';' """
        messages = []
        for error in exc.errors():
            field_path = ".".join(str(loc) for loc in error['loc'])
            if error['type'] == 'extra_forbidden':
                messages.append(f"Unknown field '{field_path}' (typo?)")
            elif error['type'] == 'missing':
                messages.append(f"Missing required field '{field_path}'")
            else:
                messages.append(f"Invalid value for '{field_path}': {error['msg']}")
        return "; ".join(messages)

    @staticmethod
    def create_loader_function(loader_class: type, default_path: str) -> Callable[[str], 'JsonFileLoader']:
        """ Factory function to create load_* convenience functions """
        def load_function(file_path: str = default_path) -> 'JsonFileLoader':
            try:
                return loader_class(file_path)
            except ValueError as exc:
                raise ValueError(str(exc)) from None

        return load_function


def write_json_atomic(file_path: Path, payload: dict) -> None:
    """ Write JSON next to the destination and rename it into place """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_file = tempfile.NamedTemporaryFile(
        mode='w',
        encoding='utf-8',
        dir=file_path.parent,
        delete=False,
        suffix='.tmp'
    )
    try:
        json.dump(payload, tmp_file, indent=2, ensure_ascii=False)
        tmp_file.close()
        Path(tmp_file.name).replace(file_path)
    except Exception:
        tmp_file.close()
        Path(tmp_file.name).unlink(missing_ok=True)
        raise
