from __future__ import annotations

import os
import pathlib
from typing import Dict, Iterable, Mapping, Optional

from dotenv import dotenv_values

from smartnotes.utils import get_logger

LOG = get_logger()


class CredentialStore:
    """Read-only key/value lookup for backend credentials.

    Providers receive a store at construction time; how it was populated
    (dotenv file, process environment, a secret manager) is up to the caller.
    """

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = {}
        for key, value in (values or {}).items():
            if key and value is not None:
                self._values[key.strip()] = str(value)

    @classmethod
    def from_env_file(cls, path) -> 'CredentialStore':
        env_path = pathlib.Path(path)
        if not env_path.exists():
            LOG.warning('credentials_file_missing', extra={'path': str(env_path)})
            return cls()
        values = dotenv_values(env_path)
        LOG.info('credentials_file_loaded', extra={'path': str(env_path), 'key_count': len(values)})
        return cls(values)

    @classmethod
    def from_environ(cls, keys: Iterable[str]) -> 'CredentialStore':
        return cls({k: os.environ[k] for k in keys if os.environ.get(k)})

    def merge(self, other: 'CredentialStore') -> 'CredentialStore':
        merged = dict(self._values)
        merged.update(other._values)
        return CredentialStore(merged)

    def get(self, key: str) -> Optional[str]:
        value = self._values.get(key)
        if value is None:
            return None
        value = value.strip()
        return value or None

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def keys(self):
        return [k for k in self._values if self.has(k)]

    def __repr__(self):
        # never echo secret values
        return f'CredentialStore(keys={sorted(self.keys())})'
