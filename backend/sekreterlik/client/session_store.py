"""Persistent session storage.

A :class:`Storage` is a flat string key/value store with the semantics of
browser ``localStorage``; :class:`SessionStore` owns the two keys the auth
layer reads at start-up and writes on login/logout, plus the bearer token
so a restored session can still call the API.
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

USER_KEY = 'user'
LOGGED_IN_KEY = 'isLoggedIn'
TOKEN_KEY = 'token'


class Storage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """Key/value map kept in a single JSON file, rewritten on every change."""

    def __init__(self, path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except FileNotFoundError:
            return {}
        except ValueError:
            logger.warning('Session file %s is corrupt; starting empty', self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + '.tmp')
        tmp.write_text(json.dumps(data, ensure_ascii=False), encoding='utf-8')
        tmp.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = str(value)
        self._dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


class SessionStore:
    def __init__(self, storage: Storage):
        self.storage = storage

    def read(self) -> Tuple[Optional[str], Optional[str]]:
        """Raw ``(user snapshot, login flag)``, exactly as stored."""
        return self.storage.get_item(USER_KEY), self.storage.get_item(LOGGED_IN_KEY)

    def read_token(self) -> Optional[str]:
        return self.storage.get_item(TOKEN_KEY) or None

    def save(self, user_payload: dict, token: Optional[str] = None) -> None:
        self.storage.set_item(USER_KEY, json.dumps(user_payload, ensure_ascii=False))
        self.storage.set_item(LOGGED_IN_KEY, 'true')
        if token:
            self.storage.set_item(TOKEN_KEY, token)
        else:
            self.storage.remove_item(TOKEN_KEY)

    def purge(self) -> None:
        self.storage.remove_item(USER_KEY)
        self.storage.remove_item(LOGGED_IN_KEY)
        self.storage.remove_item(TOKEN_KEY)
