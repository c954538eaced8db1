import json
import os
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.api.admins.schemas import AdminSession
from app.api.check_in.schemas import SessionData
from app.core.logger import logger

SESSION_KEY = 'attendance_session'
ADMIN_SESSION_KEY = 'admin_session'
REMINDER_KEY = 'checkout_reminder_enabled'

M = TypeVar('M', bound=BaseModel)


class KioskSession(SessionData):
    """Check-in session as kept on the kiosk, with the token the API issued."""

    token: str


class StoredAdminSession(AdminSession):
    access_token: str


class LocalStorage:
    """
    Flat string key/value store, persisted as one JSON file.

    With no path the values only live in memory.
    """

    def __init__(self, path: Optional[str] = None):
        self._path = Path(path) if path else None
        self._memory: Dict[str, str] = {}
        self._lock = Lock()

    def _read(self) -> Dict[str, str]:
        if self._path is None:
            return dict(self._memory)
        if not self._path.exists():
            return {}
        try:
            with open(self._path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error('Kiosk storage %s is corrupt, starting empty: %s', self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        if self._path is None:
            self._memory = data
            return
        tmp_path = self._path.with_suffix(self._path.suffix + '.tmp')
        with open(tmp_path, 'w') as f:
            json.dump(data, f)
        os.replace(tmp_path, self._path)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)


class SessionStore:
    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def _load(self, key: str, model: Type[M]) -> Optional[M]:
        raw = self.storage.get_item(key)
        if not raw:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            logger.error('Discarding unreadable %s: %s', key, e)
            return None

    def save_session(self, session: KioskSession) -> None:
        self.storage.set_item(SESSION_KEY, session.model_dump_json())

    def get_session(self) -> Optional[KioskSession]:
        return self._load(SESSION_KEY, KioskSession)

    def clear_session(self) -> None:
        self.storage.remove_item(SESSION_KEY)

    def save_admin_session(self, session: StoredAdminSession) -> None:
        self.storage.set_item(ADMIN_SESSION_KEY, session.model_dump_json())

    def get_admin_session(self) -> Optional[StoredAdminSession]:
        return self._load(ADMIN_SESSION_KEY, StoredAdminSession)

    def clear_admin_session(self) -> None:
        self.storage.remove_item(ADMIN_SESSION_KEY)

    def set_reminder_enabled(self, enabled: bool) -> None:
        if enabled:
            self.storage.set_item(REMINDER_KEY, 'true')
        else:
            self.storage.remove_item(REMINDER_KEY)

    def is_reminder_enabled(self) -> bool:
        return self.storage.get_item(REMINDER_KEY) == 'true'
