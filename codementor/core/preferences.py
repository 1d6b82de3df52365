"""
CodeMentor - Preference Store
Mirrors the editor state (code, language, mode) to durable key-value storage
so a restarted session picks up where the user left off.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from codementor.core.errors import StorageError, StorageQuotaExceeded
from codementor.core.templates import DEFAULT_LANGUAGE, get_template
from codementor.models import AnalysisMode, PersistedSession, SupportedLanguage

logger = logging.getLogger(__name__)


CODE_KEY = "codementor_saved_code"
LANG_KEY = "codementor_saved_lang"
MODE_KEY = "codementor_saved_mode"

DEFAULT_MODE = AnalysisMode.EXPLAIN

QUOTA_MESSAGE = "Local storage is full."
WRITE_FAILED_MESSAGE = "Failed to save locally."


# ============================================================================
# Storage Backends
# ============================================================================

class KeyValueStorage:
    """String slots with get/set semantics. ``set`` raises StorageError on failure."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    """In-process storage with an optional byte quota."""

    def __init__(self, initial: Optional[Dict[str, str]] = None, quota: Optional[int] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self.quota = quota

    def _size_with(self, key: str, value: str) -> int:
        data = dict(self._data)
        data[key] = value
        return sum(len(k.encode()) + len(v.encode()) for k, v in data.items())

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota is not None:
            size = self._size_with(key, value)
            if size > self.quota:
                raise StorageQuotaExceeded(self.quota, size)
        self._data[key] = value

    def snapshot(self) -> Dict[str, str]:
        """Copy of every stored slot."""
        return dict(self._data)


class JsonFileStorage(KeyValueStorage):
    """
    All slots in one JSON document on disk.
    An unreadable or corrupt file is treated as empty.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: not a JSON object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        data = dict(self._data)
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".prefs-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        self._data = data


# ============================================================================
# Preference Store
# ============================================================================

class PreferenceStore:
    """Reads and writes the persisted session through a storage handle."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def load(self) -> PersistedSession:
        """Read the saved session, falling back to defaults field by field."""
        language = self._read_enum(LANG_KEY, SupportedLanguage, DEFAULT_LANGUAGE)
        mode = self._read_enum(MODE_KEY, AnalysisMode, DEFAULT_MODE)
        code = self.storage.get(CODE_KEY)
        if code is None:
            code = get_template(language)
        return PersistedSession(code=code, language=language, mode=mode)

    def _read_enum(self, key, enum_type, default):
        raw = self.storage.get(key)
        if raw is None:
            return default
        try:
            return enum_type(raw)
        except ValueError:
            logger.warning("Ignoring invalid saved value for %s: %r", key, raw)
            return default

    def save(self, session: PersistedSession) -> Optional[str]:
        """
        Write all three fields.
        Returns an advisory message when storage fails, otherwise None.
        """
        try:
            self.storage.set(CODE_KEY, session.code)
            self.storage.set(LANG_KEY, session.language.value)
            self.storage.set(MODE_KEY, session.mode.value)
        except StorageQuotaExceeded as e:
            logger.warning("Preference write rejected: %s", e)
            return QUOTA_MESSAGE
        except StorageError as e:
            logger.warning("Preference write failed: %s", e)
            return WRITE_FAILED_MESSAGE
        return None
