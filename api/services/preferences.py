"""
User preferences: the profile name chosen for each role and the last
selected export format.

Preferences are a convenience. Losing them must never stop a user from
getting credentials, so PreferenceStore turns every backend failure into
"no preference".
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Protocol

from api.services.exceptions import PreferenceStoreError
from api.services.exports import EXPORT_FORMATS


logger = logging.getLogger(__name__)

FORMAT_SELECTION_KEY = "envvar/tab/selected"


class KeyValueStore(Protocol):
    """String key-value storage that survives the process."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Key-value storage held in memory, for tests and one-off runs."""

    def __init__(self, initial: Dict[str, str] | None = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStore:
    """Key-value storage in a JSON file readable only by its owner."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PreferenceStoreError(f"Could not read preferences from {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PreferenceStoreError(f"Preferences file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write beside the target and swap it in, so a failed write leaves the old file intact
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.path.parent, prefix=f".{self.path.name}.", delete=False
            ) as f:
                tmp_path = Path(f.name)
                json.dump(data, f, indent=2)
            tmp_path.chmod(0o600)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise PreferenceStoreError(f"Could not write preferences to {self.path}: {e}") from e


class PreferenceStore:
    """Profile name and export format preferences on top of a KeyValueStore."""

    def __init__(self, backend: KeyValueStore):
        self.backend = backend

    def _get(self, key: str) -> str | None:
        try:
            return self.backend.get(key)
        except Exception as e:
            logger.warning(f"Ignoring unreadable preference {key}: {e}")
            return None

    def _set(self, key: str, value: str) -> None:
        try:
            self.backend.set(key, value)
        except Exception as e:
            logger.warning(f"Could not save preference {key}: {e}")

    def get_profile_name(self, key: str, fallback: str) -> str:
        """Get the profile name stored for a role, or fallback if there is none."""
        value = self._get(key)
        return value if value else fallback

    def set_profile_name(self, key: str, value: str) -> None:
        """Remember the profile name chosen for a role."""
        self._set(key, value)

    def get_last_format(self) -> str | None:
        """Get the last selected export format, or None if it is unknown."""
        value = self._get(FORMAT_SELECTION_KEY)
        if value is None:
            return None
        try:
            index = int(value)
        except ValueError:
            return None

        format_ids = list(EXPORT_FORMATS)
        if not 0 <= index < len(format_ids):
            return None
        return format_ids[index]

    def set_last_format(self, format_id: str) -> None:
        """Remember the selected export format."""
        format_ids = list(EXPORT_FORMATS)
        if format_id not in format_ids:
            logger.warning(f"Not saving unknown export format {format_id}")
            return
        self._set(FORMAT_SELECTION_KEY, str(format_ids.index(format_id)))
