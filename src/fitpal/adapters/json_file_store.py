"""Key-value store persisted as a single JSON file."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from fitpal.services.key_value import KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores string values in one JSON object on disk.

    Every ``set`` rewrites the whole file through a temporary file and an
    atomic rename. An unreadable file is logged and treated as empty.
    """

    path: Path

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value and flush the file."""
        entries = self._load()
        entries[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            _logger.exception("Local store unreadable: %s", self.path)
            return {}
        if not isinstance(raw, dict):
            _logger.warning("Local store is not a JSON object: %s", self.path)
            return {}
        return {str(key): value for key, value in raw.items() if isinstance(value, str)}
