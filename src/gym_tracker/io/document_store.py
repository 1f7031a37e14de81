"""
JSON-based storage for the tracker document.

The whole document lives in one slot: a JSON file holding a single key,
``{"gym-tracker-data": {...}}``. Every state transition is written through
immediately; writes go to a temporary file that then replaces the target,
so a reader sees either the previous or the new document, never a mix.
"""

import json
import os
import tempfile
from pathlib import Path

from ..core.config import APP_DIR_NAME, STORAGE_KEY
from ..core.hierarchy import sweep_orphans
from ..core.models import TrackerDocument
from .serializers import ValidationError, dict_to_document, document_to_dict


class DocumentStore:
    """
    Manages the tracker document stored as a single JSON slot.

    Reading never raises for missing or corrupt data: ``load`` falls back to
    a caller-supplied default.
    """

    def __init__(self, data_path: str | Path, storage_key: str = STORAGE_KEY):
        """
        Initialize the document store.

        Args:
            data_path: Path to the JSON data file
            storage_key: Key of the slot inside the file
        """
        self.data_path = Path(data_path)
        self.storage_key = storage_key

    @property
    def data_dir(self) -> Path:
        """Directory holding the data file and settings.yaml."""
        return self.data_path.parent

    def exists(self) -> bool:
        """Check if the data file exists."""
        return self.data_path.exists()

    def read(self) -> dict | None:
        """
        Read the raw document stored under the storage key.

        Returns:
            The stored dict, or None when the file or slot is absent or the
            file is not valid JSON
        """
        if not self.data_path.exists():
            return None
        try:
            with open(self.data_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None
        slot = data.get(self.storage_key)
        return slot if isinstance(slot, dict) else None

    def load(self, default: TrackerDocument) -> TrackerDocument:
        """
        Load the tracker document.

        Orphaned series and exercises left by older versions are swept.

        Args:
            default: Returned when nothing valid is stored

        Returns:
            Stored document, or ``default``
        """
        raw = self.read()
        if raw is None:
            return default
        try:
            return sweep_orphans(dict_to_document(raw))
        except ValidationError:
            return default

    def save(self, doc: TrackerDocument) -> None:
        """
        Write the document, replacing the previous one atomically.

        Creates parent directories if needed.

        Args:
            doc: Document to persist
        """
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {self.storage_key: document_to_dict(doc)}

        fd, tmp_name = tempfile.mkstemp(
            dir=self.data_path.parent, prefix=f".{self.data_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.data_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def get_default_data_path() -> Path:
    """
    Get the default data file path.

    Returns:
        ``~/.gym-tracker/gym-tracker-data.json``
    """
    return Path.home() / APP_DIR_NAME / f"{STORAGE_KEY}.json"
