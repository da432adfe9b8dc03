"""
File-backed data store that persists across process restarts.
Replaces Firestore with a JSON-file-backed dict store.
Used when no Firebase credentials are found.
"""

import json
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from app.utils.logger import get_logger

logger = get_logger(__name__)


def _json_serial(obj):
    """JSON serializer for objects not serializable by default."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Type {type(obj)} not serializable")


class LocalStore:
    """File-backed data store that mimics Firestore operations."""

    def __init__(self, data_dir: str = "data"):
        self.collections: dict[str, dict[str, dict]] = {}
        self._lock = threading.Lock()

        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)

        self._load_data()

    def _load_data(self):
        """Load every <collection>.json file in the data dir."""
        for path in sorted(self._data_dir.glob("*.json")):
            with open(path) as f:
                items = json.load(f)
            self.collections[path.stem] = {
                item.get("id", str(uuid.uuid4())): item for item in items
            }
            logger.info("Loaded %d documents into '%s'", len(items), path.stem)

    def _persist(self, name: str):
        """Write a collection to disk as JSON."""
        path = self._data_dir / f"{name}.json"
        tmp_path = path.with_suffix(".json.tmp")
        with self._lock:
            items = list(self.collections.get(name, {}).values())
            with open(tmp_path, "w") as f:
                json.dump(items, f, indent=2, default=_json_serial)
            tmp_path.replace(path)

    def collection(self, name: str) -> "CollectionRef":
        if name not in self.collections:
            self.collections[name] = {}
        return CollectionRef(self, name)


class CollectionRef:
    """Mimics Firestore collection reference."""

    def __init__(self, store: LocalStore, name: str):
        self._store = store
        self._data = store.collections[name]
        self._name = name

    def document(self, doc_id: Optional[str] = None) -> "DocumentRef":
        return DocumentRef(self._store, self._data, self._name, doc_id or str(uuid.uuid4()))

    def get(self) -> list["DocumentSnapshot"]:
        return [DocumentSnapshot(doc_id, doc) for doc_id, doc in list(self._data.items())]


class DocumentRef:
    """Mimics Firestore document reference."""

    def __init__(self, store: LocalStore, collection_data: dict, collection_name: str, doc_id: str):
        self._store = store
        self._data = collection_data
        self._name = collection_name
        self._id = doc_id

    @property
    def id(self):
        return self._id

    def get(self) -> "DocumentSnapshot":
        return DocumentSnapshot(self._id, self._data.get(self._id))

    def set(self, data: dict):
        previous = self._data.get(self._id)
        self._data[self._id] = dict(data, id=self._id)
        try:
            self._store._persist(self._name)
        except (OSError, TypeError):
            # Keep memory and disk consistent when the write fails
            if previous is None:
                self._data.pop(self._id, None)
            else:
                self._data[self._id] = previous
            raise


class DocumentSnapshot:
    """Mimics Firestore document snapshot."""

    def __init__(self, doc_id: str, data: Optional[dict]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict]:
        return dict(self._data) if self._data is not None else None


# ── Singleton ────────────────────────────────────────────────────

_local_store: Optional[LocalStore] = None


def get_local_store(data_dir: str = "data") -> LocalStore:
    """Get or create the singleton LocalStore instance."""
    global _local_store
    if _local_store is None:
        _local_store = LocalStore(data_dir)
    return _local_store
