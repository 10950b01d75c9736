from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Optional

from buzz_browser.core.exceptions import SnapshotError
from buzz_browser.core.filter_state import FilterState
from buzz_browser.core.models import Category, Row, SheetInfo
from buzz_browser.core.store import COMMITTED_CHANGED, DataStore, StoreSnapshot
from buzz_browser.services.storage import StorageBackend
from buzz_browser.validation.errors import ValidationError
from buzz_browser.validation.snapshot_validation import validate_snapshot_dict

logger = logging.getLogger(__name__)

STORAGE_KEY = "sns-dashboard-storage"
SCHEMA_VERSION = 1

# Upgraders keyed by the version they upgrade FROM. Each returns a dict one
# version newer. Snapshots without a schema_version are treated as version 1.
MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {}


# -------------------------------------------------------------------------
# (De)serialisation
# -------------------------------------------------------------------------

def snapshot_to_dict(snapshot: StoreSnapshot) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "rawData": [r.to_dict() for r in snapshot.rows],
        "categories": [c.to_dict() for c in snapshot.categories],
        "sheetInfos": [s.to_dict() for s in snapshot.sheet_infos],
        "filters": snapshot.filters.to_dict(),
    }


def _migrate(data: Dict[str, Any]) -> Dict[str, Any]:
    version = data.get("schema_version", 1)
    if version > SCHEMA_VERSION:
        raise SnapshotError(f"Snapshot schema_version {version} is newer than supported {SCHEMA_VERSION}")
    while version < SCHEMA_VERSION:
        upgrade = MIGRATIONS.get(version)
        if upgrade is None:
            raise SnapshotError(f"No migration from schema_version {version}")
        data = upgrade(data)
        version += 1
    return data


def snapshot_from_dict(data: Any) -> StoreSnapshot:
    """
    Rebuild a StoreSnapshot from a dict produced by snapshot_to_dict.
    Raises SnapshotError if the dict fails shape validation or conversion.
    """
    try:
        validate_snapshot_dict(data)
        data = _migrate(data)
        return StoreSnapshot(
            rows=tuple(Row.from_dict(r) for r in data.get("rawData", [])),
            categories=tuple(Category.from_dict(c) for c in data.get("categories", [])),
            sheet_infos=tuple(SheetInfo.from_dict(s) for s in data.get("sheetInfos", [])),
            filters=FilterState.from_dict(data.get("filters") or {}),
        )
    except ValidationError as e:
        raise SnapshotError(str(e)) from e
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise SnapshotError(f"Snapshot conversion failed: {e}") from e


def dumps_snapshot(snapshot: StoreSnapshot) -> bytes:
    return json.dumps(snapshot_to_dict(snapshot), ensure_ascii=False).encode("utf-8")


def loads_snapshot(payload: bytes) -> StoreSnapshot:
    try:
        data = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    return snapshot_from_dict(data)


# -------------------------------------------------------------------------
# Adapter
# -------------------------------------------------------------------------

class PersistenceAdapter:
    """
    Saves the committed store state under a single storage key and restores
    it on startup. The pending draft is never written.
    """

    def __init__(self, storage: StorageBackend, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def save(self, store: DataStore) -> None:
        """Write the current committed state. Failures are logged, not raised."""
        try:
            self.storage.write_bytes(self.key, dumps_snapshot(store.snapshot()))
        except Exception:
            logger.exception("Failed to persist store under %s", self.key)

    def load(self) -> Optional[StoreSnapshot]:
        """Return the stored snapshot, or None if absent or unusable."""
        if not self.storage.exists(self.key):
            return None
        try:
            return loads_snapshot(self.storage.read_bytes(self.key))
        except SnapshotError as e:
            logger.warning("Discarding persisted snapshot %s: %s", self.key, e)
            return None
        except Exception:
            logger.exception("Failed to read persisted snapshot %s", self.key)
            return None

    def restore_into(self, store: DataStore) -> bool:
        """
        Restore the persisted snapshot into `store`.
        Falls back to an empty dataset with default filters when nothing usable is stored.
        """
        snapshot = self.load()
        if snapshot is None:
            store.restore(StoreSnapshot())
            return False
        store.restore(snapshot)
        logger.info(
            "Restored %d rows and %d categories from %s",
            len(snapshot.rows), len(snapshot.categories), self.key,
        )
        return True

    def attach(self, store: DataStore) -> Callable[[], None]:
        """Save on every committed change. Returns the unsubscribe callable."""
        return store.subscribe(COMMITTED_CHANGED, self.save)

    def clear(self) -> None:
        self.storage.delete(self.key)
