from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Mapping, Optional

from coursesphere.core.constants import COLLECTIONS
from coursesphere.core.logging import get_logger

logger = get_logger(__name__)


class UnknownCollection(KeyError):
    pass


class VersionConflict(Exception):
    def __init__(self, expected: Any, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(f"record version is {actual}, request carried {expected}")


class DuplicateId(Exception):
    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection}/{record_id} already exists")


class JsonDocumentRepository:
    """Collections of JSON records stored in a single document on disk.

    Every call reads the file and every write rewrites it, so edits made to
    the file by hand are picked up immediately.
    """

    def __init__(self, path: str | Path, collections: tuple[str, ...] = COLLECTIONS):
        self.path = Path(path)
        self.collections = collections
        self._lock = threading.Lock()

    # ---------- document ----------

    def read_document(self) -> dict[str, list[dict[str, Any]]]:
        if not self.path.exists():
            return {name: [] for name in self.collections}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        for name in self.collections:
            data.setdefault(name, [])
        return data

    def write_document(self, data: Mapping[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def _rows(self, data: dict, collection: str) -> list[dict[str, Any]]:
        if collection not in self.collections:
            raise UnknownCollection(collection)
        return data[collection]

    # ---------- queries ----------

    def list(self, collection: str, filters: Optional[Mapping[str, str]] = None) -> list[dict[str, Any]]:
        """Records whose fields equal every filter value (compared as strings)."""
        rows = self._rows(self.read_document(), collection)
        if not filters:
            return rows
        return [row for row in rows if _matches(row, filters)]

    def get(self, collection: str, record_id: str) -> Optional[dict[str, Any]]:
        rows = self._rows(self.read_document(), collection)
        return _find(rows, record_id)

    # ---------- writes ----------

    def create(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            data = self.read_document()
            rows = self._rows(data, collection)
            record = dict(record)
            if record.get("id") in (None, ""):
                record["id"] = _next_id(rows)
            else:
                record["id"] = str(record["id"])
                if _find(rows, record["id"]) is not None:
                    raise DuplicateId(collection, record["id"])
            rows.append(record)
            self.write_document(data)
        logger.info("record created", collection=collection, record_id=record["id"])
        return record

    def replace(self, collection: str, record_id: str, record: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Replace a record wholesale, keeping its id.

        When the stored record or the request carries a ``version``, a
        mismatch raises ``VersionConflict`` and a successful write bumps it.
        """
        with self._lock:
            data = self.read_document()
            rows = self._rows(data, collection)
            for index, row in enumerate(rows):
                if str(row.get("id")) != str(record_id):
                    continue
                stored_version = row.get("version")
                sent_version = record.get("version")
                if stored_version is not None and "version" in record and sent_version != stored_version:
                    raise VersionConflict(sent_version, stored_version)

                replacement = {**record, "id": row["id"]}
                if stored_version is not None or sent_version is not None:
                    replacement["version"] = (stored_version or sent_version or 0) + 1
                rows[index] = replacement
                self.write_document(data)
                return replacement
        return None

    def delete(self, collection: str, record_id: str) -> bool:
        with self._lock:
            data = self.read_document()
            rows = self._rows(data, collection)
            remaining = [row for row in rows if str(row.get("id")) != str(record_id)]
            if len(remaining) == len(rows):
                return False
            data[collection] = remaining
            self.write_document(data)
        logger.info("record deleted", collection=collection, record_id=str(record_id))
        return True


def _find(rows: list[dict[str, Any]], record_id: str) -> Optional[dict[str, Any]]:
    for row in rows:
        if str(row.get("id")) == str(record_id):
            return row
    return None


def _matches(row: Mapping[str, Any], filters: Mapping[str, str]) -> bool:
    for key, expected in filters.items():
        if key not in row or str(row[key]) != expected:
            return False
    return True


def _next_id(rows: list[dict[str, Any]]) -> str:
    numeric = [int(row["id"]) for row in rows if str(row.get("id", "")).isdigit()]
    return str(max(numeric, default=0) + 1)
