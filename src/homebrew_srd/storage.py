"""
Storage layer for homebrew content.
Persists each content collection to its own JSON file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import ContentType, HomebrewRecord, utc_now_iso
from .srd import is_srd_compliant

logger = logging.getLogger("homebrew-srd")


class HomebrewStorageError(Exception):
    """Base error for storage operations."""


class UnknownCollectionError(HomebrewStorageError):
    """Raised for a collection name that isn't a known ContentType."""


class RecordNotFoundError(HomebrewStorageError):
    """Raised when no record with the requested id exists."""


class InvalidRecordError(HomebrewStorageError):
    """Raised when record data can't be parsed into a HomebrewRecord."""


def resolve_collection(collection: str | ContentType) -> ContentType:
    """Map a collection name to its ContentType.

    Raises:
        UnknownCollectionError: If the name isn't a known collection
    """
    if isinstance(collection, ContentType):
        return collection
    try:
        return ContentType(str(collection).lower().strip())
    except ValueError:
        valid = ", ".join(c.value for c in ContentType)
        raise UnknownCollectionError(
            f"Unknown collection '{collection}'. Valid collections: {valid}"
        ) from None


def format_storage_size(size_kb: float) -> str:
    """Format a size in KB as "<n> KB" or "<n> MB", rounded to two decimals.

    Example:
        >>> format_storage_size(512)
        '512 KB'
        >>> format_storage_size(2048)
        '2 MB'
    """
    if size_kb < 1024:
        value, unit = round(size_kb, 2), "KB"
    else:
        value, unit = round(size_kb / 1024, 2), "MB"
    if value == int(value):
        value = int(value)
    return f"{value} {unit}"


class HomebrewStorage:
    """Handles storage and retrieval of homebrew content collections.

    Every collection is a JSON list in ``<data_dir>/<collection>.json``.
    Records are validated for SRD compliance whenever they are written, and
    the verdict is stored on the record as ``isSrdCompliant``.
    """

    def __init__(self, data_dir: str | Path = "homebrew_data"):
        self.data_dir = Path(data_dir)
        logger.debug(f"📂 Initializing HomebrewStorage with data_dir: {self.data_dir.resolve()}")
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    # ------------------------------------------------------------------
    # Raw JSON persistence
    # ------------------------------------------------------------------

    def save_json(self, key: str, data: Any) -> bool:
        """Serialise data to the JSON file for key.

        Failures are logged, not raised.

        Returns:
            True if the data was written
        """
        try:
            serialized = json.dumps(data, indent=2, ensure_ascii=False)
            self._path(key).write_text(serialized, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"❌ Error saving data (key: {key}): {e}")
            return False
        return True

    def load_json(self, key: str, default: Any = None) -> Any:
        """Load the JSON file for key, or return default if it's missing or unreadable."""
        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"❌ Error loading data (key: {key}): {e}")
            return default

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def _load_collection(self, content_type: ContentType) -> list[dict[str, Any]]:
        records = self.load_json(content_type.value, default=[])
        if not isinstance(records, list):
            logger.warning(f"⚠️ Collection '{content_type.value}' is not a list, ignoring stored data")
            return []
        return [r for r in records if isinstance(r, dict)]

    def _save_collection(self, content_type: ContentType, records: list[dict[str, Any]]) -> None:
        self.save_json(content_type.value, records)

    def _prepare(self, content_type: ContentType, data: dict[str, Any]) -> dict[str, Any]:
        """Parse data into a HomebrewRecord and stamp its compliance verdict."""
        try:
            record = HomebrewRecord.model_validate(data)
        except ValidationError as e:
            raise InvalidRecordError(f"Invalid {content_type.tag} record: {e}") from e
        stored = record.to_record()
        stored["isSrdCompliant"] = is_srd_compliant(stored, content_type.tag)
        return stored

    def list(self, collection: str | ContentType) -> list[dict[str, Any]]:
        """Return all records in a collection."""
        return self._load_collection(resolve_collection(collection))

    def get(self, collection: str | ContentType, record_id: str) -> dict[str, Any]:
        """Return one record by id.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        content_type = resolve_collection(collection)
        for record in self._load_collection(content_type):
            if record.get("id") == record_id:
                return record
        raise RecordNotFoundError(f"No {content_type.tag} with id '{record_id}'")

    def add(self, collection: str | ContentType, data: dict[str, Any]) -> dict[str, Any]:
        """Create a record, assigning id and timestamps, and persist it."""
        content_type = resolve_collection(collection)
        now = utc_now_iso()
        data = {k: v for k, v in data.items() if k not in ("id", "createdAt", "updatedAt")}
        record = self._prepare(content_type, {**data, "createdAt": now, "updatedAt": now})

        records = self._load_collection(content_type)
        records.append(record)
        self._save_collection(content_type, records)
        logger.debug(f"✨ Added {content_type.tag} '{record['name']}' ({record['id']})")
        return record

    def update(self, collection: str | ContentType, record_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply changes to an existing record and re-validate it.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        content_type = resolve_collection(collection)
        records = self._load_collection(content_type)

        for index, existing in enumerate(records):
            if existing.get("id") == record_id:
                now = utc_now_iso()
                merged = {
                    **existing,
                    **changes,
                    "id": record_id,
                    "createdAt": existing.get("createdAt") or now,
                    "updatedAt": now,
                }
                record = self._prepare(content_type, merged)
                records[index] = record
                self._save_collection(content_type, records)
                logger.debug(f"📝 Updated {content_type.tag} '{record['name']}' ({record_id})")
                return record

        raise RecordNotFoundError(f"No {content_type.tag} with id '{record_id}'")

    def delete(self, collection: str | ContentType, record_id: str) -> dict[str, Any]:
        """Remove a record and return it.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        content_type = resolve_collection(collection)
        records = self._load_collection(content_type)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            raise RecordNotFoundError(f"No {content_type.tag} with id '{record_id}'")

        self._save_collection(content_type, remaining)
        removed = next(r for r in records if r.get("id") == record_id)
        logger.debug(f"🗑️ Deleted {content_type.tag} ({record_id})")
        return removed

    def import_records(self, collection: str | ContentType, records: list[dict[str, Any]] | None) -> int:
        """Replace a whole collection, e.g. from a JSON export.

        Passing None leaves the collection untouched.

        Returns:
            Number of records now stored in the collection
        """
        content_type = resolve_collection(collection)
        if records is None:
            return len(self._load_collection(content_type))

        prepared = [self._prepare(content_type, dict(r)) for r in records]
        self._save_collection(content_type, prepared)
        logger.debug(f"📥 Imported {len(prepared)} {content_type.value}")
        return len(prepared)

    def all_records(self) -> dict[str, list[dict[str, Any]]]:
        """Return every non-empty collection keyed by collection name."""
        result = {}
        for content_type in ContentType:
            records = self._load_collection(content_type)
            if records:
                result[content_type.value] = records
        return result

    def storage_size_kb(self) -> float:
        """Approximate size of all stored collections in KB (two bytes per character)."""
        total = 0.0
        for path in self.data_dir.glob("*.json"):
            try:
                total += len(path.read_text(encoding="utf-8")) * 2 / 1024
            except OSError as e:
                logger.error(f"❌ Error reading {path.name}: {e}")
        return total
