"""String-keyed persistence backends for the inventory store.

Both backends expose ``get(key)`` returning the stored text or ``None`` and
``set(key, value)`` overwriting the entry. The SQL backend keeps one row per
key in ``kv_entries``.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from smartstock.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class MemoryKeyValueStore:
    def __init__(self, initial=None):
        self._entries = dict(initial or {})

    def get(self, key):
        return self._entries.get(key)

    def set(self, key, value):
        self._entries[key] = value

    def set_many(self, values):
        self._entries.update(values)

    def keys(self):
        return sorted(self._entries)


class SqlKeyValueStore:
    def __init__(self, session_factory):
        self._session_factory = session_factory

    def get(self, key):
        db = self._session_factory()
        try:
            entry = db.execute(
                select(KeyValueEntry).where(KeyValueEntry.key == key)
            ).scalar_one_or_none()
            return entry.value if entry is not None else None
        finally:
            db.close()

    def set(self, key, value):
        self.set_many({key: value})

    def set_many(self, values):
        db = self._session_factory()
        try:
            for key, value in values.items():
                entry = db.get(KeyValueEntry, key)
                if entry is None:
                    db.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to write %d key-value entries", len(values))
            raise
        finally:
            db.close()

    def keys(self):
        db = self._session_factory()
        try:
            return list(db.execute(select(KeyValueEntry.key).order_by(KeyValueEntry.key)).scalars())
        finally:
            db.close()


__all__ = ["MemoryKeyValueStore", "SqlKeyValueStore"]
