"""
Key-value persistence behind the ledger.

Every logical record lives in one slot, stored as JSON. ``MemoryStorage`` is
used by the test-suite; ``MySQLStorage`` keeps the slots in a single
``kv_store`` table through a mysql.connector pool.
"""

import copy
import json
import logging
from abc import ABC, abstractmethod

import mysql.connector

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The underlying storage medium could not complete the operation."""


class Storage(ABC):

    @abstractmethod
    def get(self, key):
        """Return the value stored under ``key`` or None."""

    @abstractmethod
    def set(self, key, value):
        """Replace the value stored under ``key``."""

    @abstractmethod
    def delete(self, key):
        """Remove ``key``; removing a missing key is a no-op."""


class MemoryStorage(Storage):

    def __init__(self, initial=None):
        self._slots = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key):
        # hand out copies so callers can't mutate what is "on disk"
        return copy.deepcopy(self._slots.get(key))

    def set(self, key, value):
        self._slots[key] = json.loads(json.dumps(value))

    def delete(self, key):
        self._slots.pop(key, None)

    def keys(self):
        return list(self._slots)


class MySQLStorage(Storage):

    def __init__(self, pool):
        self.pool = pool

    def get(self, key):
        try:
            conn = self.pool.get_connection()
            try:
                with conn.cursor(dictionary=True) as cur:
                    cur.execute("SELECT value FROM kv_store WHERE slot = %s", (key,))
                    row = cur.fetchone()
            finally:
                conn.close()
        except mysql.connector.Error as exc:
            logger.error("Reading slot %s failed: %s", key, exc)
            raise StorageError(f"could not read {key}") from exc
        return json.loads(row['value']) if row else None

    def set(self, key, value):
        payload = json.dumps(value)
        try:
            conn = self.pool.get_connection()
            try:
                with conn.cursor() as cur:
                    cur.execute(
                        "INSERT INTO kv_store (slot, value) VALUES (%s, %s) "
                        "ON DUPLICATE KEY UPDATE value = VALUES(value)",
                        (key, payload)
                    )
                    conn.commit()
            finally:
                conn.close()
        except mysql.connector.Error as exc:
            logger.error("Writing slot %s failed: %s", key, exc)
            raise StorageError(f"could not write {key}") from exc

    def delete(self, key):
        try:
            conn = self.pool.get_connection()
            try:
                with conn.cursor() as cur:
                    cur.execute("DELETE FROM kv_store WHERE slot = %s", (key,))
                    conn.commit()
            finally:
                conn.close()
        except mysql.connector.Error as exc:
            logger.error("Deleting slot %s failed: %s", key, exc)
            raise StorageError(f"could not delete {key}") from exc
