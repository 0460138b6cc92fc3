"""Key-value storage backends.

Both backends store opaque string values under string keys, mirroring a
device-local async storage. The trade store layers JSON on top of them.
"""

import json
import logging
import os
from typing import Dict, Optional

import duckdb

from .errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Interface shared by the storage backends."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> 'KeyValueStore':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class JsonFileStore(KeyValueStore):
    """Stores all keys in a single JSON object on disk."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading store {self.path}: {e}")
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Store {self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Error writing store {self.path}: {e}")
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class DuckDBStore(KeyValueStore):
    """Stores keys as rows of a DuckDB table."""

    def __init__(self, path: str = ':memory:'):
        self.path = path
        try:
            self.con = duckdb.connect(database=path)
            self.con.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key VARCHAR PRIMARY KEY,
                    value VARCHAR
                )
            """)
        except duckdb.Error as e:
            logger.error(f"Error opening DuckDB store {path}: {e}")
            raise StorageError(f"Cannot open {path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        try:
            row = self.con.execute("SELECT value FROM kv WHERE key = ?", [key]).fetchone()
        except duckdb.Error as e:
            logger.error(f"Error reading key {key}: {e}")
            raise StorageError(f"Cannot read {key}: {e}") from e
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        try:
            self.con.execute("INSERT OR REPLACE INTO kv VALUES (?, ?)", [key, value])
        except duckdb.Error as e:
            logger.error(f"Error writing key {key}: {e}")
            raise StorageError(f"Cannot write {key}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self.con.execute("DELETE FROM kv WHERE key = ?", [key])
        except duckdb.Error as e:
            logger.error(f"Error removing key {key}: {e}")
            raise StorageError(f"Cannot remove {key}: {e}") from e

    def close(self) -> None:
        self.con.close()
