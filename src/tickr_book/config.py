"""Configuration management for Tickr Book."""

import os
from typing import Dict, Optional

from .storage import DuckDBStore, JsonFileStore, KeyValueStore


def get_backend_defaults(backend: str) -> Optional[Dict[str, str]]:
    """Get default store path for a storage backend."""
    defaults = {
        'json': {
            'path': os.getenv('TICKR_BOOK_PATH', 'tickr_book.json'),
        },
        'duckdb': {
            'path': os.getenv('TICKR_BOOK_PATH', 'tickr_book.duckdb'),
        },
    }
    return defaults.get(backend.lower())


def get_backend() -> str:
    return os.getenv('TICKR_BOOK_BACKEND', 'json')


def open_store(backend: str, path: Optional[str] = None) -> KeyValueStore:
    """Open the key-value store for a backend, at ``path`` or its default location."""
    backend_config = get_backend_defaults(backend)
    if not backend_config:
        raise ValueError(f"Invalid backend: {backend}")
    path = path or backend_config['path']
    if backend.lower() == 'duckdb':
        return DuckDBStore(path)
    return JsonFileStore(path)
