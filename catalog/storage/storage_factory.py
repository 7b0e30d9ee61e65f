from typing import Dict, Type
from catalog.storage.base import BaseStorage
from catalog.storage.json_storage import JsonStorage
from catalog.storage.sqlite_storage import SqliteStorage

class StorageFactory:
    """Factory for creating the storage backend named in the settings."""

    STORAGES: Dict[str, Type[BaseStorage]] = {
        "json": JsonStorage,
        "sqlite": SqliteStorage,
    }

    @classmethod
    def create_storage(cls, storage_type: str, settings) -> BaseStorage:
        """Create and return a storage backend.

        Args:
            storage_type: "json" or "sqlite", case-insensitive
            settings: Application settings providing OUTPUT_FILE and DB_PATH

        Raises:
            ValueError: If the storage type is not supported
        """
        key = (storage_type or "").strip().lower()
        if key == "json":
            return JsonStorage(settings.OUTPUT_FILE)
        elif key == "sqlite":
            return SqliteStorage(settings.DB_PATH)

        supported = ", ".join(sorted(cls.STORAGES))
        raise ValueError(f"Unsupported storage type: '{storage_type}' (expected one of: {supported})")
