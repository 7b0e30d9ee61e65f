import json
import logging

from catalog.models import ScrapeBundle
from catalog.storage.base import BaseStorage


class JsonStorage(BaseStorage):
    """Writes the bundle to a single JSON file, replacing previous content."""

    def __init__(self, filepath: str = "productos.json", indent: int = 2):
        self.filepath = filepath
        self.indent = indent
        self.logger = logging.getLogger("storage.json")

    @property
    def location(self) -> str:
        return self.filepath

    def save(self, bundle: ScrapeBundle) -> bool:
        try:
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(bundle.to_dict(), f, indent=self.indent, ensure_ascii=False)
            return True
        except (OSError, TypeError, ValueError) as e:
            self.logger.error("Could not write JSON file %s: %s", self.filepath, str(e))
            return False
