# services/cart_storage.py

import os
import re
from pathlib import Path
from typing import Dict, Optional

CART_STORAGE_KEY = "franchise_cart"


def user_cart_key(user_id: str) -> str:
    """Storage key of one user's cart; the id is reduced to filename-safe characters."""
    return f"{CART_STORAGE_KEY}_{re.sub(r'[^A-Za-z0-9_-]', '_', user_id)}"


class MemoryCartStorage:
    """Keeps the serialized cart in a dict, for tests and throwaway sessions."""

    def __init__(self, key: str = CART_STORAGE_KEY, slots: Optional[Dict[str, str]] = None):
        self.key = key
        self.slots = slots if slots is not None else {}

    def read(self) -> Optional[str]:
        return self.slots.get(self.key)

    def write(self, data: str) -> None:
        self.slots[self.key] = data

    def purge(self) -> None:
        self.slots.pop(self.key, None)


class JsonFileCartStorage:
    """
    One JSON file per key under `directory`. Writes go through a temp file
    and os.replace so a crash mid-write never leaves half a cart behind.
    """

    def __init__(self, directory: str, key: str = CART_STORAGE_KEY):
        self.key = key
        self.directory = Path(directory)
        self.path = self.directory / f"{key}.json"

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write(self, data: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".json.tmp")
        tmp.write_text(data, encoding="utf-8")
        os.replace(tmp, self.path)

    def purge(self) -> None:
        self.path.unlink(missing_ok=True)


def storage_for_user(directory: str, user_id: Optional[str]):
    """
    Signed-in users get their own cart file under `directory`. Anonymous
    sessions keep their cart in memory, so nothing is shared between them.
    """
    if not user_id:
        return MemoryCartStorage()
    return JsonFileCartStorage(directory, key=user_cart_key(user_id))
