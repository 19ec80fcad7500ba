# minimarket/services/cart_slot.py
"""
Durable cart slots.

A slot keeps one serialized cart between sessions. Durability is
best-effort: every failure is logged and swallowed, and `load` reports
a failed read as "nothing stored". The in-memory cart stays correct
either way.
"""

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class CartSlot(Protocol):
    def save(self, serialized: str) -> None: ...

    def load(self) -> str | None: ...

    def clear(self) -> None: ...


class MemoryCartSlot:
    """Slot that lives as long as the object; used for server-side checkout and tests."""

    def __init__(self, initial: str | None = None):
        self._value = initial

    def save(self, serialized: str) -> None:
        self._value = serialized

    def load(self) -> str | None:
        return self._value

    def clear(self) -> None:
        self._value = None


class FileCartSlot:
    """
    One JSON file per shopper.

    Example:
        FileCartSlot(Path(".carts") / "hami-minimarket-cart.json")
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def save(self, serialized: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(serialized, encoding="utf-8")
        except OSError as e:
            logger.error("Error saving cart to %s: %s", self.path, e)

    def load(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Error loading cart from %s: %s", self.path, e)
            return None

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Error clearing cart at %s: %s", self.path, e)


def slot_for(base_dir: str | Path, key: str, identity_id: str | None = None) -> FileCartSlot:
    """
    Build the file slot for a shopper: `<base_dir>/<key>.json` for guests,
    `<base_dir>/<key>-<identity_id>.json` once logged in.
    """
    name = key if identity_id is None else f"{key}-{identity_id}"
    return FileCartSlot(Path(base_dir) / f"{name}.json")
