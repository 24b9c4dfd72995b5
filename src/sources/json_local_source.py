# src/sources/json_local_source.py — v1
"""JSON snapshot of menu items kept on disk as the offline fallback."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from menucache.core.errors import LocalSourceError
from menucache.core.models import MenuItem, PaginatedResult
from menucache.sources.base_local_source import BaseLocalSource

logger = logging.getLogger(__name__)


class MenuItemsSnapshot(BaseModel):
    """On-disk snapshot format."""

    saved_at: datetime
    items: list[MenuItem] = Field(default_factory=list)


class JsonLocalSource(BaseLocalSource):
    """Reads (and writes) a single JSON snapshot file."""

    def __init__(self, snapshot_path: Path | str) -> None:
        self._path = Path(snapshot_path).expanduser()

    async def get_menu_items(self, limit: int) -> PaginatedResult:
        """Return the first ``limit`` snapshot items as a final page."""
        snapshot = self._load()
        items = snapshot.items[:limit]
        logger.info(
            "Serving %d items from local snapshot saved at %s",
            len(items), snapshot.saved_at.isoformat(),
        )
        return PaginatedResult(
            items=items,
            next_cursor=None,
            has_more=False,
            total_count=len(items),
        )

    async def save_menu_items(self, items: list[MenuItem]) -> None:
        """Replace the snapshot with ``items``."""
        snapshot = MenuItemsSnapshot(saved_at=datetime.now(timezone.utc), items=items)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(snapshot.model_dump_json(), encoding="utf-8")
        tmp.replace(self._path)
        logger.debug("Saved %d items to %s", len(items), self._path)

    def _load(self) -> MenuItemsSnapshot:
        if not self._path.exists():
            raise LocalSourceError(f"No local snapshot at {self._path}")
        try:
            return MenuItemsSnapshot.model_validate_json(
                self._path.read_text(encoding="utf-8")
            )
        except (OSError, ValidationError) as e:
            raise LocalSourceError(f"Unreadable local snapshot {self._path}: {e}") from e
