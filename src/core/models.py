# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


# === MENU ITEMS ===


class MenuItem(BaseModel):
    """A single menu item row as served by the backend.

    Columns the client does not model explicitly (variants, supplements,
    nutrition, offers...) are kept as extra fields so cached pages round-trip
    without loss.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    restaurant_id: str
    restaurant_name: str | None = None
    name: str
    description: str = ""
    image: str = ""
    price: float
    category: str = ""
    cuisine_type_id: str | None = None
    category_id: str | None = None
    is_available: bool = True
    is_featured: bool = False
    preparation_time: int = 15
    rating: float = 0.0
    review_count: int = 0
    created_at: datetime
    updated_at: datetime | None = None


class PriceRange(BaseModel):
    """Inclusive price filter bounds."""

    model_config = ConfigDict(frozen=True)

    start: float = Field(ge=0)
    end: float = Field(ge=0)

    @model_validator(mode="after")
    def validate_bounds(self) -> PriceRange:
        if self.start > self.end:
            raise ValueError(
                f"price range start ({self.start}) must be <= end ({self.end})"
            )
        return self


# === PAGINATION ===


class PaginatedResult(BaseModel):
    """One page of menu items plus the cursor for the next page.

    ``next_cursor`` is None when the result set is exhausted.
    """

    items: list[MenuItem] = Field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False
    total_count: int = 0
