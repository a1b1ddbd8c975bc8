from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ListingPage(BaseModel):
    rows: list[dict[str, Any]] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    total: int = Field(default=0, ge=0)
    total_pages: int = Field(default=1, ge=1)


class CollectionStats(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    total: int = 0
    unseen: int | None = None
    by_status: dict[str, int] = Field(default_factory=dict, alias="byStatus")
    by_course: dict[str, int] = Field(default_factory=dict, alias="byCourse")
