"""List params schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PageParam(BaseModel):
    """Page window in classic (`size`/`number`) or raw (`limit`/`offset`) style."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    number: int | None = Field(default=None, ge=1)
    size: int | None = Field(default=None, ge=1)
    offset: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def reject_mixed_styles(self) -> "PageParam":
        """Classic and raw keys never share one page param."""
        classic = self.size is not None or self.number is not None
        raw = self.limit is not None or self.offset is not None
        if classic and raw:
            raise ValueError("page params mix size/number with limit/offset")
        return self

    @property
    def per_page(self) -> int | None:
        """Page size for either style."""
        return self.size if self.size is not None else self.limit


class Params(BaseModel):
    """Normalized list params."""

    model_config = ConfigDict(frozen=True)

    page: PageParam | None = None
    sort: str | None = None
    filter: dict[str, Any] | None = None
