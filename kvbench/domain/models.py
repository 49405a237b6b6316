"""
Domain models for KV Throughput Bench.

`Entry` is the only record the Store contract hands back to callers: one
key/value pair produced by a paginated scan.
"""
from __future__ import annotations

from pydantic import BaseModel, Field


class Entry(BaseModel):
    """
    A single key/value pair returned by `Store.scan_page`.
    """

    key: str = Field(..., description="Key the value is stored under.")
    value: str = Field(..., description="Stored value.")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": False,
    }

    @classmethod
    def of(cls, key: str, value: str) -> "Entry":
        return cls(key=key, value=value)


__all__ = ["Entry"]
