from __future__ import annotations

from typing import Any, Dict

from bs4 import Tag
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentRecord(BaseModel):
    """The transformed page body and the document path it is stored at."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: Tag
    path: str = Field(..., min_length=1)

    @field_validator("path")
    @classmethod
    def _absolute_path(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"


class AssetRecord(BaseModel):
    """An image to copy from ``source`` to ``path``."""

    model_config = ConfigDict(str_strip_whitespace=True)

    source: str = Field(..., min_length=1)
    path: str

    def to_report(self) -> Dict[str, Any]:
        return {"source": self.source, "path": self.path}
