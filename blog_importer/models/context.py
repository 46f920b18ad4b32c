from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_EDGE_URL = "https://main--blog--splunk-wm.aem.page"
DEFAULT_PUBLISHED_HOST = "https://www.splunk.com"


class ImporterConfig(BaseModel):
    """Settings shared by every page of an import run."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    locale: str = "en-us"
    edge_url: str = DEFAULT_EDGE_URL
    published_host: str = DEFAULT_PUBLISHED_HOST
    author_article_limit: int = Field(9, ge=1)
    wait_for_selector: Optional[str] = None
    wait_timeout: float = Field(10.0, gt=0)
    wait_interval: float = Field(0.1, gt=0)

    @field_validator("edge_url", "published_host")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ImportContext(BaseModel):
    """
    Per-page state filled by a template's preprocess hook and read by stages.

    One context is created for each page transform and dropped with it.
    """

    url: str
    original_url: Optional[str] = None
    html: Optional[str] = None
    config: ImporterConfig = Field(default_factory=ImporterConfig)
    page_meta: Dict[str, Any] = Field(default_factory=dict)
    social_urls: List[str] = Field(default_factory=list)
    new_page: Optional[str] = None

    @property
    def base_url(self) -> str:
        """URL used to resolve relative references found in the page."""
        return self.original_url or self.url
