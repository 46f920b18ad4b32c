"""
Typed records passed between the pipeline and its callers.

* :mod:`blog_importer.models.records` – output records of a page transform
* :mod:`blog_importer.models.context` – import settings and per-page context
"""

from .context import ImportContext, ImporterConfig
from .records import AssetRecord, ContentRecord

__all__ = ["AssetRecord", "ContentRecord", "ImportContext", "ImporterConfig"]
