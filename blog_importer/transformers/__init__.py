"""
Transforms turning a legacy blog page into a block document.

This subpackage exposes :func:`transform_page` and :func:`run_pipeline` from
:mod:`blog_importer.transformers.pipeline`, the block builders and the two
page-level errors a transform may raise.
"""

from .blocks import build_table, metadata_block
from .dom_utils import ImportTimeoutError, MalformedBlockError
from .pipeline import run_pipeline, transform_page
from .templates import TEMPLATES, get_template

__all__ = [
    "build_table",
    "metadata_block",
    "ImportTimeoutError",
    "MalformedBlockError",
    "run_pipeline",
    "transform_page",
    "TEMPLATES",
    "get_template",
]
