"""
Utility helpers used by the importer.

This subpackage exposes convenience functions for structured logging, path
derivation, legacy link rewriting and path map generation.
"""

from .errors import ERRORS, log_message, report_error, report_ok
from .paths import derive_document_path, rewrite_blog_href
from .redirects import generate_path_map_csv

__all__ = [
    "ERRORS",
    "log_message",
    "report_error",
    "report_ok",
    "derive_document_path",
    "rewrite_blog_href",
    "generate_path_map_csv",
]
