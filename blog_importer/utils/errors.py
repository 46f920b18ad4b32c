"""
Structured logging helpers for page import errors and successes.

The :mod:`blog_importer.utils.errors` module centralizes the writing of log
entries for both failed and successful page imports.  Each entry is appended
to a JSON Lines file under ``reports/import`` so that the information can be
reviewed or parsed after a run.

Three public functions are provided:

``report_error``
    Record an error that occurred for a page.  An optional exception can be
    supplied and will be serialized to the log.

``report_ok``
    Record a successful step for a page.  Additional key/value information can
    be attached to the entry via the ``extra`` parameter.

``log_message``
    Print a ``[LEVEL] message`` line and append it to the plain text run log.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

# Mapping of event codes used throughout the import to descriptive messages.
# The keys include both error and success codes as the same lookup is used by
# :func:`report_error` and :func:`report_ok`.
ERRORS: Dict[str, str] = {
    "FETCH": "Failed to fetch page HTML",
    "TIMEOUT": "Timed out waiting for page content",
    "MALFORMED": "Page content did not have the expected structure",
    "META_JSON": "Embedded page metadata could not be parsed",
    "TRANSFORM": "Unexpected error while transforming page",
    "ASSET_DOWNLOAD": "Failed to download image asset",
    "WRITE": "Failed to write transformed document",
    "IMPORTED": "Page imported successfully",
}

_REPORT_DIR = os.path.join("reports", "import")
_ERROR_LOG = os.path.join(_REPORT_DIR, "errors.jsonl")
_OK_LOG = os.path.join(_REPORT_DIR, "success.jsonl")
_RUN_LOG = os.path.join(_REPORT_DIR, "import.log")


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def log_message(message: str, level: str = "INFO") -> None:
    print(f"[{level}] {message}")
    os.makedirs(os.path.dirname(_RUN_LOG), exist_ok=True)
    with open(_RUN_LOG, "a", encoding="utf-8") as f:
        f.write(f"{level}: {message}\n")


def report_error(code: str, page: Dict[str, Any], exc: Optional[Exception] = None) -> None:
    """Log an error event for ``page``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    page:
        The page entry associated with the error.  Only the ``url`` and
        ``template`` keys are referenced if present.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the log entry.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "url": page.get("url"),
        "template": page.get("template"),
    }
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {message} - {page.get('url', '')}")
    _write_jsonl(_ERROR_LOG, entry)


def report_ok(code: str, page: Dict[str, Any], extra: Optional[Dict[str, Any]] = None) -> None:
    """Log a successful event for ``page``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    page:
        The page entry associated with the event.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "url": page.get("url"),
        "template": page.get("template"),
    }
    if extra:
        entry.update(extra)
    print(f"[OK] {message} - {page.get('url', '')}")
    _write_jsonl(_OK_LOG, entry)
