"""
High-level orchestration of a legacy blog import.

This module defines a :class:`BlogImportTool` class that ties together the
page list extractors, the HTTP fetchers, the page transforms and the
reporting utilities into a batch run.  For every page it downloads the HTML,
runs the page template, writes the transformed document under the output
directory, copies the image assets, and records the outcome.  A failing page
is reported and skipped; the rest of the batch carries on.

Configuration is supplied via a JSON file path or directly as a dictionary.
The ``importer`` section holds the transform settings (see
:class:`~blog_importer.models.context.ImporterConfig`), ``http`` the fetch
settings and ``import`` the run options (``dry_run``, ``limit``,
``output_dir``, ``download_assets``, ``new_base_url``).
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

import requests

from blog_importer.extractors.page_list import extract_urls_from_csv, extract_urls_from_txt
from blog_importer.fetchers.http import download_asset, fetch_html
from blog_importer.models.context import DEFAULT_EDGE_URL, DEFAULT_PUBLISHED_HOST, ImporterConfig
from blog_importer.models.records import AssetRecord, ContentRecord
from blog_importer.transformers.dom_utils import ImportTimeoutError, MalformedBlockError
from blog_importer.transformers.pipeline import OutputRecord, transform_page
from blog_importer.utils.errors import log_message, report_error, report_ok
from blog_importer.utils.redirects import generate_path_map_csv


class BlogImportTool:
    """
    Encapsulates all state and behavior required to import a set of legacy
    blog pages.  This class is responsible for reading configuration,
    extracting page lists, fetching and transforming pages and writing the
    results.  Detailed success and failure information is recorded using
    the :mod:`blog_importer.utils.errors` module.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            # Default configuration
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("importer", {})
        config["importer"].setdefault("locale", "en-us")
        config["importer"].setdefault("edge_url", os.getenv("IMPORT_EDGE_URL", DEFAULT_EDGE_URL))
        config["importer"].setdefault("published_host", os.getenv("IMPORT_PUBLISHED_HOST", DEFAULT_PUBLISHED_HOST))

        config.setdefault("http", {})
        config["http"].setdefault("timeout", 30)
        config["http"].setdefault("user_agent", "blog-importer/0.1")

        config.setdefault("import", {})
        config["import"].setdefault("dry_run", False)
        config["import"].setdefault("limit", None)
        config["import"].setdefault("output_dir", "output")
        config["import"].setdefault("download_assets", True)
        config["import"].setdefault("new_base_url", "")

        self.config = config
        self.importer_config = ImporterConfig(**config["importer"])

    def log_message(self, message: str, level: str = "INFO") -> None:
        log_message(message, level)

    def extract_pages(self, txt_path: Optional[str] = None, csv_path: Optional[str] = None) -> List[Dict[str, str]]:
        pages: List[Dict[str, str]] = []
        if txt_path and os.path.exists(txt_path):
            self.log_message(f"Reading page list {txt_path}")
            try:
                pages.extend(extract_urls_from_txt(txt_path))
            except (OSError, ValueError) as e:
                self.log_message(f"Error reading page list: {e}", "ERROR")
        if csv_path and os.path.exists(csv_path):
            self.log_message(f"Reading page list {csv_path}")
            try:
                pages.extend(extract_urls_from_csv(csv_path))
            except (OSError, ValueError) as e:
                self.log_message(f"Error reading page list: {e}", "ERROR")
        return pages

    def transform(self, page: Dict[str, str], html: str) -> List[OutputRecord]:
        return transform_page(
            html,
            page["url"],
            page.get("template") or "article",
            params={"originalURL": page["url"]},
            config=self.importer_config,
        )

    def write_document(self, record: ContentRecord) -> str:
        out_dir = self.config["import"]["output_dir"]
        dest = os.path.join(out_dir, record.path.lstrip("/") + ".html")
        os.makedirs(os.path.dirname(dest) or ".", exist_ok=True)
        with open(dest, "w", encoding="utf-8") as f:
            f.write(f"<html><head></head>{record.content}</html>")
        return dest

    def copy_assets(self, page: Dict[str, str], assets: List[AssetRecord]) -> int:
        """Download ``assets`` next to the documents; returns how many were copied."""
        out_dir = self.config["import"]["output_dir"]
        copied = 0
        for asset in assets:
            dest = os.path.join(out_dir, asset.path.lstrip("/"))
            try:
                download_asset(self.config["http"], asset.source, dest)
                copied += 1
            except requests.RequestException as e:
                report_error("ASSET_DOWNLOAD", page, e)
                self.log_message(f"Failed to copy {asset.source}: {e}", "ERROR")
        return copied

    def import_page(self, page: Dict[str, str]) -> List[OutputRecord]:
        """
        Fetch, transform and store one page.  Exceptions propagate to the
        caller; :meth:`import_pages` turns them into report entries.  A page
        that fails after its document was written leaves no document behind.
        """
        dry_run: bool = self.config["import"]["dry_run"]
        html = fetch_html(self.config["http"], page["url"])
        records = self.transform(page, html)
        content = records[0]
        assets = [r for r in records[1:] if isinstance(r, AssetRecord)]

        if dry_run:
            self.log_message(f"Dry-run: would write {content.path} with {len(assets)} assets")
            return records

        dest = self.write_document(content)
        try:
            if self.config["import"]["download_assets"]:
                self.copy_assets(page, assets)
        except Exception:
            os.remove(dest)
            raise
        return records

    def import_pages(self, pages: List[Dict[str, str]]) -> List[Dict[str, str]]:
        """
        Import a list of page entries.  Each page either yields its full set
        of records or none at all; failures are reported and the run moves
        on.  A CSV mapping source URLs to document paths is written at the
        end.

        :param pages: Page entries with ``url`` and ``template`` keys.
        :return: ``{"url", "path"}`` for every page imported.
        """
        limit: Optional[int] = self.config["import"]["limit"]
        imported: List[Dict[str, str]] = []

        for count, page in enumerate(pages):
            if limit is not None and count >= limit:
                break
            url = page.get("url", "")
            self.log_message(f"Importing page '{url}' ({page.get('template', 'article')})")
            try:
                records = self.import_page(page)
            except ImportTimeoutError as e:
                report_error("TIMEOUT", page, e)
                self.log_message(str(e), "ERROR")
                continue
            except MalformedBlockError as e:
                report_error("MALFORMED", page, e)
                self.log_message(f"Malformed content on '{url}': {e}", "ERROR")
                continue
            except json.JSONDecodeError as e:
                report_error("META_JSON", page, e)
                self.log_message(f"Invalid page metadata on '{url}': {e}", "ERROR")
                continue
            except requests.RequestException as e:
                report_error("FETCH", page, e)
                self.log_message(f"Failed to fetch '{url}': {e}", "ERROR")
                continue
            except OSError as e:
                report_error("WRITE", page, e)
                self.log_message(f"Failed to write document for '{url}': {e}", "ERROR")
                continue
            except Exception as e:
                report_error("TRANSFORM", page, e)
                self.log_message(f"An unexpected error occurred while importing '{url}': {e}", "ERROR")
                continue

            path = records[0].path
            imported.append({"url": url, "path": path})
            assets = [r.to_report() for r in records[1:] if isinstance(r, AssetRecord)]
            report_ok("IMPORTED", page, {"path": path, "assets": assets})

        try:
            generate_path_map_csv(imported, new_base=self.config["import"]["new_base_url"])
            self.log_message(f"Path map CSV generated with {len(imported)} entries")
        except OSError as e:
            self.log_message(f"Failed to generate path map: {e}", "ERROR")
        return imported
