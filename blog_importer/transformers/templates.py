"""
Page templates of the legacy blog.

A :class:`Template` bundles what differs between the article, author and
experience fragment importers: the chrome to remove, the ordered list of
stage identifiers, the preprocess hook filling the
:class:`~blog_importer.models.context.ImportContext`, and how the document
path is chosen.

Stage order is part of each template's contract.  Stages mutate the shared
tree, so a later stage sees what earlier stages left behind; the metadata
stage consumes the hero and author badge before anything else runs, and the
fragment and link stages come last.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from bs4 import BeautifulSoup

from blog_importer.models.context import ImportContext
from blog_importer.utils.paths import derive_document_path, fragment_path
from . import selectors as sel

PreprocessFn = Callable[[BeautifulSoup, ImportContext], None]
PathFn = Callable[[ImportContext], str]

_PAGE_META_RE = re.compile(r"splunkMeta\s*=\s*(\{.*\})\s*;?\s*$", re.DOTALL)


@dataclass(frozen=True)
class Template:
    name: str
    exclusions: Tuple[str, ...]
    stages: Tuple[str, ...]
    preprocess: Optional[PreprocessFn]
    document_path: PathFn


def parse_page_meta(soup: BeautifulSoup) -> Dict[str, Any]:
    """
    Return the page metadata object the legacy site embeds in a script,
    either as ``<script id="splunkMeta" type="application/json">`` or as a
    ``splunkMeta = {...};`` assignment.  Pages without it give ``{}``.

    :raises json.JSONDecodeError: when the payload is not valid JSON.
    """
    for script in soup.find_all("script"):
        text = script.string or ""
        if script.get("id") == "splunkMeta":
            return json.loads(text)
        match = _PAGE_META_RE.search(text)
        if match:
            return json.loads(match.group(1))
    return {}


def _article_preprocess(soup: BeautifulSoup, ctx: ImportContext) -> None:
    # icons often sit in chrome that the exclusions decompose
    ctx.social_urls = [a["href"] for a in soup.select(sel.SOCIAL_LINKS) if a.get("href")]
    ctx.page_meta = parse_page_meta(soup)


def _fragment_preprocess(soup: BeautifulSoup, ctx: ImportContext) -> None:
    cta = soup.select_one(f"{sel.FLOATING_PROMO} {sel.FLOATING_PROMO_CTA}")
    if cta is not None and cta.get("href"):
        ctx.new_page = fragment_path(cta["href"], ctx.config.locale)


def _page_path(ctx: ImportContext) -> str:
    return derive_document_path(ctx.url)


def _fragment_page_path(ctx: ImportContext) -> str:
    return ctx.new_page or derive_document_path(ctx.url)


ARTICLE_STAGES: Tuple[str, ...] = (
    "article_metadata",
    "tables",
    "key_takeaways",
    "embeds",
    "cards",
    "promo_cards",
    "accordions",
    "forms",
    "quotes",
    "image_float",
    "center_text",
    "related_articles",
    "sidebar",
    "links",
)

AUTHOR_STAGES: Tuple[str, ...] = ("author_metadata", "author_articles", "links")

FRAGMENT_STAGES: Tuple[str, ...] = ("floating_promo",)

TEMPLATES: Dict[str, Template] = {
    "article": Template("article", sel.EXCLUSIONS["article"], ARTICLE_STAGES, _article_preprocess, _page_path),
    "author": Template("author", sel.EXCLUSIONS["author"], AUTHOR_STAGES, None, _page_path),
    "xf": Template("xf", sel.EXCLUSIONS["xf"], FRAGMENT_STAGES, _fragment_preprocess, _fragment_page_path),
}


def get_template(name: str) -> Template:
    """Return the template registered as ``name``; unknown names raise ``KeyError``."""
    return TEMPLATES[name]
