"""
Page transform orchestration.

:func:`run_pipeline` takes one parsed page through three phases that always
run in the same order:

1. preprocess: an optional bounded wait for an element, then the template's
   preprocess hook filling the :class:`ImportContext`;
2. exclude: removal of the template's chrome denylist;
3. stages: the template's stage identifiers, in order, each guarded by its
   selector so a stage only runs when its region exists.

The result is a list of output records: the main content record first, then
one :class:`AssetRecord` per copied image in document order.  Image sources
in the returned tree are rewritten to their published location.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from blog_importer.models.context import ImportContext, ImporterConfig
from blog_importer.models.records import AssetRecord, ContentRecord
from .dom_utils import absolute_url, remove, wait_for_selector
from .embeds import is_third_party_video
from .selectors import STAGE_SELECTORS
from .stages import STAGES
from .templates import Template, get_template

OutputRecord = Union[ContentRecord, AssetRecord]

__all__ = [
    "OutputRecord",
    "collect_images",
    "run_pipeline",
    "run_stages",
    "transform_page",
]


def run_stages(main: Tag, soup: BeautifulSoup, ctx: ImportContext, stage_ids: Sequence[str]) -> None:
    """Run ``stage_ids`` in order, skipping stages whose selector finds nothing."""
    for stage_id in stage_ids:
        selector = STAGE_SELECTORS[stage_id]
        matches = [main] if selector is None else main.select(selector)
        if not matches:
            continue
        STAGES[stage_id](matches, main, soup, ctx)


def collect_images(main: Tag, ctx: ImportContext) -> List[AssetRecord]:
    """
    Record every image left in ``main`` as an asset to copy and point its
    ``src`` at the published host.  Player thumbnails from third-party video
    hosts and non-HTTP sources such as ``data:`` placeholders are neither
    recorded nor rewritten.
    """
    assets: List[AssetRecord] = []
    published_host = ctx.config.published_host
    for img in main.find_all("img"):
        src = img.get("src")
        if not src:
            continue
        source = absolute_url(src, ctx.base_url)
        parsed = urlparse(source)
        if parsed.scheme not in ("http", "https") or is_third_party_video(source):
            continue
        path = parsed.path
        assets.append(AssetRecord(source=source, path=path))
        img["src"] = f"{published_host}{path}"
    return assets


async def run_pipeline(
    soup: BeautifulSoup,
    url: str,
    template: Union[str, Template],
    *,
    html: Optional[str] = None,
    params: Optional[Dict[str, Any]] = None,
    config: Optional[ImporterConfig] = None,
) -> List[OutputRecord]:
    """
    Transform one page and return its output records.

    :param soup: The parsed page.  It is mutated in place.
    :param url: The URL the page was imported from.
    :param template: A template name (``article``, ``author``, ``xf``) or a
        :class:`Template`.
    :param html: The raw page HTML, kept on the context for stages.
    :param params: Caller supplied import parameters; ``originalURL`` is used
        to resolve relative references when present.
    :param config: Import settings; defaults apply when omitted.
    :raises ImportTimeoutError: if the configured element never appears.
    :raises MalformedBlockError: if a matched region lacks a required child.
    :raises json.JSONDecodeError: if the embedded page metadata is invalid.
    """
    tpl = get_template(template) if isinstance(template, str) else template
    params = params or {}
    ctx = ImportContext(
        url=url,
        original_url=params.get("originalURL"),
        html=html,
        config=config or ImporterConfig(),
    )

    if ctx.config.wait_for_selector:
        await wait_for_selector(
            soup,
            ctx.config.wait_for_selector,
            url=url,
            timeout=ctx.config.wait_timeout,
            interval=ctx.config.wait_interval,
        )
    if tpl.preprocess is not None:
        tpl.preprocess(soup, ctx)

    main = soup.body or soup
    remove(main, tpl.exclusions)
    run_stages(main, soup, ctx, tpl.stages)

    records: List[OutputRecord] = [ContentRecord(content=main, path=tpl.document_path(ctx))]
    records.extend(collect_images(main, ctx))
    return records


def transform_page(
    document: Union[str, BeautifulSoup],
    url: str,
    template: Union[str, Template] = "article",
    *,
    params: Optional[Dict[str, Any]] = None,
    config: Optional[ImporterConfig] = None,
) -> List[OutputRecord]:
    """Synchronous entry point; ``document`` may be raw HTML or a parsed page."""
    if isinstance(document, str):
        html: Optional[str] = document
        soup = BeautifulSoup(document, "html.parser")
    else:
        html = None
        soup = document
    return asyncio.run(run_pipeline(soup, url, template, html=html, params=params, config=config))
