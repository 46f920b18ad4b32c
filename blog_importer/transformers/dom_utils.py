"""
Tree helpers shared by the stage catalog and the pipeline.

Besides plain pruning and wrapping helpers this module holds the two
exceptions that abort a page import: :class:`MalformedBlockError` for a
matched region missing a required child, and :class:`ImportTimeoutError`
for the bounded wait that runs before the stages.
"""

from __future__ import annotations

import asyncio
import time
from typing import Iterable, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, PageElement, Tag


class MalformedBlockError(Exception):
    """A matched region lacks a child element the block cannot do without."""

    def __init__(self, block: str, selector: str) -> None:
        super().__init__(f"{block}: required element '{selector}' not found")
        self.block = block
        self.selector = selector


class ImportTimeoutError(Exception):
    """The page never showed the awaited element within the timeout."""

    def __init__(self, url: str, selector: str, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout}s waiting for '{selector}' on {url}")
        self.url = url
        self.selector = selector
        self.timeout = timeout


def remove(main: Tag, selectors: Iterable[str]) -> None:
    """Delete every element under ``main`` matching any of ``selectors``."""
    for selector in selectors:
        for el in main.select(selector):
            # nested matches go away with their ancestor
            if not el.decomposed:
                el.decompose()


def require(parent: Tag, selector: str, block: str) -> Tag:
    el = parent.select_one(selector)
    if el is None:
        raise MalformedBlockError(block, selector)
    return el


def text_of(parent: Tag, selector: str, default: str = "") -> str:
    el = parent.select_one(selector)
    return el.get_text(" ", strip=True) if el is not None else default


def wrap(soup: BeautifulSoup, tag_name: str, contents: Iterable[PageElement]) -> Tag:
    """Move ``contents`` into a new ``tag_name`` element and return it."""
    wrapper = soup.new_tag(tag_name)
    for child in list(contents):
        wrapper.append(child)
    return wrapper


def html_fragment(soup: BeautifulSoup, tag_name: str, text: str) -> Tag:
    el = soup.new_tag(tag_name)
    el.string = text
    return el


def absolute_url(src: str, base: str) -> str:
    return urljoin(base, src)


async def wait_for_selector(
    soup: BeautifulSoup,
    selector: str,
    *,
    url: str,
    timeout: float = 10.0,
    interval: float = 0.1,
) -> Tag:
    """
    Poll ``soup`` until ``selector`` matches and return the element.

    :raises ImportTimeoutError: when nothing matched within ``timeout``
        seconds.  The error message names ``url``.
    """
    deadline = time.monotonic() + timeout
    while True:
        found: Optional[Tag] = soup.select_one(selector)
        if found is not None:
            return found
        if time.monotonic() >= deadline:
            raise ImportTimeoutError(url, selector, timeout)
        await asyncio.sleep(interval)
