"""Document path derivation and legacy link rewriting."""

from __future__ import annotations

import re
from typing import Tuple
from urllib.parse import unquote, urlparse, urlunparse

LEGACY_BLOG_PREFIX = "/en_us/blog/"
NEW_BLOG_PREFIX = "/prod/en-us/blog/"

# Hosts whose absolute links are treated like relative links to the legacy blog
LEGACY_HOSTS: Tuple[str, ...] = ("www.splunk.com", "splunk.com", "localhost:3001")

_HTML_SUFFIX_RE = re.compile(r"\.html$")
_NON_PATH_CHARS_RE = re.compile(r"[^a-z0-9/]+")


def derive_document_path(url: str) -> str:
    """
    Map a page URL to the document path used by the generated document.

    The pathname is percent-decoded and lowercased, a trailing ``.html`` is
    dropped and every run of characters outside ``[a-z0-9/]`` becomes a
    single dash.  A trailing slash maps to an explicit ``index`` document.
    Dashes left at either end of a segment are stripped.

    >>> derive_document_path("https://site.example/en_us/Blog/My%20Post!.html")
    '/en-us/blog/my-post'
    """
    p = urlparse(url).path or "/"
    if p.endswith("/"):
        p = f"{p}index"
    p = unquote(p).lower()
    p = _HTML_SUFFIX_RE.sub("", p)
    p = _NON_PATH_CHARS_RE.sub("-", p)

    segments = [s.strip("-") for s in p.split("/")]
    inner = [s for s in segments[1:-1] if s]
    last = segments[-1] or "index"
    return "/" + "/".join(inner + [last])


def rewrite_blog_href(href: str) -> str:
    """
    Rewrite a link into the legacy blog to its location on the new site.

    ``/en_us/blog/foo.html`` becomes ``/prod/en-us/blog/foo``.  Absolute links
    on a legacy host are made relative the same way; query strings and
    fragments are kept.  Any other href is returned unchanged.
    """
    if not href:
        return href
    parsed = urlparse(href.strip())
    if parsed.netloc and parsed.netloc.lower() not in LEGACY_HOSTS:
        return href
    if not parsed.path.startswith(LEGACY_BLOG_PREFIX):
        return href
    new_path = NEW_BLOG_PREFIX + parsed.path[len(LEGACY_BLOG_PREFIX):]
    new_path = _HTML_SUFFIX_RE.sub("", new_path)
    return urlunparse(("", "", new_path, parsed.params, parsed.query, parsed.fragment))


def author_page_url(url: str, edge_url: str) -> str:
    """Return the edge URL of an author page, used to filter the article list."""
    path = urlparse(url).path.replace("en_us", "en-us")
    path = _HTML_SUFFIX_RE.sub("", path)
    return f"{edge_url.rstrip('/')}{path}"


def fragment_path(href: str, locale: str) -> str:
    """Return ``/<locale>/blog/fragments/<slug>`` for a fragment CTA link."""
    if href.startswith("http"):
        href = urlparse(href).path
    slug = _HTML_SUFFIX_RE.sub("", href).rstrip("/").split("/")[-1]
    return f"/{locale}/blog/fragments/{slug}"
