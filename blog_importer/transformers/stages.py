"""
Stage catalog for the blog page transforms.

Every stage has the signature ``stage(matches, main, soup, ctx)``.  The
pipeline only calls a stage when its selector from
:data:`blog_importer.transformers.selectors.STAGE_SELECTORS` matched at least
one element, so stage bodies can assume ``matches`` is non-empty.  A stage
replaces each matched region with a block table in place, or appends page
level blocks (metadata, article list) to ``main``.

Stages raise :class:`~blog_importer.transformers.dom_utils.MalformedBlockError`
when a matched region lacks a child the block needs.  The table stage is the
one exception: a table that cannot be converted is logged and left as is.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from blog_importer.models.context import ImportContext
from blog_importer.utils.errors import log_message
from blog_importer.utils.paths import author_page_url, rewrite_blog_href
from . import selectors as sel
from .blocks import CellValue, block_label, build_table, metadata_block
from .dom_utils import absolute_url, html_fragment, require, text_of, wrap
from .embeds import DEFAULT_EMBED, classify_embed

StageFn = Callable[[Sequence[Tag], Tag, BeautifulSoup, ImportContext], None]


def _meta_content(soup: BeautifulSoup, prop: str) -> str:
    el = soup.select_one(f'meta[property="{prop}"]')
    return (el.get("content") or "").strip() if el is not None else ""


def _squash(style: Optional[str]) -> str:
    return "".join((style or "").lower().split())


def _classes(el: Tag) -> List[str]:
    return list(el.get("class") or [])


def _outermost(matches: Sequence[Tag]) -> List[Tag]:
    """Drop matches nested inside another match."""
    ids = {id(m) for m in matches}
    return [m for m in matches if not any(id(p) in ids for p in m.parents)]


def _anchor(soup: BeautifulSoup, href: str, text: Optional[str] = None) -> Tag:
    a = soup.new_tag("a", href=href)
    a.string = text if text is not None else href
    return a


###############################################################################
# Page metadata
###############################################################################

def article_metadata(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    """
    Build the article ``Metadata`` block from the hero, the author badge, the
    tag list and the embedded page metadata, then drop those regions.
    """
    hero = matches[0]
    hero_image = hero.select_one(sel.HERO_IMAGE)
    badge = main.select_one(sel.AUTHOR_BADGE)
    author_link = badge.select_one(sel.AUTHOR_NAME_LINK) if badge is not None else None
    tag_links = main.select(sel.ARTICLE_TAGS)
    page = ctx.page_meta.get("page") or {}

    meta: Dict[str, CellValue] = {
        "Title": _meta_content(soup, "og:title"),
        "Description": _meta_content(soup, "og:description"),
        "Image": hero_image,
        "Template": "Article",
        "Author": author_link.get_text(strip=True) if author_link is not None else "",
        "Author URL": rewrite_blog_href(author_link.get("href", "")) if author_link is not None else "",
        "Tags": "\n".join(a.get_text(strip=True) for a in tag_links),
        "Category": page.get("blogCategory", ""),
        "Published": page.get("blogBylineDate", ""),
        "Read-Time": text_of(main, sel.READ_TIME),
        "Social URLs": "\n".join(dict.fromkeys(ctx.social_urls)),
    }

    main.append(metadata_block(soup, meta))
    hero.decompose()
    if badge is not None:
        badge.decompose()
    for a in tag_links:
        a.decompose()


def author_metadata(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    badge = matches[0]
    name = text_of(badge, sel.AUTHOR_NAME_HEADING) or "Author"
    image = badge.select_one(sel.AUTHOR_IMAGE)
    description = require(badge, sel.AUTHOR_DESCRIPTION, "Author")
    social_urls = [d.get_text(strip=True) for d in badge.select(sel.AUTHOR_SOCIAL_ITEMS)]

    meta: Dict[str, CellValue] = {
        "Template": "Author",
        "Author": name,
        "Image": image,
    }
    if any(social_urls):
        meta["Social URLs"] = "\n".join(u for u in social_urls if u)

    main.append(metadata_block(soup, meta))
    if description.get_text(strip=True):
        main.append(wrap(soup, "div", description.contents))
    badge.decompose()


def author_articles(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    """Append the paginated ``Article List`` filtered on this author page."""
    author_url = author_page_url(ctx.url, ctx.config.edge_url)
    cells: List[List[CellValue]] = [
        ["Article List"],
        ["Display Mode", "Paginated"],
        ["Filter", "Author"],
        ["Author URL", _anchor(soup, author_url)],
        ["Limit", ctx.config.author_article_limit],
    ]
    main.append(build_table(cells, soup))


def floating_promo(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    card = matches[0]
    picture = card.select_one("picture")
    title = text_of(card, ".tabContent > p > span")
    text = text_of(card, ".tabContent p:nth-of-type(2)")
    cta = card.select_one(sel.FLOATING_PROMO_CTA)

    container = soup.new_tag("div")
    if picture is not None:
        container.append(picture)
    container.append(html_fragment(soup, "b", title))
    container.append(html_fragment(soup, "p", text))
    if cta is not None:
        container.append(cta)

    card.replace_with(build_table([["Floating Promo"], [container]], soup))


###############################################################################
# Content blocks
###############################################################################

def key_takeaways(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for box in matches:
        title = box.select_one("h2, h3, h4, .cmp-key-takeaways__title")
        if title is not None:
            title.decompose()
        box.replace_with(build_table([["Key Takeaways"], [list(box.contents)]], soup))


def _embed_source(el: Tag) -> Optional[str]:
    if el.name == "img":
        uuid = el.get("data-uuid")
        return f"https://play.vidyard.com/{uuid}" if uuid else el.get("src")
    if el.name in ("video", "audio"):
        source = el.select_one("source[src]")
        return el.get("src") or (source.get("src") if source is not None else None)
    return el.get("src")


def embeds(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    """
    Replace iframes, media elements and Vidyard players with a block named
    after the provider, holding the embed URL.
    """
    for el in matches:
        src = _embed_source(el)
        if not src:
            continue
        src = absolute_url(src, ctx.base_url)
        name = classify_embed(src)
        if name == DEFAULT_EMBED and el.name == "video":
            name = "Video"
        elif name == DEFAULT_EMBED and el.name == "audio":
            name = "Audio"
        elif el.name == "img":
            name = "Vidyard"
        el.replace_with(build_table([[name], [src]], soup))


def _is_centered(cell: Tag) -> bool:
    if "text-center" in _classes(cell) or (cell.get("align") or "").lower() == "center":
        return True
    if "text-align:center" in _squash(cell.get("style")):
        return True
    children = cell.find_all(True, recursive=False)
    return bool(children) and all("text-align:center" in _squash(c.get("style")) for c in children)


def _convert_table(table: Tag, soup: BeautifulSoup) -> Tag:
    rows = [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]
    if not rows:
        raise ValueError("table has no rows")

    first_cells = rows[0].find_all(["td", "th"], recursive=False)
    has_header = table.find("thead", recursive=False) is not None or (
        bool(first_cells) and all(c.name == "th" for c in first_cells)
    )
    header_row = rows[0] if has_header else None
    body_rows = [r.find_all(["td", "th"], recursive=False) for r in (rows[1:] if has_header else rows)]

    variants: List[str] = []
    if not has_header:
        variants.append("no header")
    width = max((len(r) for r in body_rows), default=0)
    for col in range(width):
        column = [r[col] for r in body_rows if len(r) > col]
        if column and all(_is_centered(c) for c in column):
            variants.append(f"center-{col + 1}")

    cells: List[List[CellValue]] = [[block_label("Table", variants)]]
    if header_row is not None:
        cells.append([wrap(soup, "strong", c.contents) for c in first_cells])
    for row in body_rows:
        cells.append([list(c.contents) for c in row])
    return build_table(cells, soup)


def tables(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for table in matches:
        try:
            block = _convert_table(table, soup)
        except Exception as e:
            log_message(f"Table left untransformed on {ctx.url}: {e}", level="WARNING")
            continue
        table.replace_with(block)


def cards(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for card_list in matches:
        items = card_list.select(".cmp-card")
        if not items:
            continue
        cells: List[List[CellValue]] = [["Cards"]]
        for item in items:
            body = require(item, ".cmp-card__content", "Cards")
            image = item.select_one(".cmp-card__image picture") or item.select_one(".cmp-card__image img")
            cells.append([image, list(body.contents)])
        card_list.replace_with(build_table(cells, soup))


def classify_promo_card(card: Tag) -> List[str]:
    """
    Return the style variants of a promo card, in the fixed check order of
    :data:`~blog_importer.transformers.selectors.PROMO_CARD_VARIANTS`.
    """
    nodes = [card] + card.find_all(True)
    variants: List[str] = []
    for label, marker, style in sel.PROMO_CARD_VARIANTS:
        if any(marker in _classes(n) or style in _squash(n.get("style")) for n in nodes):
            variants.append(label)
    return variants


def promo_cards(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for card in _outermost(matches):
        label = block_label("Promo Card", classify_promo_card(card))
        image = card.select_one("picture") or card.select_one("img")
        if image is not None:
            image.extract()
        body = card.select_one(".cmp-promo-card__content") or card
        row: List[CellValue] = [image, list(body.contents)] if image is not None else [list(body.contents)]
        card.replace_with(build_table([[label], row], soup))


def accordions(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for accordion in matches:
        items = accordion.select(".cmp-accordion__item")
        if not items:
            continue
        cells: List[List[CellValue]] = [["Accordion"]]
        for item in items:
            title = require(item, ".cmp-accordion__title", "Accordion")
            panel = item.select_one(".cmp-accordion__panel")
            cells.append([title.get_text(" ", strip=True), list(panel.contents) if panel is not None else ""])
        accordion.replace_with(build_table(cells, soup))


def forms(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for el in _outermost(matches):
        form = el if el.name == "form" else el.select_one("form")
        cells: List[List[CellValue]] = [["Form"]]
        form_id = (form.get("id") or "") if form is not None else ""
        if form_id.startswith("mktoForm_"):
            cells.append(["Form ID", form_id[len("mktoForm_"):]])
        elif form is not None and form.get("action"):
            cells.append(["Action", absolute_url(form["action"], ctx.base_url)])
        el.replace_with(build_table(cells, soup))


def quotes(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for quote in _outermost(matches):
        cite = quote.select_one("cite, .cmp-quote__author")
        attribution = ""
        if cite is not None:
            attribution = cite.get_text(" ", strip=True)
            cite.decompose()
        text_el = quote.select_one(".cmp-quote__text") or quote
        cells: List[List[CellValue]] = [["Quote"], [list(text_el.contents)]]
        if attribution:
            cells.append([attribution])
        quote.replace_with(build_table(cells, soup))


def image_float(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for el in matches:
        side = "left" if "cmp-image--float-left" in _classes(el) else "right"
        image = el.select_one("picture") or require(el, "img", "Image")
        caption = text_of(el, ".cmp-image__title, figcaption")
        cells: List[List[CellValue]] = [[block_label("Image", [f"float {side}"])], [image]]
        if caption:
            cells.append([caption])
        el.replace_with(build_table(cells, soup))


def center_text(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for el in matches:
        el.replace_with(build_table([[block_label("Text", ["center"])], [list(el.contents)]], soup))


###############################################################################
# Navigation and fragments
###############################################################################

def related_articles(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for section in matches:
        links = section.select("a[href]")
        if not links:
            continue
        cells: List[List[CellValue]] = [["Related Articles"]]
        for a in links:
            a["href"] = rewrite_blog_href(a["href"])
            cells.append([a])
        section.replace_with(build_table(cells, soup))


def _fragment_name(el: Tag) -> Optional[str]:
    for cls in _classes(el):
        if cls.startswith("cmp-experiencefragment--"):
            return cls[len("cmp-experiencefragment--"):]
    return None


def sidebar(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    """
    Replace the article sidebar with one ``Fragment`` link block per shared
    experience fragment it embeds.
    """
    base = f"{ctx.config.edge_url}/{ctx.config.locale}/blog/fragments"
    for bar in matches:
        seen: List[str] = []
        for el in bar.select("[class*='cmp-experiencefragment--']"):
            name = _fragment_name(el)
            if name and name not in seen:
                seen.append(name)
                bar.insert_before(build_table([["Fragment"], [_anchor(soup, f"{base}/{name}")]], soup))
        bar.decompose()


def links(matches: Sequence[Tag], main: Tag, soup: BeautifulSoup, ctx: ImportContext) -> None:
    for a in matches:
        a["href"] = rewrite_blog_href(a["href"])


STAGES: Dict[str, StageFn] = {
    "article_metadata": article_metadata,
    "author_metadata": author_metadata,
    "author_articles": author_articles,
    "floating_promo": floating_promo,
    "key_takeaways": key_takeaways,
    "embeds": embeds,
    "tables": tables,
    "cards": cards,
    "promo_cards": promo_cards,
    "accordions": accordions,
    "forms": forms,
    "quotes": quotes,
    "image_float": image_float,
    "center_text": center_text,
    "related_articles": related_articles,
    "sidebar": sidebar,
    "links": links,
}
