import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from bs4 import BeautifulSoup

from blog_importer.models.context import DEFAULT_EDGE_URL, ImportContext
from blog_importer.transformers.blocks import header_text
from blog_importer.transformers.dom_utils import MalformedBlockError
from blog_importer.transformers.pipeline import run_stages
from blog_importer.transformers.selectors import STAGE_SELECTORS
from blog_importer.transformers.stages import classify_promo_card

PAGE_URL = "https://www.splunk.com/en_us/blog/security/my-post.html"


def _run(body, *stage_ids):
    soup = BeautifulSoup(f"<html><head></head><body>{body}</body></html>", "html.parser")
    main = soup.body
    run_stages(main, soup, ImportContext(url=PAGE_URL), stage_ids)
    return soup, main


def _rows(table):
    return [[c.get_text(" ", strip=True) for c in tr.find_all(["td", "th"])] for tr in table.find_all("tr")]


def test_guarded_stages_leave_unrelated_pages_untouched(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    body = "<div class='x'><p>Hello <a href='/other'>x</a></p><img src='/a.png'></div>"
    for stage_id, selector in STAGE_SELECTORS.items():
        if selector is None:
            continue
        soup = BeautifulSoup(f"<html><body>{body}</body></html>", "html.parser")
        before = str(soup)
        run_stages(soup.body, soup, ImportContext(url=PAGE_URL), [stage_id])
        assert str(soup) == before, stage_id


def test_promo_card_variants_ignore_class_order():
    first = (
        '<div class="cmp-promo-card promo-card--shadow promo-card--gradient-border">'
        '<img src="/a.png"><div class="cmp-promo-card__content"><p>Hi</p></div></div>'
    )
    second = (
        '<div class="cmp-promo-card"><div class="promo-card--gradient-border">'
        '<div class="promo-card--shadow"><img src="/a.png">'
        '<div class="cmp-promo-card__content"><p>Hi</p></div></div></div></div>'
    )
    for body in (first, second):
        _, main = _run(body, "promo_cards")
        table = main.find("table")
        assert header_text(table) == "Promo Card (gradient border, shadow)"
        assert table.find("img") is not None
        assert main.select_one(".cmp-promo-card") is None


def test_promo_card_inline_styles():
    soup = BeautifulSoup(
        '<div class="cmp-promo-card" style="background-color: #F2F2F2; border: 1px solid #ccc"></div>',
        "html.parser",
    )
    assert classify_promo_card(soup.div) == ["border", "gray"]


def test_table_with_header_and_centered_column():
    body = (
        '<div class="cmp-table"><table>'
        "<tr><th>Name</th><th>Score</th></tr>"
        '<tr><td><b>A</b></td><td style="text-align: center">1</td></tr>'
        '<tr><td>B</td><td class="text-center">2</td></tr>'
        "</table></div>"
    )
    _, main = _run(body, "tables")
    table = main.find("table")
    assert header_text(table) == "Table (center-2)"
    rows = table.find_all("tr")
    assert len(rows) == 4
    assert [td.find("strong").get_text() for td in rows[1].find_all("td")] == ["Name", "Score"]
    assert rows[2].find("b").get_text() == "A"


def test_table_without_header_row():
    _, main = _run('<div class="cmp-text"><table><tr><td>a</td><td>b</td></tr></table></div>', "tables")
    table = main.find("table")
    assert header_text(table) == "Table (no header)"
    assert _rows(table)[1] == ["a", "b"]


def test_nested_table_header_does_not_mark_outer_table():
    body = (
        '<div class="cmp-table"><table>'
        "<tr><td>a</td><td>"
        "<table><thead><tr><th>x</th></tr></thead><tr><td>y</td></tr></table>"
        "</td></tr>"
        "</table></div>"
    )
    _, main = _run(body, "tables")
    outer = main.find("table")
    assert header_text(outer) == "Table (no header)"
    first_row = outer.find_all("tr", recursive=False)[1]
    cells = first_row.find_all("td", recursive=False)
    assert cells[0].get_text() == "a"
    assert cells[0].find("strong") is None
    inner = cells[1].find("table")
    assert header_text(inner) == "Table"


def test_unconvertible_table_is_left_and_logged(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _, main = _run('<div class="cmp-table"><table></table></div>', "tables")
    table = main.find("table")
    assert table is not None and table.find("th") is None
    with open(os.path.join("reports", "import", "import.log"), encoding="utf-8") as f:
        assert "WARNING" in f.read()


def test_cards_block():
    body = (
        '<div class="cmp-card-list">'
        '<div class="cmp-card"><div class="cmp-card__image"><img src="/1.png"></div>'
        '<div class="cmp-card__content"><p>One</p></div></div>'
        '<div class="cmp-card"><div class="cmp-card__content"><p>Two</p></div></div>'
        "</div>"
    )
    _, main = _run(body, "cards")
    table = main.find("table")
    assert header_text(table) == "Cards"
    rows = table.find_all("tr")
    assert len(rows) == 3
    assert rows[1].find("img")["src"] == "/1.png"
    assert rows[2].get_text(" ", strip=True) == "Two"


def test_card_without_content_is_malformed():
    body = '<div class="cmp-card-list"><div class="cmp-card"><div class="cmp-card__image"><img src="/a.png"></div></div></div>'
    with pytest.raises(MalformedBlockError):
        _run(body, "cards")


def test_accordion_block():
    body = (
        '<div class="cmp-accordion">'
        '<div class="cmp-accordion__item"><h3 class="cmp-accordion__title">Q1</h3>'
        '<div class="cmp-accordion__panel"><p>A1</p></div></div>'
        '<div class="cmp-accordion__item"><h3 class="cmp-accordion__title">Q2</h3></div>'
        "</div>"
    )
    _, main = _run(body, "accordions")
    assert _rows(main.find("table")) == [["Accordion"], ["Q1", "A1"], ["Q2", ""]]


def test_accordion_item_without_title_is_malformed():
    body = '<div class="cmp-accordion"><div class="cmp-accordion__item"><p>x</p></div></div>'
    with pytest.raises(MalformedBlockError):
        _run(body, "accordions")


def test_quote_with_attribution():
    body = (
        '<div class="cmp-quote"><blockquote class="cmp-quote__text">Great <em>stuff</em></blockquote>'
        "<cite>Jane</cite></div>"
    )
    _, main = _run(body, "quotes")
    tables = main.find_all("table")
    assert len(tables) == 1
    assert _rows(tables[0]) == [["Quote"], ["Great stuff"], ["Jane"]]
    assert tables[0].find("em") is not None


def test_embed_blocks_named_by_provider():
    body = (
        '<iframe src="https://www.youtube.com/embed/abc"></iframe>'
        '<iframe src="https://w.soundcloud.com/player/?url=x"></iframe>'
        '<img class="vidyard-player-embed" data-uuid="u1" src="https://play.vidyard.com/u1.jpg">'
        '<video><source src="/media/clip.mp4"></video>'
    )
    _, main = _run(body, "embeds")
    rows = [_rows(t) for t in main.find_all("table")]
    assert rows == [
        [["Video"], ["https://www.youtube.com/embed/abc"]],
        [["Audio"], ["https://w.soundcloud.com/player/?url=x"]],
        [["Vidyard"], ["https://play.vidyard.com/u1"]],
        [["Video"], ["https://www.splunk.com/media/clip.mp4"]],
    ]
    assert main.find("iframe") is None


def test_marketo_form():
    _, main = _run('<form id="mktoForm_1234"></form>', "forms")
    assert _rows(main.find("table")) == [["Form"], ["Form ID", "1234"]]


def test_key_takeaways_drop_title():
    body = '<div class="cmp-key-takeaways"><h3>Key takeaways</h3><ul><li>One</li></ul></div>'
    _, main = _run(body, "key_takeaways")
    table = main.find("table")
    assert header_text(table) == "Key Takeaways"
    assert table.find("ul") is not None
    assert main.find("h3") is None


def test_floated_image_with_caption():
    body = '<div class="cmp-image cmp-image--float-left"><img src="/x.png"><span class="cmp-image__title">Cap</span></div>'
    _, main = _run(body, "image_float")
    table = main.find("table")
    assert header_text(table) == "Image (float left)"
    assert table.find("img")["src"] == "/x.png"
    assert _rows(table)[-1] == ["Cap"]


def test_centered_text():
    _, main = _run('<div class="cmp-text cmp-text--center"><p>Hi</p></div>', "center_text")
    assert _rows(main.find("table")) == [["Text (center)"], ["Hi"]]


def test_related_articles_links_are_rewritten():
    body = '<div class="splunkBlogsArticle-relatedArticles"><h3>Related</h3><a href="/en_us/blog/a.html">A</a></div>'
    _, main = _run(body, "related_articles")
    table = main.find("table")
    assert header_text(table) == "Related Articles"
    assert table.find("a")["href"] == "/prod/en-us/blog/a"


def test_sidebar_becomes_fragment_links():
    body = (
        '<div class="splunkBlogsArticle-body-sidebar">'
        '<div class="experiencefragment cmp-experiencefragment--newsletter"><p>x</p></div>'
        '<div class="cmp-experiencefragment--promo-a"></div>'
        '<div class="cmp-experiencefragment--newsletter"></div>'
        "</div>"
    )
    _, main = _run(body, "sidebar")
    assert main.select_one(".splunkBlogsArticle-body-sidebar") is None
    hrefs = [t.find("a")["href"] for t in main.find_all("table")]
    assert hrefs == [
        f"{DEFAULT_EDGE_URL}/en-us/blog/fragments/newsletter",
        f"{DEFAULT_EDGE_URL}/en-us/blog/fragments/promo-a",
    ]


def test_links_stage_only_touches_blog_links():
    _, main = _run('<a href="/en_us/blog/foo.html">x</a><a href="/en_us/products.html">y</a>', "links")
    assert [a["href"] for a in main.find_all("a")] == ["/prod/en-us/blog/foo", "/en_us/products.html"]
