import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from bs4 import BeautifulSoup

from blog_importer.transformers.blocks import block_label, build_table, header_text, metadata_block


def test_single_cell_block():
    soup = BeautifulSoup("", "html.parser")
    table = build_table([["Video"], ["https://youtu.be/x"]], soup)
    rows = table.find_all("tr")
    assert len(rows) == 2
    header = rows[0].find_all("th")
    assert len(header) == 1 and header[0].get_text() == "Video"
    body = rows[1].find_all("td")
    assert len(body) == 1 and body[0].get_text() == "https://youtu.be/x"


def test_node_cells_are_moved_not_copied():
    soup = BeautifulSoup('<p id="holder"><img src="/a.png"></p>', "html.parser")
    img = soup.find("img")
    table = build_table([["Image"], [img]], soup)
    assert img.parent.name == "td"
    assert soup.find(id="holder").find("img") is None
    assert table.find("img") is img


def test_scalar_cells_and_header_span():
    soup = BeautifulSoup("", "html.parser")
    table = build_table([["Cards"], ["a", 3, True, None]], soup)
    assert table.find("th")["colspan"] == "4"
    texts = [td.get_text() for td in table.find_all("td")]
    assert texts == ["a", "3", "true", ""]


def test_list_cells_append_every_item():
    soup = BeautifulSoup("<div><b>bold</b> tail</div>", "html.parser")
    div = soup.find("div")
    table = build_table([["Text"], [list(div.contents)]], soup)
    td = table.find("td")
    assert td.find("b").get_text() == "bold"
    assert td.get_text() == "bold tail"


def test_header_row_must_have_one_cell():
    soup = BeautifulSoup("", "html.parser")
    with pytest.raises(ValueError):
        build_table([["A", "B"], ["x", "y"]], soup)


def test_metadata_block_skips_empty_values():
    soup = BeautifulSoup("", "html.parser")
    table = metadata_block(soup, {"Title": "T", "Description": "", "Tags": [], "Image": None})
    assert header_text(table) == "Metadata"
    rows = table.find_all("tr")[1:]
    assert [[td.get_text() for td in r.find_all("td")] for r in rows] == [["Title", "T"]]


def test_block_label_deduplicates_in_order():
    assert block_label("Promo Card", ["shadow", "shadow", "gray"]) == "Promo Card (shadow, gray)"
    assert block_label("Promo Card", []) == "Promo Card"
