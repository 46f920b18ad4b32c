from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

CellValue = Union[str, int, float, bool, PageElement, None, Sequence[Any]]


# --- Builders for block tables ---

def block_label(name: str, variants: Optional[Iterable[str]] = None) -> str:
    """
    Build a block name such as ``"Promo Card (gradient border, shadow)"``.
    Variants keep their first-seen order; duplicates are dropped.
    """
    seen: List[str] = []
    for v in variants or []:
        if v and v not in seen:
            seen.append(v)
    if not seen:
        return name
    return f"{name} ({', '.join(seen)})"


def _fill_cell(soup: BeautifulSoup, cell: Tag, value: CellValue) -> None:
    if value is None:
        return
    if isinstance(value, PageElement):
        # append() moves the node out of its current parent
        cell.append(value)
        return
    if isinstance(value, (list, tuple)):
        for v in list(value):
            _fill_cell(soup, cell, v)
        return
    if isinstance(value, bool):
        cell.append(NavigableString("true" if value else "false"))
        return
    cell.append(NavigableString(str(value)))


def build_table(cells: Sequence[Sequence[CellValue]], soup: BeautifulSoup) -> Tag:
    """
    Build a block table from a 2D list of cell values.

    The first row names the block and must hold exactly one cell; it becomes
    a ``<th>`` spanning the widest row.  Every other row becomes ``<td>``
    cells.  Strings, numbers and booleans become text; nodes are moved into
    the cell; lists append each of their items in order.
    """
    if len(cells[0]) != 1:
        raise ValueError(f"Block header row must have exactly one cell, got {len(cells[0])}")

    width = max(len(row) for row in cells)
    table = soup.new_tag("table")
    for index, row in enumerate(cells):
        tr = soup.new_tag("tr")
        for value in row:
            cell = soup.new_tag("th" if index == 0 else "td")
            if index == 0 and width > 1:
                cell["colspan"] = str(width)
            _fill_cell(soup, cell, value)
            tr.append(cell)
        table.append(tr)
    return table


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def metadata_block(soup: BeautifulSoup, meta: Mapping[str, CellValue]) -> Tag:
    """Render ``meta`` as a ``Metadata`` block, skipping empty values."""
    cells: List[List[CellValue]] = [["Metadata"]]
    for key, value in meta.items():
        if _is_empty(value):
            continue
        cells.append([key, value])
    return build_table(cells, soup)


def header_text(table: Tag) -> str:
    """Return the block name of a table built by :func:`build_table`."""
    th = table.find("th")
    return th.get_text(strip=True) if th else ""
