import csv
from typing import Dict, List, Optional

from blog_importer.transformers.templates import TEMPLATES

DEFAULT_TEMPLATE = "article"


def _guess_template(url: str) -> str:
    """Pick a template from the URL shape when the page list does not name one."""
    lowered = url.lower()
    if "/blog/author/" in lowered:
        return "author"
    if "/experience-fragments/" in lowered or "/fragments/" in lowered:
        return "xf"
    return DEFAULT_TEMPLATE


def _entry(url: str, template: Optional[str]) -> Dict[str, str]:
    template = (template or "").strip().lower() or _guess_template(url)
    if template not in TEMPLATES:
        raise ValueError(f"Unknown template '{template}' for {url}")
    return {"url": url, "template": template}


def extract_urls_from_txt(file_path):
    """Reads a plain text page list, one URL per line.

    Blank lines and lines starting with ``#`` are ignored.  A line may carry
    a template name after the URL, separated by whitespace.

    Args:
        file_path (str): Path to the text file.

    Returns:
        list: Page entries ``{"url", "template"}`` in file order, without
              duplicate URLs.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a line names an unknown template.
    """
    pages: List[Dict[str, str]] = []
    seen = set()
    with open(file_path, mode="r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            parts = line.split()
            url = parts[0]
            if url in seen:
                continue
            try:
                pages.append(_entry(url, parts[1] if len(parts) > 1 else None))
            except ValueError as e:
                raise ValueError(f"Error processing line {line_num} in {file_path}: {e}") from e
            seen.add(url)
    return pages


def extract_urls_from_csv(file_path):
    """Reads a CSV page list with a ``URL`` column and an optional ``Template`` column.

    Args:
        file_path (str): Path to the CSV file.

    Returns:
        list: Page entries ``{"url", "template"}`` in file order, without
              duplicate URLs.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a row names an unknown template.
    """
    pages: List[Dict[str, str]] = []
    seen = set()
    with open(file_path, mode="r", encoding="utf-8") as csvfile:
        reader = csv.DictReader(csvfile)
        for row_num, row in enumerate(reader, start=2):  # Start at 2 because header is row 1
            url = (row.get("URL") or "").strip()
            if not url or url in seen:
                continue
            try:
                pages.append(_entry(url, row.get("Template")))
            except ValueError as e:
                raise ValueError(f"Error processing row {row_num} in {file_path}: {e}") from e
            seen.add(url)
    return pages
