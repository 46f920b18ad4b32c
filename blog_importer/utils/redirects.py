"""
Generation of source URL → document path mapping CSV files.

The :func:`generate_path_map_csv` helper writes a CSV file containing the
mapping of legacy page URLs to the document paths produced by the importer.
The resulting file is used to configure redirects so that existing links keep
working once the new blog is live.
"""

from __future__ import annotations

import csv
import os
from typing import Dict, Iterable


def generate_path_map_csv(
    pages: Iterable[Dict[str, str]], *, new_base: str = "", out_path: str = "reports/path_map.csv"
) -> str:
    """Generate a CSV mapping legacy page URLs to imported document paths.

    Parameters
    ----------
    pages:
        Iterable of dictionaries with at least ``url`` and ``path`` keys.
    new_base:
        Optional base URL prefixed to each path in the ``NewURL`` column.
        When empty the column holds the bare path.
    out_path:
        Location of the CSV file to be written.  The parent directory is
        created automatically.

    Returns
    -------
    str
        The path of the generated CSV file.
    """
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["SourceURL", "Path", "NewURL"])
        for page in pages:
            path = page.get("path", "")
            new_url = f"{new_base.rstrip('/')}{path}" if new_base else path
            writer.writerow([page.get("url", ""), path, new_url])
    return out_path
