"""
Entry point for the legacy blog importer.
"""

import glob
import os
from blog_importer.import_tool import BlogImportTool

CONFIG_FILE = "config/import_config.json"


def main():
    """
    Main function to run the legacy blog importer.
    """
    tool = BlogImportTool(config_file=CONFIG_FILE)
    tool.log_message("Starting legacy blog import.")

    # Dynamically find page lists in the 'docs' directory
    docs_path = "docs/"
    txt_files = glob.glob(os.path.join(docs_path, "*.txt"))
    csv_files = glob.glob(os.path.join(docs_path, "*.csv"))

    tool.log_message(f"Discovered TXT files: {txt_files}", level="DEBUG")
    tool.log_message(f"Discovered CSV files: {csv_files}", level="DEBUG")

    if not txt_files and not csv_files:
        tool.log_message(
            f"No page lists (.txt or .csv) found in '{docs_path}' directory.",
            level="ERROR",
        )
        return

    pages = []
    for txt_path in txt_files:
        pages.extend(tool.extract_pages(txt_path=txt_path))

    for csv_path in csv_files:
        csv_pages = tool.extract_pages(csv_path=csv_path)

        # Skip URLs already listed in a text file
        existing_urls = {p.get("url") for p in pages}
        pages.extend(p for p in csv_pages if p.get("url") not in existing_urls)

    if not pages:
        tool.log_message("No pages found in any of the page lists.", level="ERROR")
        return

    tool.log_message(f"Found a total of {len(pages)} pages to import.")

    imported = tool.import_pages(pages)

    tool.log_message(f"Import finished: {len(imported)} of {len(pages)} pages imported.")

if __name__ == "__main__":
    main()
