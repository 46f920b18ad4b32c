"""
Extractors for page list files.

This subpackage reads the lists of legacy blog URLs to import, from plain
text or CSV files, into page entries holding the URL and the template used
to transform it.
"""
