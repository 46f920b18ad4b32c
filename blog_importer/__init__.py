"""
Top-level package for the legacy blog → block document importer.

This package bundles all components required to turn pages of the legacy
AEM blog (articles, author pages, experience fragments) into documents made
of block tables, plus the list of images each document needs.  Modules are
split into subpackages:

* :mod:`blog_importer.transformers` – stage catalog, templates and pipeline
* :mod:`blog_importer.models` – output records and per-page context
* :mod:`blog_importer.extractors` – page list readers
* :mod:`blog_importer.fetchers` – page and asset downloads
* :mod:`blog_importer.utils` – paths, error logging and path map CSV

The transforms have no knowledge of configuration files or the network;
batch orchestration is handled in :mod:`blog_importer.import_tool`.
"""
