"""
HTTP fetchers for the importer.

This subpackage downloads legacy page HTML and image assets for the batch
driver.  It encapsulates rate limiting and automatic retries on transient
errors.
"""
