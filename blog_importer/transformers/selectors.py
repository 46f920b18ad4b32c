"""
Selector catalog for the legacy blog templates.

``STAGE_SELECTORS`` maps each stage identifier to the CSS selector that must
match inside the page body before the stage runs.  ``EXCLUSIONS`` lists the
chrome removed from each template before any stage runs.  Everything
template-specific about *where* content lives is kept here; the stages in
:mod:`blog_importer.transformers.stages` only know *what* to build.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

# Sub-element selectors shared by several stages
HERO = ".splunkBlogsArticle-header-Wrapper"
HERO_IMAGE = ".splunkBlogsArticle-header-hero-imageContainer img"
READ_TIME = "div.splunkBlogsArticle-header-readTime"
AUTHOR_BADGE = ".splunkBlogsAuthorBadge"
AUTHOR_NAME_LINK = ".splunkBlogsAuthorBadge-authorName a"
AUTHOR_NAME_HEADING = "h1.splunkBlogsAuthorBadge-authorName"
AUTHOR_IMAGE = "img.splunkBlogsAuthorBadge-image-src"
AUTHOR_DESCRIPTION = "div.splunkBlogsAuthorBadge-authorDescription > p"
AUTHOR_SOCIAL_ITEMS = "div.splunkBlogsAuthorBadge-socialIcons > div"
SOCIAL_LINKS = "a.socialIcon-, div.splunkBlogsAuthorBadge-socialIcons a"
ARTICLE_TAGS = "div.splunkBlogsArticle-body-tagsTagsSection a"
FLOATING_PROMO = ".cmp-experiencefragment--floating-promo-card .main-content"
FLOATING_PROMO_CTA = "a:has(span)"

STAGE_SELECTORS: Dict[str, Optional[str]] = {
    "article_metadata": HERO,
    "author_metadata": AUTHOR_BADGE,
    "author_articles": None,
    "floating_promo": FLOATING_PROMO,
    "key_takeaways": ".splunkBlogsArticle-keyTakeaways, .cmp-key-takeaways",
    "embeds": "iframe[src], video, audio, img.vidyard-player-embed",
    "tables": ".cmp-table table, .cmp-text table, .splunkBlogsArticle-body-content table",
    "cards": ".cmp-card-list",
    "promo_cards": ".cmp-promo-card",
    "accordions": ".cmp-accordion",
    "forms": "form[id^='mktoForm_'], .cmp-form",
    "quotes": "blockquote, .cmp-quote",
    "image_float": ".cmp-image--float-left, .cmp-image--float-right",
    "center_text": ".cmp-text--center",
    "related_articles": ".splunkBlogsArticle-relatedArticles",
    "sidebar": ".splunkBlogsArticle-body-sidebar",
    "links": "a[href*='/en_us/blog/']",
}

_CHROME: Tuple[str, ...] = (
    "#panel-sharer-overlay",
    ".skipMainContent",
    ".globalcomponent-enabler-header",
    ".globalcomponent-enabler-footer",
    ".latestblog",
    ".d-done",
    "noscript",
)

EXCLUSIONS: Dict[str, Tuple[str, ...]] = {
    "article": _CHROME + (".sub-nav", ".cmp-experiencefragment--sub-nav-blogs"),
    "author": _CHROME + (".experience-fragment.experiencefragment", "iframe"),
    "xf": _CHROME
    + (
        ".cmp-experiencefragment--sub-nav-blogs",
        ".splunkBlogsArticle-body-header",
        HERO,
        ".splunkBlogsArticle-body-content",
        ".splunkBlogsArticle-body-author",
        ".splunkBlogsArticle-body-sidebarExploreMoreSection",
        ".splunkBlogsArticle-body-tags",
        ".cmp-experiencefragment--disclaimer",
        ".cmp-experiencefragment--about-splunk",
        ".cmp-experiencefragment--subscribe-footer",
        "iframe",
    ),
}

# Promo card style markers, checked in this order to build the block variants
PROMO_CARD_VARIANTS: Tuple[Tuple[str, str, str], ...] = (
    # (variant label, marker class, inline style fragment without whitespace)
    ("gradient border", "promo-card--gradient-border", "linear-gradient"),
    ("border", "promo-card--border", "border:1pxsolid"),
    ("shadow", "promo-card--shadow", "box-shadow"),
    ("gray", "promo-card--gray", "background-color:#f2f2f2"),
)
