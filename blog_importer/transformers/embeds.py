"""
Embed provider classification.

A single ordered rule table decides which block an embedded player becomes.
Rules are checked top to bottom against the embed URL and the first rule
whose host fragment appears in it wins; anything unmatched is a generic
``Embed``.
"""

from __future__ import annotations

from typing import Tuple
from urllib.parse import urlparse

EMBED_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Audio", ("soundcloud.com", "spotify.com", "buzzsprout.com", "anchor.fm", "podcasts.apple.com")),
    ("Video", ("youtube.com", "youtube-nocookie.com", "youtu.be", "vimeo.com", "brightcove", "wistia")),
    ("Slideshare", ("slideshare.net",)),
    ("Vidyard", ("vidyard.com",)),
)

DEFAULT_EMBED = "Embed"

# Images served by these hosts are player thumbnails, not site assets
THIRD_PARTY_VIDEO_HOSTS: Tuple[str, ...] = (
    "youtube.com",
    "ytimg.com",
    "vimeo.com",
    "vimeocdn.com",
    "vidyard.com",
    "brightcove",
    "wistia",
)


def classify_embed(src: str) -> str:
    """Return the block name for an embed pointing at ``src``."""
    target = (src or "").lower()
    for name, hosts in EMBED_RULES:
        if any(h in target for h in hosts):
            return name
    return DEFAULT_EMBED


def is_third_party_video(src: str) -> bool:
    host = urlparse(src or "").netloc.lower()
    return any(h in host for h in THIRD_PARTY_VIDEO_HOSTS)
