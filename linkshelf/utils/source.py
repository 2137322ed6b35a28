"""Derive a human-readable source name from a bookmark URL."""

from __future__ import annotations

from urllib.parse import urlsplit

# Registered domains mapped to display names; subdomains match too
KNOWN_SOURCES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("youtube.com", "youtu.be"), "YouTube"),
    (("medium.com",), "Medium"),
    (("substack.com",), "Substack"),
    (("github.com",), "GitHub"),
    (("twitter.com", "x.com"), "Twitter"),
    (("linkedin.com",), "LinkedIn"),
)


def extract_source(url: str) -> str:
    """Map a URL to the name of the site it belongs to.

    Examples:
        >>> extract_source("https://www.youtube.com/watch?v=abc")
        'YouTube'
        >>> extract_source("https://blog.example.com/post")
        'Example'
        >>> extract_source("not a url")
        'Unknown'
    """
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return "Unknown"
    if not hostname:
        return "Unknown"

    domain = hostname.removeprefix("www.")

    for known, name in KNOWN_SOURCES:
        if any(domain == k or domain.endswith("." + k) for k in known):
            return name

    parts = domain.split(".")
    if len(parts) >= 2:
        label = parts[-2]
        return label[:1].upper() + label[1:]
    return domain
