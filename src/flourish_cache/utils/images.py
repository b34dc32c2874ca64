"""Thumbnail URL helpers.

Pexels serves resized variants through ``w`` / ``q`` query parameters;
other hosts are passed through untouched.
"""

SRCSET_WIDTHS = (400, 600, 800)


def optimized_image_url(url: str, width: int | None = None) -> str:
    """Return a resized variant of ``url`` when the host supports it."""
    if not url:
        return ""

    if "pexels.com" in url and width:
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}w={width}&q=75"

    return url


def image_srcset(url: str) -> str:
    """Build a responsive ``srcset`` value for a thumbnail."""
    if not url:
        return ""
    return ", ".join(f"{optimized_image_url(url, width)} {width}w" for width in SRCSET_WIDTHS)
