"""
Postprocessor that turns editor images into clickable display images.

Every <img src> is re-emitted with a small fixed width, rounded border, the
hover-scale class, lazy loading and the interaction attribute binding
(src, alt, false) for the media bridge. All other attributes are dropped, so
rewriting an already rewritten image yields the same element.
"""

from ...media import OPEN_MEDIA_ATTR, open_media_attribute
from ..config import get_content_config
from .utils import serialize_shared_soup, shared_soup

ZOOMABLE_CLASS = "media-zoomable"


def display_image_style(width: int) -> str:
    return (
        f"max-width: {width}px; width: {width}px; height: auto; border-radius: 8px; "
        "border: 1px solid #e5e7eb; cursor: pointer; transition: all 0.2s ease; "
        "box-shadow: 0 2px 8px rgba(0,0,0,0.1); margin: 0 4px 4px 0; "
        "display: inline-block; vertical-align: top;"
    )


def rewrite_images(html: str, context: dict) -> str:
    config = get_content_config()
    soup = shared_soup(html, context)
    style = display_image_style(config["image_display_width"])

    for img in soup.find_all("img"):
        src = img.get("src")
        if not src:
            continue
        alt = img.get("alt", "")
        img.attrs = {
            "src": src,
            "alt": alt,
            "class": [ZOOMABLE_CLASS],
            "style": style,
            "loading": "lazy",
            OPEN_MEDIA_ATTR: open_media_attribute(src, alt, False),
        }

    return serialize_shared_soup(context)


def image_rewriter_default(html: str, context: dict) -> str:
    """Register this in POSTPROCESSORS."""
    return rewrite_images(html, context)
