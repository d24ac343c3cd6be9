"""
Postprocessor that turns editor video containers into clickable thumbnails.

Structure produced in place of the container's children:
<div class="video-preview" id="video_..." data-video-src="..." style="...">
  <video muted preload="metadata" style="..."><source src="..." type="video/mp4"></video>
  <div style="...overlay..."><svg ...><path d="M8 5v14l11-7z" .../></svg></div>
</div>

The container element itself is reused, never wrapped, and an existing id is
kept, so a second pass over rewritten markup changes nothing.
"""

import hashlib
import logging

from ...media import PREVIEW_CLASS, VIDEO_SRC_ATTR, resolve_preview_source
from ..config import get_content_config
from .utils import serialize_shared_soup, shared_soup

logger = logging.getLogger(__name__)

PLAY_GLYPH_PATH = "M8 5v14l11-7z"

OVERLAY_STYLE = (
    "position: absolute; top: 0; left: 0; right: 0; bottom: 0; display: flex; "
    "align-items: center; justify-content: center; pointer-events: none;"
)
PREVIEW_VIDEO_STYLE = "width: 100%; height: 100%; object-fit: cover; pointer-events: none;"


def preview_style(width: int, height: int) -> str:
    return (
        f"position: relative; max-width: {width}px; width: {width}px; height: {height}px; "
        "border-radius: 8px; border: 1px solid #e5e7eb; box-shadow: 0 2px 8px rgba(0,0,0,0.1); "
        "margin: 0 4px 4px 0; display: inline-block; vertical-align: top; background: #000; "
        "cursor: pointer; overflow: hidden; transition: all 0.2s ease;"
    )


def preview_id(src: str, index: int) -> str:
    """Deterministic element id for the ``index``-th preview of ``src``."""
    digest = hashlib.sha1(f"{index}:{src}".encode("utf-8")).hexdigest()
    return f"video_{digest[:9]}"


def rewrite_video_previews(html: str, context: dict) -> str:
    config = get_content_config()
    soup = shared_soup(html, context)
    style = preview_style(config["preview_width"], config["preview_height"])

    for index, preview in enumerate(soup.find_all("div", class_=PREVIEW_CLASS)):
        src = resolve_preview_source(preview)
        if not src:
            logger.debug("Video preview %d has no source, leaving it as is", index)
            continue

        if not preview.get("id"):
            preview["id"] = preview_id(src, index)
        preview["style"] = style
        preview[VIDEO_SRC_ATTR] = src

        preview.clear()

        video = soup.new_tag(
            "video",
            attrs={"style": PREVIEW_VIDEO_STYLE, "muted": "", "preload": "metadata"},
        )
        video.append(soup.new_tag("source", attrs={"src": src, "type": "video/mp4"}))
        preview.append(video)

        overlay = soup.new_tag("div", attrs={"style": OVERLAY_STYLE})
        glyph = soup.new_tag(
            "svg",
            attrs={
                "width": "48",
                "height": "48",
                "viewBox": "0 0 24 24",
                "style": "filter: drop-shadow(0 4px 8px rgba(0,0,0,0.4));",
            },
        )
        glyph.append(
            soup.new_tag("path", attrs={"d": PLAY_GLYPH_PATH, "fill": "rgba(255,255,255,0.9)"})
        )
        overlay.append(glyph)
        preview.append(overlay)

    return serialize_shared_soup(context)


def video_preview_rewriter_default(html: str, context: dict) -> str:
    """Register this in POSTPROCESSORS."""
    return rewrite_video_previews(html, context)
