"""
Dialect detection for content blobs.

A blob is either structured markup written by the editor or legacy
markdown/plain text. Detection is a presence test over a fixed set of tag
and attribute signatures, not a parse.
"""

import enum

STRUCTURED_SIGNATURES = (
    "<div",
    "<img",
    "<video",
    "<audio",
    "<pre",
    "<code",
    "<strong",
    "<em",
    "<span",
    "<p>",
    "<br>",
    "<a",
    "<h1",
    "<h2",
    "<h3",
    "style=",
    "onclick=",
    "class=",
)

# Older records flagged attached media with these glyphs instead of markup.
# Base code points only, so both the emoji and text presentations match.
LEGACY_MEDIA_MARKERS = (
    "\U0001F5BC",  # frame with picture
    "\U0001F3AC",  # clapper board
    "\U0001F3B5",  # musical note
    "\U0001F4CE",  # paperclip
)


class Dialect(enum.Enum):
    STRUCTURED_MARKUP = "structured_markup"
    LEGACY_MEDIA = "legacy_media"
    LEGACY_MARKDOWN = "legacy_markdown"

    @property
    def is_structured(self):
        """Legacy media records are finalized markup and count as structured."""
        return self is not Dialect.LEGACY_MARKDOWN


def classify(content: str) -> Dialect:
    """Return the dialect of ``content``."""
    if not content:
        return Dialect.LEGACY_MARKDOWN

    if any(signature in content for signature in STRUCTURED_SIGNATURES):
        return Dialect.STRUCTURED_MARKUP

    if any(marker in content for marker in LEGACY_MEDIA_MARKERS):
        return Dialect.LEGACY_MEDIA

    return Dialect.LEGACY_MARKDOWN


def is_structured_markup(content: str) -> bool:
    return classify(content).is_structured
