# content/pipeline/postprocessors/__init__.py

from .display_cleaner import display_cleaner_default
from .image_rewriter import image_rewriter_default
from .video_preview_rewriter import video_preview_rewriter_default

# Media rewriters share one parsed tree through the rendering context
REWRITERS = [
    image_rewriter_default,  # Clickable, lazily loaded images
    video_preview_rewriter_default,  # Thumbnail + play glyph for video containers
]

POSTPROCESSORS = [
    *REWRITERS,
    display_cleaner_default,  # Must be last: works on the serialized string
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html


def rewrite_for_display(html, context=None):
    """Run only the media rewriters (no display stripping)."""
    context = {} if context is None else context
    for processor in REWRITERS:
        html = processor(html, context)
    return html
