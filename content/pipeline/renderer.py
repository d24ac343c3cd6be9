# content/pipeline/renderer.py

import logging

from .dialect import Dialect, classify
from .postprocessors import apply_postprocessors
from .preprocessors import apply_preprocessors
from .stripper import StripMode, strip

logger = logging.getLogger(__name__)


def render_content(text, context=None):
    """
    Display pipeline: classify, compile legacy markdown, rewrite media, strip.

    Args:
        text: Content blob as stored
        context: Optional dict shared by the processors; receives the detected
            ``dialect``

    Returns:
        Display markup. Legacy media records are returned unmodified.
    """
    if not text:
        return ""
    context = {} if context is None else context

    dialect = classify(text)
    context["dialect"] = dialect
    logger.debug("Rendering %d chars as %s", len(text), dialect.value)

    if dialect is Dialect.LEGACY_MEDIA:
        return text

    # Pre-processing: legacy markdown becomes structured markup
    text = apply_preprocessors(text, context)

    # Post-processing: media rewriters, then display stripping
    return apply_postprocessors(text, context)


def prepare_for_storage(text):
    """Final transformation before a blob is handed to storage."""
    return strip(text, StripMode.FOR_STORAGE)
