from ..stripper import StripMode, strip
from .utils import drop_shared_soup


def display_cleaner_default(html: str, context: dict) -> str:
    """Last postprocessor: strip edit-mode leftovers from the rewritten markup."""
    drop_shared_soup(context)
    return strip(html, StripMode.FOR_DISPLAY)
