"""BeautifulSoup helpers shared by the display rewriters."""

from __future__ import annotations

from bs4 import BeautifulSoup

PARSER = "html.parser"

_SOUP_KEY = "__display_soup"
_SOURCE_KEY = "__display_soup_source"


def parse_fragment(html: str) -> BeautifulSoup:
    """Parse a content blob without adding <html>/<body> wrappers."""
    return BeautifulSoup(html or "", PARSER)


def shared_soup(html: str, context: dict) -> BeautifulSoup:
    """Return the tree for ``html`` cached in the rendering context.

    Rewriters run back to back on the same markup. The tree is only reparsed
    when the string handed to a rewriter differs from the last serialisation.
    """
    soup = context.get(_SOUP_KEY)
    if soup is None or context.get(_SOURCE_KEY) != html:
        soup = parse_fragment(html)
        context[_SOUP_KEY] = soup
        context[_SOURCE_KEY] = html
    return soup


def serialize_shared_soup(context: dict) -> str:
    soup = context.get(_SOUP_KEY)
    html = str(soup) if soup is not None else ""
    context[_SOURCE_KEY] = html
    return html


def drop_shared_soup(context: dict) -> None:
    context.pop(_SOUP_KEY, None)
    context.pop(_SOURCE_KEY, None)

