"""
Removes edit-mode and session-only attributes from content blobs.

Two modes:
- FOR_DISPLAY drops edit-mode flags and leftover delete controls before a
  blob reaches a rendering surface.
- FOR_STORAGE drops edit-mode flags and click markers before a blob is
  persisted. Delete controls are left alone there.

Both collapse whitespace, except inside <pre> and <code> elements.
"""

import enum
import re

_EDIT_MODE_RE = re.compile(r"""data-edit-mode=(?:"[^"]*"|'[^']*')""")
_CLICK_MARKER_RE = re.compile(
    r"""data-(?:click-handled|listener-added)=(?:"[^"]*"|'[^']*')"""
)

# Delete controls: a button titled "Remover ..." or a button holding only a trash glyph
_DELETE_TITLED_RE = re.compile(
    r"""<button\b[^>]*\stitle=(?:"Remover [^"]*"|'Remover [^']*')[^>]*>[\s\S]*?</button>"""
)
_DELETE_GLYPH_RE = re.compile(r"<button\b[^>]*>\s*\U0001F5D1\ufe0f?\s*</button>")

_DISPLAY_REMOVALS = (_EDIT_MODE_RE, _DELETE_TITLED_RE, _DELETE_GLYPH_RE)
_STORAGE_REMOVALS = (_EDIT_MODE_RE, _CLICK_MARKER_RE)

# Segments whose whitespace is content, not formatting
_VERBATIM_RE = re.compile(r"(<(pre|code)\b[^>]*>[\s\S]*?</\2\s*>)", re.IGNORECASE)

# ASCII whitespace only: non-breaking spaces are content
_ASCII_WHITESPACE = " \t\n\r\f\v"
_WHITESPACE_RE = re.compile(f"[{_ASCII_WHITESPACE}]+")
_SPACE_BEFORE_CLOSE_RE = re.compile(f"[{_ASCII_WHITESPACE}]+>")


class StripMode(enum.Enum):
    FOR_STORAGE = "storage"
    FOR_DISPLAY = "display"


def _collapse_whitespace(content: str) -> str:
    parts = _VERBATIM_RE.split(content)
    out = []
    # split() yields text, verbatim segment, tag name, text, ...
    for index, part in enumerate(parts):
        kind = index % 3
        if kind == 0:
            part = _WHITESPACE_RE.sub(" ", part)
            part = _SPACE_BEFORE_CLOSE_RE.sub(">", part)
            out.append(part)
        elif kind == 1:
            out.append(_collapse_opening_tag(part))
    return "".join(out)


def _collapse_opening_tag(segment: str) -> str:
    """Tidy the opening tag of a verbatim segment, keep its body untouched."""
    end = segment.index(">") + 1
    tag = _WHITESPACE_RE.sub(" ", segment[:end])
    tag = _SPACE_BEFORE_CLOSE_RE.sub(">", tag)
    return tag + segment[end:]


def _remove_until_stable(content: str, patterns) -> str:
    """Apply the removals until nothing changes.

    Removing one attribute can join the text around it into another one.
    """
    while True:
        cleaned = content
        for pattern in patterns:
            cleaned = pattern.sub("", cleaned)
        if cleaned == content:
            return cleaned
        content = cleaned


def strip(content, mode: StripMode):
    """Strip ``content`` for ``mode``. Empty input is returned as is."""
    if not content:
        return content

    if mode is StripMode.FOR_DISPLAY:
        cleaned = _remove_until_stable(content, _DISPLAY_REMOVALS)
        return _collapse_whitespace(cleaned).strip(_ASCII_WHITESPACE)

    cleaned = _remove_until_stable(content, _STORAGE_REMOVALS)
    return _collapse_whitespace(cleaned)


def clean_content_for_display(content):
    return strip(content, StripMode.FOR_DISPLAY)


def clean_content_for_saving(content):
    return strip(content, StripMode.FOR_STORAGE)
