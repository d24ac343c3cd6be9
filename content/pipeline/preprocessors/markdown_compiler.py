"""
Preprocessor that compiles legacy markdown into structured markup.

Supported subset:
    ```code block```          → styled block, whitespace kept verbatim
    `inline code`             → styled <code>
    ![alt](url)               → centered image figure with caption
    [Vídeo: name](url)        → bordered native video with caption
    **bold**                  → <strong>
    *italic*                  → <em>
    newline                   → <br/>

Code, image and video rules run first, in the order above, and claim their
text: nothing inside a claimed node is seen by a later rule. Bold and italic
then run over the whole run of text with each claimed node standing in as a
single placeholder character, so emphasis can wrap code or media. Their
contents are partitioned recursively. Unmatched markers stay literal text.
"""

import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup

from ...media import OPEN_MEDIA_ATTR, open_media_attribute
from ..config import get_content_config
from ..dialect import Dialect

LEGACY_CONTAINER_CLASS = "legacy-content"

_NEWLINE_RE = re.compile(r"\n")


@dataclass
class _Node:
    kind: str
    groups: tuple = ()
    children: list = field(default_factory=list)


@dataclass(frozen=True)
class _Rule:
    kind: str
    pattern: re.Pattern
    # Inline containers keep partitioning their inner text
    container: bool = False


# Stands in for a claimed node while the emphasis rules run
_ATOM = "\ue000"

# Rules that claim text. Their contents are never seen by later rules.
RULES = (
    _Rule("fence", re.compile(r"```([\s\S]*?)```")),
    _Rule("code", re.compile(r"`([^`]+)`")),
    _Rule("image", re.compile(r"!\[(.*?)\]\((.*?)\)")),
    _Rule("video", re.compile(r"\[V[íi]deo: (.*?)\]\((.*?)\)")),
    # A literal placeholder left in the text is claimed last, so every
    # placeholder in the emphasis stream stands for exactly one claimed node
    _Rule("text", re.compile(f"({_ATOM})")),
)

EMPHASIS_RULES = (
    _Rule("strong", re.compile(r"\*\*(.+?)\*\*"), container=True),
    _Rule("em", re.compile(r"\*([^*\n]+?)\*"), container=True),
)

FIGURE_STYLE = "margin: 16px 0; text-align: center;"
CAPTION_STYLE = "font-size: 14px; color: #6b7280; margin-top: 8px; text-align: center;"
VIDEO_CAPTION_STYLE = (
    "font-size: 14px; color: #6b7280; margin-top: 8px; display: flex; "
    "align-items: center; gap: 4px; justify-content: center;"
)
CODE_BLOCK_STYLE = (
    "margin: 16px 0; padding: 16px; background-color: #f3f4f6; "
    "border-radius: 8px; border: 1px solid #e5e7eb;"
)
CODE_BLOCK_INNER_STYLE = (
    "font-size: 14px; font-family: monospace; color: #374151; white-space: pre-wrap;"
)
INLINE_CODE_STYLE = (
    "padding: 2px 6px; background-color: #f3f4f6; color: #374151; "
    "border-radius: 4px; font-size: 14px; font-family: monospace;"
)
VIDEO_ICON_PATH = (
    "M17 10.5V7c0-.55-.45-1-1-1H4c-.55 0-1 .45-1 1v10c0 .55.45 1 1 1h12"
    "c.55 0 1-.45 1-1v-3.5l4 4v-11l-4 4z"
)
VIDEO_SOURCE_TYPES = ("video/mp4", "video/webm", "video/mov")
VIDEO_FALLBACK_TEXT = "Seu navegador não suporta vídeo HTML5."


def _partition(segments, rule):
    out = []
    for segment in segments:
        if isinstance(segment, _Node):
            if segment.children:
                segment.children = _partition(segment.children, rule)
            out.append(segment)
            continue

        position = 0
        for match in rule.pattern.finditer(segment):
            if match.start() > position:
                out.append(segment[position:match.start()])
            node = _Node(rule.kind, match.groups())
            if rule.container:
                node.children = [match.group(1)]
            out.append(node)
            position = match.end()
        if position < len(segment):
            out.append(segment[position:])
    return out


def _split_lines(segments):
    out = []
    for segment in segments:
        if isinstance(segment, _Node):
            if segment.children:
                segment.children = _split_lines(segment.children)
            out.append(segment)
            continue
        lines = _NEWLINE_RE.split(segment)
        for index, line in enumerate(lines):
            if index:
                out.append(_Node("br"))
            if line:
                out.append(line)
    return out


def _flatten(segments):
    """Replace each claimed node by a placeholder. Returns (stream, nodes)."""
    nodes = [segment for segment in segments if isinstance(segment, _Node)]
    stream = "".join(_ATOM if isinstance(segment, _Node) else segment for segment in segments)
    return stream, nodes


def _restore(segments, nodes):
    """Put claimed nodes back in place of their placeholders, in order."""
    out = []
    for segment in segments:
        if isinstance(segment, _Node):
            if segment.children:
                segment.children = _restore(segment.children, nodes)
            out.append(segment)
            continue
        for index, piece in enumerate(segment.split(_ATOM)):
            if index:
                out.append(next(nodes))
            if piece:
                out.append(piece)
    return out


def tokenize(text: str) -> list:
    """Split legacy markdown into plain-text runs and nodes."""
    segments = [text]
    for rule in RULES:
        segments = _partition(segments, rule)

    stream, claimed = _flatten(segments)
    segments = [stream]
    for rule in EMPHASIS_RULES:
        segments = _partition(segments, rule)

    return _split_lines(_restore(segments, iter(claimed)))


def _build_image(soup, alt, src, config):
    width = config["figure_image_width"]
    figure = soup.new_tag("div", attrs={"class": "media-figure", "style": FIGURE_STYLE})
    img = soup.new_tag(
        "img",
        attrs={
            "src": src,
            "alt": alt,
            "style": (
                f"max-width: {width}px; width: {width}px; height: auto; "
                "border-radius: 16px; border: 2px solid #e5e7eb; cursor: pointer;"
            ),
            "loading": "lazy",
            OPEN_MEDIA_ATTR: open_media_attribute(src, alt, False),
        },
    )
    figure.append(img)
    caption = soup.new_tag("p", attrs={"class": "media-caption", "style": CAPTION_STYLE})
    caption.string = alt
    figure.append(caption)
    return figure


def _build_video(soup, name, src, config):
    figure = soup.new_tag("div", attrs={"class": "media-figure", "style": FIGURE_STYLE})
    frame = soup.new_tag(
        "div",
        attrs={
            "style": (
                "position: relative; border-radius: 8px; overflow: hidden; "
                "border: 1px solid #e5e7eb; display: inline-block; "
                f"max-width: {config['video_link_max_width']}px;"
            )
        },
    )
    video = soup.new_tag(
        "video",
        attrs={
            "controls": "",
            "preload": "metadata",
            "style": "width: 100%; height: auto; cursor: pointer;",
            OPEN_MEDIA_ATTR: open_media_attribute(src, name, True),
        },
    )
    for source_type in VIDEO_SOURCE_TYPES:
        video.append(soup.new_tag("source", attrs={"src": src, "type": source_type}))
    video.append(VIDEO_FALLBACK_TEXT)
    frame.append(video)
    figure.append(frame)

    caption = soup.new_tag("p", attrs={"class": "media-caption", "style": VIDEO_CAPTION_STYLE})
    icon = soup.new_tag(
        "svg",
        attrs={
            "width": "16",
            "height": "16",
            "viewBox": "0 0 24 24",
            "fill": "currentColor",
            "style": "color: #2563eb;",
        },
    )
    icon.append(soup.new_tag("path", attrs={"d": VIDEO_ICON_PATH}))
    caption.append(icon)
    caption.append(name)
    figure.append(caption)
    return figure


def _render_nodes(soup, parent, segments, config):
    for segment in segments:
        if not isinstance(segment, _Node):
            parent.append(segment)
            continue

        kind = segment.kind
        if kind == "fence":
            block = soup.new_tag("div", attrs={"style": CODE_BLOCK_STYLE})
            code = soup.new_tag("code", attrs={"style": CODE_BLOCK_INNER_STYLE})
            code.string = segment.groups[0]
            block.append(code)
            parent.append(block)
        elif kind == "code":
            code = soup.new_tag("code", attrs={"style": INLINE_CODE_STYLE})
            code.string = segment.groups[0]
            parent.append(code)
        elif kind == "image":
            alt, src = segment.groups
            parent.append(_build_image(soup, alt, src, config))
        elif kind == "video":
            name, src = segment.groups
            parent.append(_build_video(soup, name, src, config))
        elif kind in ("strong", "em"):
            tag = soup.new_tag(kind)
            _render_nodes(soup, tag, segment.children, config)
            parent.append(tag)
        elif kind == "text":
            parent.append(segment.groups[0])
        elif kind == "br":
            parent.append(soup.new_tag("br"))


def compile_markdown(content: str) -> str:
    """
    Compile legacy markdown into structured markup.

    The result is wrapped in a single ``div.legacy-content`` so it is always
    recognized as structured markup afterwards.
    """
    config = get_content_config()
    soup = BeautifulSoup("", "html.parser")
    container = soup.new_tag("div", attrs={"class": LEGACY_CONTAINER_CLASS})
    _render_nodes(soup, container, tokenize(content or ""), config)
    soup.append(container)
    return str(soup)


def markdown_compiler_default(text: str, context: dict) -> str:
    """Register this in PREPROCESSORS. Runs only for legacy markdown."""
    if context.get("dialect") is not Dialect.LEGACY_MARKDOWN:
        return text
    return compile_markdown(text)
