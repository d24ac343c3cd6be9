"""
Media vocabulary shared by the pipeline, the editor and the media bridge.

- MediaKind / MediaDescriptor: what a piece of media is, re-derived from a
  content blob whenever it is needed.
- UploadedFile: the descriptor handed over by the upload widget.
- media_markup(): the media container inserted into the editor for an upload.
- The interaction attribute read by the bridge (``data-open-media``).
"""

from __future__ import annotations

import enum
import json
import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from .pipeline.config import get_content_config

logger = logging.getLogger(__name__)

OPEN_MEDIA_ATTR = "data-open-media"
VIDEO_SRC_ATTR = "data-video-src"
DOWNLOAD_URL_ATTR = "data-download-url"
DOWNLOAD_NAME_ATTR = "data-download-name"
PREVIEW_CLASS = "video-preview"

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".svg", ".bmp", ".ico", ".gif"}
VIDEO_EXTENSIONS = {".mp4", ".webm", ".mov", ".avi", ".mkv", ".m4v"}
AUDIO_EXTENSIONS = {".mp3", ".wav", ".ogg", ".m4a", ".flac", ".aac"}

CONTAINER_STYLE = "margin: 16px 0; text-align: center; user-select: none; clear: both;"
BOX_STYLE = (
    "margin: 16px 0; padding: 12px; border: 1px solid #e5e7eb; border-radius: 8px; "
    "background: white; box-shadow: 0 1px 3px rgba(0,0,0,0.1); user-select: none; clear: both;"
)
DOWNLOAD_BUTTON_STYLE = (
    "background: #3b82f6; color: white; border: none; padding: 6px 12px; "
    "border-radius: 4px; font-size: 11px; cursor: pointer;"
)
NAME_STYLE = "font-size: 14px; color: #374151; font-weight: 500;"


class MediaKind(enum.Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"


@dataclass(frozen=True)
class MediaDescriptor:
    source: str
    label: str
    kind: MediaKind
    size: Optional[int] = None

    @property
    def is_video(self) -> bool:
        return self.kind is MediaKind.VIDEO


@dataclass(frozen=True)
class UploadedFile:
    """A completed upload as reported by the upload widget."""

    url: str
    original_name: str
    size: Optional[int] = None
    mime_type: Optional[str] = None

    @property
    def kind(self) -> MediaKind:
        return classify_upload(self.original_name, self.mime_type)

    def descriptor(self) -> MediaDescriptor:
        return MediaDescriptor(self.url, self.original_name, self.kind, self.size)


def classify_upload(filename: str, mime_type: Optional[str] = None) -> MediaKind:
    """Detect the media kind from the MIME type, falling back to the extension."""
    if mime_type:
        major = mime_type.split("/", 1)[0].lower()
        if major in ("image", "video", "audio"):
            return MediaKind(major)

    ext = os.path.splitext(filename or "")[1].lower()
    if ext in IMAGE_EXTENSIONS:
        return MediaKind.IMAGE
    elif ext in VIDEO_EXTENSIONS:
        return MediaKind.VIDEO
    elif ext in AUDIO_EXTENSIONS:
        return MediaKind.AUDIO
    return MediaKind.FILE


def format_file_size(size: int) -> str:
    """Human readable size: ``0 Bytes``, ``1.5 KB``, ``2 MB``."""
    if not size:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    exponent = 0
    while value >= 1024 and exponent < len(units) - 1:
        value /= 1024
        exponent += 1
    return f"{value:.2f}".rstrip("0").rstrip(".") + f" {units[exponent]}"


def has_class(element: Tag, name: str) -> bool:
    """Whether ``element`` carries class ``name``, however bs4 stored the attribute."""
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return name in classes


# Interaction attribute


def open_media_attribute(src: str, label: str, is_video: bool) -> str:
    """Encode the (source, label, is_video) triple read by the media bridge."""
    return json.dumps({"src": src, "label": label, "video": is_video}, ensure_ascii=False)


def read_open_media(element: Tag) -> Optional[MediaDescriptor]:
    """Decode ``data-open-media`` from an element, or None if absent or malformed."""
    raw = element.get(OPEN_MEDIA_ATTR)
    if not raw:
        return None
    try:
        payload = json.loads(raw)
    except ValueError:
        logger.debug("Ignoring malformed %s value: %r", OPEN_MEDIA_ATTR, raw)
        return None
    if not isinstance(payload, dict) or not payload.get("src"):
        return None
    kind = MediaKind.VIDEO if payload.get("video") else MediaKind.IMAGE
    return MediaDescriptor(payload["src"], payload.get("label") or "", kind)


def resolve_preview_source(element: Tag) -> str:
    """Source of a video preview: its data attribute, else the nested video's source."""
    src = element.get(VIDEO_SRC_ATTR)
    if src:
        return src
    video = element.find("video")
    if video is not None:
        if video.get("src"):
            return video["src"]
        source = video.find("source", src=True)
        if source is not None:
            return source["src"]
    return ""


def describe_media(content: str) -> List[MediaDescriptor]:
    """Derive the media descriptors of a content blob, in document order."""
    soup = BeautifulSoup(content or "", "html.parser")
    label = get_content_config()["preview_label"]
    found = []
    for element in soup.find_all(True):
        if has_class(element, PREVIEW_CLASS):
            src = resolve_preview_source(element)
            if src:
                found.append(MediaDescriptor(src, label, MediaKind.VIDEO))
        elif element.has_attr(OPEN_MEDIA_ATTR):
            descriptor = read_open_media(element)
            if descriptor:
                found.append(descriptor)
        elif element.name == "img" and element.get("src"):
            found.append(MediaDescriptor(element["src"], element.get("alt", ""), MediaKind.IMAGE))
        elif element.name == "audio":
            source = element.find("source", src=True)
            if source is not None:
                container = element.find_parent("div", class_="media-audio")
                button = container.find(attrs={DOWNLOAD_URL_ATTR: True}) if container else None
                name = button.get(DOWNLOAD_NAME_ATTR, "") if button else ""
                found.append(MediaDescriptor(source["src"], name, MediaKind.AUDIO))
        elif element.has_attr(DOWNLOAD_URL_ATTR) and not element.find_parent("div", class_="media-audio"):
            found.append(
                MediaDescriptor(element[DOWNLOAD_URL_ATTR], element.get(DOWNLOAD_NAME_ATTR, ""), MediaKind.FILE)
            )
    return found


# Upload containers


def _download_button(soup, url, name, title):
    button = soup.new_tag(
        "button",
        attrs={
            "type": "button",
            "style": DOWNLOAD_BUTTON_STYLE,
            "title": title,
            DOWNLOAD_URL_ATTR: url,
            DOWNLOAD_NAME_ATTR: name,
        },
    )
    button.string = "Download"
    return button


def _image_container(soup, upload, config, edit_mode):
    width = config["figure_image_width"]
    container = soup.new_tag(
        "div",
        attrs={"contenteditable": "false", "class": "media-container media-image", "style": CONTAINER_STYLE},
    )
    container.append(
        soup.new_tag(
            "img",
            attrs={
                "src": upload.url,
                "alt": upload.original_name,
                "style": (
                    f"max-width: {width}px; width: {width}px; height: auto; border-radius: 12px; "
                    "border: 1px solid #e5e7eb; display: block; margin: 0 auto;"
                ),
            },
        )
    )
    return container


def _video_container(soup, upload, config, edit_mode):
    attrs = {
        "contenteditable": "false",
        "class": PREVIEW_CLASS,
        "style": CONTAINER_STYLE,
        VIDEO_SRC_ATTR: upload.url,
    }
    if edit_mode:
        attrs["data-edit-mode"] = "true"
    container = soup.new_tag("div", attrs=attrs)
    video = soup.new_tag(
        "video",
        attrs={
            "controls": "",
            "preload": "metadata",
            "style": (
                f"max-width: {config['upload_video_max_width']}px; height: auto; border-radius: 8px; "
                "border: 1px solid #e5e7eb; display: block; margin: 0 auto;"
            ),
        },
    )
    for source_type in ("video/mp4", "video/webm", "video/mov"):
        video.append(soup.new_tag("source", attrs={"src": upload.url, "type": source_type}))
    video.append("Seu navegador não suporta vídeo HTML5.")
    container.append(video)
    return container


def _label(soup, upload):
    text = upload.original_name
    if upload.size:
        text = f"{text} ({format_file_size(upload.size)})"
    span = soup.new_tag("span", attrs={"style": NAME_STYLE})
    span.string = text
    return span


def _audio_container(soup, upload, config, edit_mode):
    container = soup.new_tag(
        "div",
        attrs={
            "contenteditable": "false",
            "class": "media-container media-audio",
            "style": f"{BOX_STYLE} max-width: {config['upload_audio_max_width']}px; margin-left: auto; margin-right: auto;",
        },
    )
    audio = soup.new_tag("audio", attrs={"controls": "", "style": "width: 100%; height: 32px; margin-bottom: 8px;"})
    for source_type in ("audio/mpeg", "audio/wav", "audio/ogg"):
        audio.append(soup.new_tag("source", attrs={"src": upload.url, "type": source_type}))
    audio.append("Seu navegador não suporta áudio HTML5.")
    container.append(audio)

    row = soup.new_tag("div", attrs={"style": "display: flex; justify-content: space-between; align-items: center;"})
    row.append(_label(soup, upload))
    row.append(_download_button(soup, upload.url, upload.original_name, "Download do áudio"))
    container.append(row)
    return container


def _file_container(soup, upload, config, edit_mode):
    container = soup.new_tag(
        "div",
        attrs={"contenteditable": "false", "class": "media-container media-file", "style": BOX_STYLE},
    )
    row = soup.new_tag(
        "div", attrs={"style": "display: flex; align-items: center; justify-content: space-between;"}
    )
    name = soup.new_tag("div", attrs={"style": "display: flex; align-items: center; gap: 8px;"})
    clip = soup.new_tag("span", attrs={"style": "font-size: 14px; color: #6b7280;"})
    clip.string = "\U0001F4CE"
    name.append(clip)
    name.append(_label(soup, upload))
    row.append(name)
    row.append(_download_button(soup, upload.url, upload.original_name, "Download do arquivo"))
    container.append(row)
    return container


_BUILDERS = {
    MediaKind.IMAGE: _image_container,
    MediaKind.VIDEO: _video_container,
    MediaKind.AUDIO: _audio_container,
    MediaKind.FILE: _file_container,
}


def media_markup(upload: UploadedFile, edit_mode: bool = True) -> str:
    """Media container markup for a completed upload, chosen by its kind."""
    soup = BeautifulSoup("", "html.parser")
    builder = _BUILDERS[upload.kind]
    soup.append(builder(soup, upload, get_content_config(), edit_mode))
    return str(soup)
