"""
Display and editor surfaces.

A surface owns one MediaBridge. The display surface renders stored content
and binds media after every update; the editor surface holds edit-time
markup, inserts uploaded media and never lets media open the overlay.
"""

import logging
from typing import Callable, Optional

from django.contrib import messages

from .api.stats import record_quarantined_upload, record_safe_upload
from .bridge import MediaBridge
from .media import UploadedFile, media_markup
from .pipeline.postprocessors.utils import parse_fragment
from .pipeline.renderer import prepare_for_storage, render_content

logger = logging.getLogger(__name__)

# Editable blank line placed around inserted media
EDITABLE_LINE = "<div><br></div>"
_EMPTY_MARKUP = ("", "<br>")


def log_notifier(level: str, message: str) -> None:
    logger.log(logging.ERROR if level == "error" else logging.INFO, message)


def messages_notifier(request) -> Callable[[str, str], None]:
    """Notifier that reports through the Django messages framework."""
    levels = {"success": messages.SUCCESS, "error": messages.ERROR, "info": messages.INFO}

    def notify(level, message):
        messages.add_message(request, levels.get(level, messages.INFO), message)

    return notify


class DisplaySurface:
    """Renders a content blob for reading and keeps its media bound."""

    def __init__(self, bridge: Optional[MediaBridge] = None):
        self.bridge = bridge or MediaBridge(display_mode=True)
        self.open_media = self.bridge.register_open_handler()
        self.html = ""
        self.tree = None

    def update(self, content: str) -> str:
        """Render ``content``, replace the tree and bind it. Returns the markup."""
        self.html = render_content(content)
        self.tree = parse_fragment(self.html)
        bound = self.bridge.attach(self.tree)
        logger.debug("Display surface bound %d media elements", len(bound))
        return self.html

    def rescan(self):
        return self.bridge.rescan()

    def modal_props(self) -> dict:
        return self.bridge.modal_props()

    def teardown(self) -> None:
        self.bridge.teardown()
        self.open_media = None
        self.tree = None


class EditorSurface:
    """
    Edit-time surface around the embedded editor.

    Args:
        value: Initial edit-time markup
        on_change: Called with the full markup after every change
        placeholder: Text shown while the editor is empty
        edit_mode: False for an editor showing already published content
        notify: ``notify(level, message)`` for user-visible notifications
        stats_loader: Returns the upload statistics payload; may raise

    Upload outcomes feed the counters behind ``GET api/upload-stats/``: a
    success counts a safe file, a failure of the security check counts a
    quarantined one.
    """

    def __init__(
        self,
        value: str = "",
        on_change: Optional[Callable[[str], None]] = None,
        placeholder: str = "",
        edit_mode: bool = True,
        notify: Optional[Callable[[str, str], None]] = None,
        stats_loader: Optional[Callable[[], dict]] = None,
    ):
        self.value = value or ""
        self.on_change = on_change
        self.placeholder = placeholder
        self.edit_mode = edit_mode
        self.notify = notify or log_notifier
        self.stats_loader = stats_loader
        self.upload_stats = None
        self.bridge = MediaBridge(display_mode=not edit_mode)
        self.open_media = self.bridge.register_open_handler()

    @property
    def is_empty(self) -> bool:
        return self.value.strip() in _EMPTY_MARKUP

    @property
    def show_placeholder(self) -> bool:
        return bool(self.placeholder) and self.is_empty

    def set_content(self, html: str) -> None:
        self.value = html or ""
        if self.on_change is not None:
            self.on_change(self.value)

    def insert_html(self, html: str, position: Optional[int] = None) -> str:
        """
        Insert media markup and keep an editable line after it.

        An empty editor gets a blank line before and after the media so the
        cursor has somewhere to go. Otherwise the markup goes in at
        ``position`` (end of content by default).
        """
        if self.is_empty:
            updated = f"{EDITABLE_LINE}{html}{EDITABLE_LINE}"
        else:
            at = len(self.value) if position is None else max(0, min(position, len(self.value)))
            updated = f"{self.value[:at]}{html}{EDITABLE_LINE}{self.value[at:]}"
        self.set_content(updated)
        return updated

    def on_upload_success(self, upload: UploadedFile) -> str:
        markup = media_markup(upload, edit_mode=self.edit_mode)
        self.insert_html(markup)
        record_safe_upload()
        self.notify("success", f"Arquivo verificado e carregado: {upload.original_name}")
        if self.upload_stats:
            self.upload_stats["safeFiles"] = self.upload_stats.get("safeFiles", 0) + 1
        return markup

    def on_upload_error(self, error: str) -> None:
        logger.error("Upload failed: %s", error)
        record_quarantined_upload()
        self.notify("error", "Falha na verificação de segurança. Tente outro arquivo.")

    def load_upload_stats(self) -> Optional[dict]:
        """Best effort: failures are logged and never reach the user."""
        if self.stats_loader is None:
            return None
        try:
            payload = self.stats_loader()
        except Exception as e:
            logger.warning("Could not load upload stats: %s", e)
            return None
        if not isinstance(payload, dict) or not payload.get("success"):
            logger.warning("Upload stats request was not successful: %r", payload)
            return None
        self.upload_stats = dict(payload.get("stats") or {})
        return self.upload_stats

    def value_for_storage(self) -> str:
        return prepare_for_storage(self.value)
