"""
Media interaction bridge.

Connects rendered media to the expand/collapse overlay of one display
surface. Each surface owns its own MediaBridge and hands the open capability
to whatever renders media, so several surfaces can coexist.

The overlay is an explicit state machine:

    CLOSED --open--> OPEN --close--> CLOSING --(closing delay)--> CLOSED

Open intents are refused while CLOSING, which keeps a double click during the
close transition from reopening the overlay. Each bound element also ignores
repeated clicks inside its debounce window.

Rendered content is a BeautifulSoup tree. ``attach`` is the post-render step
(bindings never survive a re-render), ``rescan`` picks up elements inserted
into the attached tree outside a render.
"""

from __future__ import annotations

import enum
import functools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from bs4 import Tag

from .media import (
    DOWNLOAD_NAME_ATTR,
    DOWNLOAD_URL_ATTR,
    OPEN_MEDIA_ATTR,
    PREVIEW_CLASS,
    MediaDescriptor,
    MediaKind,
    has_class,
    read_open_media,
    resolve_preview_source,
)
from .pipeline.config import get_content_config

logger = logging.getLogger(__name__)

BOUND_ATTR = "data-listener-added"
EDIT_MODE_ATTR = "data-edit-mode"


class ModalPhase(enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    CLOSING = "closing"


@dataclass(frozen=True)
class ModalState:
    source: str
    label: str
    is_video: bool


@dataclass
class Binding:
    element: Tag
    media: MediaDescriptor
    action: str  # "open" or "download"
    handler: Callable[[], bool] = field(default=None, repr=False)
    last_fired: Optional[float] = None


def _is_bindable(tag: Tag) -> bool:
    return (
        has_class(tag, PREVIEW_CLASS)
        or tag.has_attr(OPEN_MEDIA_ATTR)
        or tag.has_attr(DOWNLOAD_URL_ATTR)
    )


class MediaBridge:
    def __init__(
        self,
        display_mode: bool = True,
        download: Optional[Callable[[str, str], None]] = None,
        clock: Optional[Callable[[], float]] = None,
        debounce_seconds: Optional[float] = None,
        closing_delay_seconds: Optional[float] = None,
    ):
        config = get_content_config()
        self.display_mode = display_mode
        self.debounce_seconds = (
            config["debounce_seconds"] if debounce_seconds is None else debounce_seconds
        )
        self.closing_delay_seconds = (
            config["closing_delay_seconds"]
            if closing_delay_seconds is None
            else closing_delay_seconds
        )
        self.preview_label = config["preview_label"]
        self._download = download
        self._clock = clock or time.monotonic

        self._phase = ModalPhase.CLOSED
        self._state: Optional[ModalState] = None
        self._closing_since: Optional[float] = None
        self._open_handler: Optional[Callable[[str, str, bool], bool]] = None
        self._bindings: List[Binding] = []
        self._tree = None
        self._torn_down = False

    # Overlay state

    @property
    def phase(self) -> ModalPhase:
        if (
            self._phase is ModalPhase.CLOSING
            and self._clock() - self._closing_since >= self.closing_delay_seconds
        ):
            self._phase = ModalPhase.CLOSED
            self._closing_since = None
        return self._phase

    @property
    def state(self) -> Optional[ModalState]:
        return self._state

    @property
    def is_open(self) -> bool:
        return self.phase is ModalPhase.OPEN

    def register_open_handler(self) -> Callable[[str, str, bool], bool]:
        """Install and return the open capability for this surface.

        An edit-mode bridge returns a capability that always declines, so
        clicking media while editing never opens the overlay.
        """
        if self.display_mode:
            self._open_handler = self.open
        else:
            self._open_handler = self._decline
        return self._open_handler

    @property
    def open_handler(self):
        return self._open_handler

    def _decline(self, source, label, is_video):
        logger.debug("Edit-mode surface declined to open %s", source)
        return False

    def open(self, source: str, label: str, is_video: bool) -> bool:
        if self._torn_down or not self.display_mode or not source:
            return False
        if self.phase is ModalPhase.CLOSING:
            logger.debug("Ignoring open of %s while the overlay is closing", source)
            return False
        self._state = ModalState(source, label or "", bool(is_video))
        self._phase = ModalPhase.OPEN
        return True

    def close(self) -> bool:
        """Clear the overlay immediately and arm the closing guard."""
        if self.phase is not ModalPhase.OPEN:
            return False
        self._state = None
        self._phase = ModalPhase.CLOSING
        self._closing_since = self._clock()
        return True

    def modal_props(self) -> dict:
        """Values for the overlay collaborator."""
        state = self._state if self.is_open else None
        return {
            "is_open": state is not None,
            "source": state.source if state else "",
            "label": state.label if state else "",
            "is_video": state.is_video if state else False,
            "on_close": self.close,
        }

    # Bindings

    @property
    def bindings(self) -> List[Binding]:
        return list(self._bindings)

    @property
    def handler_count(self) -> int:
        return len(self._bindings)

    def attach(self, tree) -> List[Binding]:
        """Post-render step: forget the previous tree and bind the new one."""
        self._bindings = []
        self._tree = tree
        return self.scan_and_bind(tree)

    def rescan(self) -> List[Binding]:
        if self._tree is None:
            return []
        return self.scan_and_bind(self._tree)

    def scan_and_bind(self, tree) -> List[Binding]:
        """Bind every bindable element not bound yet. Returns the new bindings."""
        if self._torn_down:
            return []

        added = []
        for element in tree.find_all(_is_bindable):
            if element.get(BOUND_ATTR) == "true":
                continue
            if element.get(EDIT_MODE_ATTR) == "true":
                logger.debug("Skipping media element in edit mode")
                continue

            binding = self._binding_for(element)
            if binding is None:
                continue

            binding.handler = functools.partial(self._fire, binding)
            element[BOUND_ATTR] = "true"
            self._bindings.append(binding)
            added.append(binding)
            logger.debug("Bound %s handler for %s", binding.action, binding.media.source)

        return added

    def _binding_for(self, element: Tag) -> Optional[Binding]:
        if has_class(element, PREVIEW_CLASS):
            src = resolve_preview_source(element)
            if not src:
                logger.debug("Video preview without a source, not binding")
                return None
            media = MediaDescriptor(src, self.preview_label, MediaKind.VIDEO)
            return Binding(element, media, "open")

        if element.has_attr(OPEN_MEDIA_ATTR):
            media = read_open_media(element)
            return Binding(element, media, "open") if media else None

        if self._download is None:
            return None
        url = element.get(DOWNLOAD_URL_ATTR)
        if not url:
            return None
        media = MediaDescriptor(url, element.get(DOWNLOAD_NAME_ATTR, ""), MediaKind.FILE)
        return Binding(element, media, "download")

    def _fire(self, binding: Binding) -> bool:
        media = binding.media
        if binding.action == "open" and self.phase is ModalPhase.CLOSING:
            return False

        now = self._clock()
        if binding.last_fired is not None and now - binding.last_fired < self.debounce_seconds:
            logger.debug("Debounced click on %s", media.source)
            return False
        binding.last_fired = now

        if binding.action == "download":
            self._download(media.source, media.label)
            return True

        opener = self._open_handler or self.open
        return opener(media.source, media.label, media.is_video)

    def click(self, element: Tag) -> bool:
        """Dispatch a click on ``element`` to its handler, if it is bound."""
        for binding in self._bindings:
            if binding.element is element:
                return binding.handler()
        return False

    def teardown(self) -> None:
        """Drop every handler and capability. A torn-down bridge never opens."""
        self._bindings = []
        self._tree = None
        self._open_handler = None
        self._state = None
        self._phase = ModalPhase.CLOSED
        self._closing_since = None
        self._torn_down = True
