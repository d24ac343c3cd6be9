"""Tests for the media interaction bridge."""

from django.test import SimpleTestCase, tag

from content.bridge import BOUND_ATTR, MediaBridge, ModalPhase, ModalState
from content.media import open_media_attribute
from content.pipeline.postprocessors.utils import parse_fragment


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def preview(src, **attrs):
    extra = "".join(f' {name}="{value}"' for name, value in attrs.items())
    return f'<div class="video-preview" data-video-src="{src}"{extra}></div>'


def image(src, label):
    return f"<img src=\"{src}\" data-open-media='{open_media_attribute(src, label, False)}'>"


def make_bridge(**kwargs):
    clock = FakeClock()
    kwargs.setdefault("debounce_seconds", 0.5)
    kwargs.setdefault("closing_delay_seconds", 0.3)
    bridge = MediaBridge(clock=clock, **kwargs)
    bridge.register_open_handler()
    return bridge, clock


@tag("bridge")
class ScanAndBindTests(SimpleTestCase):
    """Tests for attach/scan_and_bind/rescan."""

    def test_second_scan_binds_only_new_preview(self):
        bridge, _ = make_bridge()
        tree = parse_fragment(preview("a.mp4"))
        bridge.attach(tree)
        self.assertEqual(bridge.handler_count, 1)
        first = bridge.bindings[0]

        tree.append(parse_fragment(preview("b.mp4")).div)
        added = bridge.rescan()

        self.assertEqual(bridge.handler_count, 2)
        self.assertEqual([b.media.source for b in added], ["b.mp4"])
        self.assertIs(bridge.bindings[0], first)

    def test_already_bound_elements_are_skipped(self):
        bridge, _ = make_bridge()
        tree = parse_fragment(preview("a.mp4", **{BOUND_ATTR: "true"}) + preview("b.mp4"))
        added = bridge.attach(tree)
        self.assertEqual([b.media.source for b in added], ["b.mp4"])

    def test_scan_marks_elements_bound(self):
        bridge, _ = make_bridge()
        tree = parse_fragment(preview("a.mp4"))
        bridge.attach(tree)
        self.assertEqual(tree.div[BOUND_ATTR], "true")
        self.assertEqual(bridge.rescan(), [])

    def test_edit_mode_elements_are_skipped(self):
        bridge, _ = make_bridge()
        tree = parse_fragment(preview("a.mp4", **{"data-edit-mode": "true"}))
        self.assertEqual(bridge.attach(tree), [])

    def test_preview_source_falls_back_to_nested_video(self):
        bridge, _ = make_bridge()
        tree = parse_fragment('<div class="video-preview"><video src="n.mp4"></video></div>')
        (binding,) = bridge.attach(tree)
        self.assertEqual(binding.media.source, "n.mp4")
        self.assertEqual(binding.media.label, "Vídeo")
        self.assertTrue(binding.media.is_video)

    def test_preview_without_source_is_not_bound(self):
        bridge, _ = make_bridge()
        self.assertEqual(bridge.attach(parse_fragment('<div class="video-preview"></div>')), [])

    def test_attach_forgets_previous_tree(self):
        bridge, _ = make_bridge()
        old = parse_fragment(preview("a.mp4"))
        bridge.attach(old)
        bridge.attach(parse_fragment(preview("b.mp4")))
        self.assertEqual(bridge.handler_count, 1)
        self.assertFalse(bridge.click(old.div))

    def test_rescan_before_attach(self):
        bridge, _ = make_bridge()
        self.assertEqual(bridge.rescan(), [])

    def test_download_buttons_need_a_download_capability(self):
        html = '<button data-download-url="f.pdf" data-download-name="f.pdf">Download</button>'
        bridge, _ = make_bridge()
        self.assertEqual(bridge.attach(parse_fragment(html)), [])

        downloads = []
        bridge, _ = make_bridge(download=lambda url, name: downloads.append((url, name)))
        tree = parse_fragment(html)
        (binding,) = bridge.attach(tree)
        self.assertEqual(binding.action, "download")
        self.assertTrue(bridge.click(tree.button))
        self.assertEqual(downloads, [("f.pdf", "f.pdf")])
        self.assertFalse(bridge.is_open)


@tag("bridge")
class ModalStateMachineTests(SimpleTestCase):
    """Tests for the CLOSED -> OPEN -> CLOSING -> CLOSED transitions."""

    def test_click_opens_modal(self):
        bridge, _ = make_bridge()
        tree = parse_fragment(preview("a.mp4"))
        bridge.attach(tree)

        self.assertTrue(bridge.click(tree.div))
        self.assertIs(bridge.phase, ModalPhase.OPEN)
        self.assertEqual(bridge.state, ModalState("a.mp4", "Vídeo", True))

    def test_image_click_opens_image(self):
        bridge, _ = make_bridge()
        tree = parse_fragment(image("a.png", "cat"))
        bridge.attach(tree)
        bridge.click(tree.img)
        self.assertEqual(bridge.state, ModalState("a.png", "cat", False))

    def test_repeated_clicks_are_debounced(self):
        bridge, clock = make_bridge()
        tree = parse_fragment(preview("a.mp4"))
        bridge.attach(tree)

        self.assertTrue(bridge.click(tree.div))
        bridge.close()
        clock.now = 0.4
        self.assertFalse(bridge.click(tree.div))
        self.assertIs(bridge.phase, ModalPhase.CLOSED)

    def test_reopen_refused_while_closing(self):
        bridge, clock = make_bridge()
        tree = parse_fragment(preview("a.mp4"))
        bridge.attach(tree)

        bridge.click(tree.div)
        clock.now = 0.1
        self.assertTrue(bridge.close())
        self.assertIs(bridge.phase, ModalPhase.CLOSING)
        self.assertIsNone(bridge.state)

        clock.now = 0.2
        self.assertFalse(bridge.click(tree.div))
        self.assertFalse(bridge.open("b.mp4", "x", True))

        clock.now = 0.7
        self.assertIs(bridge.phase, ModalPhase.CLOSED)
        self.assertTrue(bridge.click(tree.div))
        self.assertTrue(bridge.is_open)

    def test_close_when_not_open(self):
        bridge, _ = make_bridge()
        self.assertFalse(bridge.close())

    def test_open_requires_a_source(self):
        bridge, _ = make_bridge()
        self.assertFalse(bridge.open("", "x", False))
        self.assertIs(bridge.phase, ModalPhase.CLOSED)

    def test_modal_props(self):
        bridge, _ = make_bridge()
        self.assertEqual(bridge.modal_props()["is_open"], False)

        bridge.open("a.png", "cat", False)
        props = bridge.modal_props()
        self.assertEqual(
            {k: props[k] for k in ("is_open", "source", "label", "is_video")},
            {"is_open": True, "source": "a.png", "label": "cat", "is_video": False},
        )

        props["on_close"]()
        self.assertEqual(bridge.modal_props()["source"], "")
        self.assertIs(bridge.phase, ModalPhase.CLOSING)


@tag("bridge")
class EditModeAndTeardownTests(SimpleTestCase):
    def test_edit_mode_bridge_declines(self):
        bridge, _ = make_bridge(display_mode=False)
        self.assertFalse(bridge.open_handler("a.png", "cat", False))
        self.assertFalse(bridge.open("a.png", "cat", False))

        tree = parse_fragment(image("a.png", "cat"))
        bridge.attach(tree)
        self.assertFalse(bridge.click(tree.img))
        self.assertFalse(bridge.is_open)

    def test_teardown_drops_handlers(self):
        bridge, _ = make_bridge()
        tree = parse_fragment(preview("a.mp4"))
        bridge.attach(tree)
        bridge.teardown()

        self.assertEqual(bridge.handler_count, 0)
        self.assertIsNone(bridge.open_handler)
        self.assertFalse(bridge.click(tree.div))
        self.assertFalse(bridge.open("a.mp4", "x", True))
        self.assertEqual(bridge.attach(parse_fragment(preview("b.mp4"))), [])

    def test_bridges_are_independent(self):
        first, _ = make_bridge()
        second, _ = make_bridge()
        first.open("a.png", "cat", False)
        self.assertTrue(first.is_open)
        self.assertFalse(second.is_open)
        second.teardown()
        self.assertTrue(first.is_open)
