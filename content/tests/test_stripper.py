"""Tests for the attribute stripper."""

from django.test import SimpleTestCase, tag

from content.pipeline.stripper import (
    StripMode,
    clean_content_for_display,
    clean_content_for_saving,
    strip,
)


@tag("pipeline")
class DisplayStripTests(SimpleTestCase):
    """Tests for strip(..., FOR_DISPLAY)."""

    def test_removes_edit_mode_flag_and_titled_delete_control(self):
        content = '<div data-edit-mode="true">x<button title="Remover item">🗑️</button></div>'
        self.assertEqual(strip(content, StripMode.FOR_DISPLAY), "<div>x</div>")

    def test_removes_glyph_only_delete_control(self):
        content = '<p>a</p><button class="del">\U0001F5D1</button>'
        self.assertEqual(clean_content_for_display(content), "<p>a</p>")

    def test_keeps_other_buttons(self):
        content = '<button data-download-url="f.pdf">Download</button>'
        self.assertEqual(clean_content_for_display(content), content)

    def test_removes_single_quoted_edit_mode_flag(self):
        self.assertEqual(clean_content_for_display("<div data-edit-mode='true'>x</div>"), "<div>x</div>")

    def test_keeps_click_markers(self):
        """Click markers only matter for storage."""
        content = '<img data-click-handled="true" src="a.png">'
        self.assertIn("data-click-handled", clean_content_for_display(content))

    def test_collapses_whitespace_and_trims(self):
        self.assertEqual(clean_content_for_display("  <p>a    b</p>\n\n <p >c</p>  "), "<p>a b</p> <p>c</p>")

    def test_keeps_button_with_data_title(self):
        content = '<button data-title="Remover item">Download</button>'
        self.assertEqual(clean_content_for_display(content), content)

    def test_keeps_non_breaking_spaces(self):
        self.assertEqual(clean_content_for_display("\u00a0<p>a\u00a0\u00a0b</p>\u00a0"), "\u00a0<p>a\u00a0\u00a0b</p>\u00a0")


@tag("pipeline")
class StorageStripTests(SimpleTestCase):
    """Tests for strip(..., FOR_STORAGE)."""

    def test_removes_click_markers_in_both_quote_styles(self):
        content = """<img data-click-handled="true" src="a"><img data-click-handled='true' src="b">"""
        self.assertEqual(clean_content_for_saving(content), '<img src="a"><img src="b">')

    def test_removes_listener_marker(self):
        content = '<div class="video-preview" data-listener-added="true"></div>'
        self.assertEqual(clean_content_for_saving(content), '<div class="video-preview"></div>')

    def test_removes_edit_mode_flag(self):
        content = '<div class="video-preview" data-edit-mode="true"></div>'
        self.assertEqual(clean_content_for_saving(content), '<div class="video-preview"></div>')

    def test_keeps_delete_controls(self):
        content = '<div>x<button title="Remover item">🗑️</button></div>'
        self.assertEqual(clean_content_for_saving(content), content)

    def test_idempotent(self):
        samples = [
            '<div data-edit-mode="true">x  <img data-click-handled=\'true\' src="a" >\n</div>',
            "plain   text\n\nwith  gaps",
            '<pre>a\n   b</pre>   <div data-listener-added="true">c</div>',
            '<div data-edit-data-click-handled="a"mode="b">x</div>',
            "",
        ]
        for sample in samples:
            once = strip(sample, StripMode.FOR_STORAGE)
            self.assertEqual(strip(once, StripMode.FOR_STORAGE), once)

    def test_preserves_whitespace_inside_pre_and_code(self):
        content = "<pre>a\n   b</pre>   <code>x    y</code>"
        self.assertEqual(clean_content_for_saving(content), "<pre>a\n   b</pre> <code>x    y</code>")

    def test_removal_that_joins_a_new_marker(self):
        content = '<div data-edit-data-click-handled="a"mode="b">x</div>'
        self.assertEqual(clean_content_for_saving(content), "<div>x</div>")

    def test_keeps_non_breaking_spaces(self):
        content = "<div>a\u00a0\u00a0\u00a0b</div>"
        self.assertEqual(clean_content_for_saving(content), content)


@tag("pipeline")
class EmptyInputTests(SimpleTestCase):
    def test_empty_string_returned_unchanged(self):
        self.assertEqual(strip("", StripMode.FOR_DISPLAY), "")
        self.assertEqual(strip("", StripMode.FOR_STORAGE), "")

    def test_none_returned_unchanged(self):
        self.assertIsNone(strip(None, StripMode.FOR_DISPLAY))
        self.assertIsNone(strip(None, StripMode.FOR_STORAGE))
