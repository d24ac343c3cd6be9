"""Tests for RichContentField."""

from django import forms
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, tag

from content.forms import RichContentField


class PostForm(forms.Form):
    body = RichContentField(placeholder="Escreva aqui")


@tag("forms")
class RichContentFieldTests(SimpleTestCase):
    def test_cleaned_value_is_storage_form(self):
        form = PostForm(data={"body": '<div data-edit-mode="true">x</div><img data-click-handled="true" src="a">'})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.cleaned_data["body"], '<div>x</div><img src="a">')

    def test_keeps_delete_controls(self):
        field = RichContentField()
        value = '<div>x<button title="Remover item">🗑️</button></div>'
        self.assertEqual(field.clean(value), value)

    def test_required(self):
        with self.assertRaises(ValidationError):
            RichContentField().clean("")

    def test_optional_empty(self):
        self.assertEqual(RichContentField(required=False).clean(""), "")

    def test_placeholder_on_widget(self):
        self.assertEqual(PostForm().fields["body"].widget.attrs["data-placeholder"], "Escreva aqui")
