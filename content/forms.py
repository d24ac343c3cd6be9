from django import forms

from .pipeline.renderer import prepare_for_storage


class RichContentField(forms.CharField):
    """
    Form field for editor markup.

    The cleaned value is the storage form of the content: edit-mode flags and
    click markers are stripped before the value reaches a model.
    """

    def __init__(self, *, placeholder="", **kwargs):
        kwargs.setdefault("strip", False)
        super().__init__(**kwargs)
        if placeholder:
            self.widget.attrs["data-placeholder"] = placeholder

    def to_python(self, value):
        value = super().to_python(value)
        if value in self.empty_values:
            return value
        return prepare_for_storage(value)
