# content/templatetags/content_tags.py

from django import template
from django.utils.safestring import mark_safe

from content.pipeline.config import get_content_config
from content.pipeline.renderer import prepare_for_storage, render_content

register = template.Library()


@register.filter(name="render_content")
def render_content_filter(value):
    return mark_safe(render_content(value))


@register.filter(name="storage_content")
def storage_content_filter(value):
    """Storage form of editor markup, e.g. for a hidden form input"""
    return prepare_for_storage(value)


@register.simple_tag(takes_context=True)
def render_content_with_context(context, value):
    """Template tag that passes template context to processors"""
    processor_context = {
        "user": context.get("user"),
        "request": context.get("request"),
    }
    return mark_safe(render_content(value, context=processor_context))


@register.inclusion_tag("content/media_styles.html")
def content_media_styles():
    """Hover-scale rules for rewritten media"""
    config = get_content_config()
    return {"preview_width": config["preview_width"]}
