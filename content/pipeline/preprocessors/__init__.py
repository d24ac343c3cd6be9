# content/pipeline/preprocessors/__init__.py

from .markdown_compiler import markdown_compiler_default

PREPROCESSORS = [
    markdown_compiler_default,  # Legacy markdown only, no-op for structured markup
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text
