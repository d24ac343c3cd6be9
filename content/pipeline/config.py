from django.conf import settings

DEFAULTS = {
    # Images after display rewrite
    "image_display_width": 120,
    # Images produced by the legacy markdown compiler and by uploads
    "figure_image_width": 260,
    # Video preview thumbnail box
    "preview_width": 240,
    "preview_height": 180,
    # Native video produced from a legacy video link
    "video_link_max_width": 300,
    # Uploaded video and audio containers
    "upload_video_max_width": 325,
    "upload_audio_max_width": 260,
    # Seconds a bound handler ignores repeated clicks
    "debounce_seconds": 0.5,
    # Seconds the modal refuses to reopen after a close
    "closing_delay_seconds": 0.3,
    # Modal label used for video previews
    "preview_label": "Vídeo",
}


def get_content_config():
    """
    Configuration for the content pipeline.

    Starts from DEFAULTS and applies the CONTENT_PIPELINE dict from Django
    settings when settings are configured. Unknown keys are ignored.
    """
    config = dict(DEFAULTS)
    if settings.configured:
        overrides = getattr(settings, "CONTENT_PIPELINE", None) or {}
        config.update({k: v for k, v in overrides.items() if k in DEFAULTS})
    return config
