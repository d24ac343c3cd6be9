"""
API views for the editor.

Endpoints:
- GET /api/upload-stats/ - Upload statistics shown under the editor
"""

import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from .stats import get_upload_stats

logger = logging.getLogger(__name__)


@require_http_methods(["GET"])
def upload_stats(request):
    try:
        stats = get_upload_stats()
    except Exception as e:
        logger.error(f"Could not read upload stats: {e}", exc_info=True)
        return JsonResponse({"success": False, "error": "Upload stats unavailable"}, status=503)

    return JsonResponse({"success": True, "stats": stats})
