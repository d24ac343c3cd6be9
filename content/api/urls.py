"""
URL patterns for the editor API.

Endpoints:
- GET /api/upload-stats/ - Upload statistics
"""

from django.urls import path

from .views import upload_stats

app_name = "content_api"

urlpatterns = [
    path("upload-stats/", upload_stats, name="upload-stats"),
]
