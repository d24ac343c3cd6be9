"""
Upload statistics shown under the editor.

Counters live in the Django cache: the number of files that passed the
upload checks, the number that were quarantined, and the timestamps of
quarantines inside the recent window so the API can report a recent count.
"""

import time

from django.conf import settings
from django.core.cache import cache

SAFE_FILES_KEY = "upload-stats:safe"
QUARANTINED_TOTAL_KEY = "upload-stats:quarantined"
QUARANTINED_RECENT_KEY = "upload-stats:quarantined-recent"

# Seconds a quarantined upload counts as recent
RECENT_WINDOW = 24 * 60 * 60


def _timeout():
    return getattr(settings, "UPLOAD_STATS_TIMEOUT", None)


def _increment(key):
    # add() only creates the key when missing, incr() is atomic on shared backends
    cache.add(key, 0, _timeout())
    return cache.incr(key)


def record_safe_upload():
    return _increment(SAFE_FILES_KEY)


def record_quarantined_upload(now=None):
    now = time.time() if now is None else now
    total = _increment(QUARANTINED_TOTAL_KEY)

    # Only the recent window is kept; losing a stamp to a concurrent write
    # under-reports "recent" but never the total
    stamps = [stamp for stamp in cache.get(QUARANTINED_RECENT_KEY) or [] if now - stamp <= RECENT_WINDOW]
    stamps.append(now)
    cache.set(QUARANTINED_RECENT_KEY, stamps, RECENT_WINDOW)
    return total


def get_upload_stats(now=None):
    now = time.time() if now is None else now
    stamps = cache.get(QUARANTINED_RECENT_KEY) or []
    return {
        "safeFiles": cache.get(SAFE_FILES_KEY, 0),
        "quarantined": {
            "total": cache.get(QUARANTINED_TOTAL_KEY, 0),
            "recent": sum(1 for stamp in stamps if now - stamp <= RECENT_WINDOW),
        },
    }
