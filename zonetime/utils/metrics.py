# zonetime/utils/metrics.py
from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Gauge, Histogram

# Keep names stable; dashboards key on them.
MET_REQUESTS: Final = Counter("zonetime_api_requests_total", "API requests", ["route"])
MET_FAILURES: Final = Counter("zonetime_failure_total", "Resolution failures returned to callers", ["kind"])
MET_AMBIGUOUS: Final = Counter("zonetime_ambiguous_total", "Fold inputs seen by the API", ["policy"])
REQ_LATENCY: Final = Histogram("zonetime_request_seconds", "API request latency", ["route"])
GAUGE_APP_UP: Final = Gauge("zonetime_app_up", "1 if app is running")
GAUGE_LEAP_SECONDS: Final = Gauge("zonetime_leap_seconds", "Entries in the leap-second table")
