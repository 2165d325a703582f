"""Prometheus metrics for monitoring.

Tracks request latency, GitHub API usage, cache efficiency and
battle roster activity.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram, Info

# Application info
APP_INFO = Info("ghh_app", "GitHub Hunter application info")

# HTTP metrics
HTTP_REQUESTS_TOTAL = Counter(
    "ghh_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "ghh_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# GitHub API metrics
GITHUB_API_CALLS = Counter(
    "ghh_github_api_calls_total",
    "Total GitHub API calls",
    ["endpoint", "status"],
)

GITHUB_API_DURATION = Histogram(
    "ghh_github_api_duration_seconds",
    "GitHub API call duration",
    ["endpoint"],
)

# Response cache
GITHUB_CACHE_HITS = Counter(
    "ghh_github_cache_hits_total",
    "GitHub response cache hits",
)

GITHUB_CACHE_MISSES = Counter(
    "ghh_github_cache_misses_total",
    "GitHub response cache misses",
)

GITHUB_CACHE_EVICTIONS = Counter(
    "ghh_github_cache_evictions_total",
    "GitHub response cache evictions",
    ["reason"],
)

# Searches
SEARCHES_TOTAL = Counter(
    "ghh_searches_total",
    "Profile searches by outcome",
    ["outcome"],
)

# Battle roster
BATTLE_ROSTER_REJECTIONS = Counter(
    "ghh_battle_roster_rejections_total",
    "Rejected battle roster additions",
    ["reason"],
)
