"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter


generation_attempts_total = Counter(
    "tryon_generation_attempts_total",
    "Total number of try-on generation calls dispatched.",
)

generation_outcomes_total = Counter(
    "tryon_generation_outcomes_total",
    "Try-on generation results by outcome.",
    ["outcome"],
)

quota_denied_total = Counter(
    "tryon_quota_denied_total",
    "Submissions refused because the free quota was exhausted.",
)
