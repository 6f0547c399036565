"""
Prometheus Metrics

Counters and histograms for the assignment engine. Exposed on `/metrics`.
"""

from prometheus_client import Counter, Histogram

events_claimed_total = Counter(
    "review_dispatch_events_claimed_total",
    "Events handed out by batch assignment",
)

claim_requests_total = Counter(
    "review_dispatch_claim_requests_total",
    "Batch assignment requests by outcome",
    ["outcome"],
)

reviews_total = Counter(
    "review_dispatch_reviews_total",
    "Review submissions by decision and outcome",
    ["decision", "outcome"],
)

regional_api_duration_seconds = Histogram(
    "review_dispatch_regional_api_duration_seconds",
    "Latency of review notifications to regional authorities",
    ["region"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

requeue_events_total = Counter(
    "review_dispatch_requeue_events_total",
    "Events seen and requeued by the lease sweep",
    ["kind"],
)

requeue_errors_total = Counter(
    "review_dispatch_requeue_errors_total",
    "Lease sweeps that failed and were rolled back",
)
