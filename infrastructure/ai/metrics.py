from prometheus_client import Counter, Histogram

ai_provider_calls_total = Counter(
    "ai_provider_calls_total",
    "AI provider completion calls",
    ["provider", "status"],  # status: success, error, unavailable
)

ai_provider_latency_seconds = Histogram(
    "ai_provider_latency_seconds",
    "AI provider completion latency",
    ["provider"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

ai_json_parse_failures_total = Counter(
    "ai_json_parse_failures_total",
    "AI responses that could not be parsed as JSON",
)
