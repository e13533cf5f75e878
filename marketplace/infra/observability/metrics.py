from prometheus_client import Counter, Histogram


# Order Metrics
orders_placed_total = Counter("marketplace_orders_placed_total", "Total orders placed", ["order_type"])
order_value = Histogram(
    "marketplace_order_value",
    "Order value distribution",
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 5000, float("inf")],
)
order_status_updates_total = Counter(
    "marketplace_order_status_updates_total", "Order status changes by target status", ["status"]
)
checkout_duration = Histogram("marketplace_checkout_seconds", "Checkout transaction time")

# Stock Metrics
stock_clamped_total = Counter(
    "marketplace_stock_clamped_total", "Checkouts where a physical line exceeded remaining stock"
)

# Cart Metrics
cart_operations_total = Counter("marketplace_cart_operations_total", "Cart operations", ["operation", "status"])

# Trust Metrics
trust_outcomes_total = Counter(
    "marketplace_trust_outcomes_total", "Trust scoring outcomes by recommendation", ["recommendation"]
)
trust_scoring_unavailable_total = Counter(
    "marketplace_trust_scoring_unavailable_total", "Listings scored in degraded mode", ["reason"]
)
trust_scoring_duration = Histogram("marketplace_trust_scoring_seconds", "Trust pipeline time")

# Review Metrics
reviews_created_total = Counter("marketplace_reviews_created_total", "Reviews created", ["sentiment"])
