"""
Account metrics, scraped from /api/metrics together with the marketplace and
AI provider collectors.
"""

from prometheus_client import Counter, Gauge, Histogram

# Sessions
login_total = Counter("auth_login_total", "Login attempts by outcome", ["status"])
login_failed = Counter("auth_login_failed", "Rejected logins", ["reason"])  # invalid_credentials | banned | inactive
login_duration = Histogram("auth_login_duration_seconds", "Time spent checking credentials", buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5])
jwt_generation_total = Counter("auth_jwt_generation_total", "Session tokens issued", ["reason"])

# Accounts
registration_total = Counter("auth_registration_total", "Sign-ups by outcome", ["status"])
registration_failed = Counter("auth_registration_failed", "Rejected sign-ups", ["reason"])
password_changes_total = Counter("auth_password_changes_total", "Password changes by outcome", ["status"])

# Seller onboarding
seller_applications_total = Counter(
    "auth_seller_applications_total", "Seller application events (submitted, approved, rejected)", ["status"]
)
seller_applications_pending = Gauge("auth_seller_applications_pending", "Applications waiting for an admin")
