"""
Prometheus metrics for the activation subsystem.

Counters are kept in-process; the desktop shell may expose them
through prometheus_client when remote monitoring is enabled.
"""

from prometheus_client import Counter

# Activation lifecycle metrics
activations_created_total = Counter(
    "activations_created_total",
    "Total activation codes created",
    ["mode"],
)

activations_claimed_total = Counter(
    "activations_claimed_total",
    "Total self-service activation codes claimed",
)

activations_renewed_total = Counter(
    "activations_renewed_total",
    "Total activation renewals",
)

activations_disabled_total = Counter(
    "activations_disabled_total",
    "Total activations disabled",
)

# User metrics
users_created_total = Counter(
    "users_created_total",
    "Total users created",
    ["role"],
)

authentication_attempts_total = Counter(
    "authentication_attempts_total",
    "Total authentication attempts",
    ["outcome"],
)

# Backup server metrics
remote_requests_total = Counter(
    "remote_license_requests_total",
    "Total requests made to the backup license server",
    ["endpoint", "outcome"],
)
