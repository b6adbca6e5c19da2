"""Custom metrics for the cafe ordering service."""

from opentelemetry import metrics

# Get meter for cafe service
meter = metrics.get_meter("cafe-svc")

signup_counter = meter.create_counter(
    name="user_signup_total",
    description="Total number of completed signups",
    unit="1",
)

login_counter = meter.create_counter(
    name="user_login_total",
    description="Total number of login attempts by outcome",
    unit="1",
)

auth_failure_counter = meter.create_counter(
    name="auth_failure_total",
    description="Total number of rejected requests on protected routes by reason",
    unit="1",
)

orders_placed_counter = meter.create_counter(
    name="orders_placed_total",
    description="Total number of orders placed",
    unit="1",
)

order_lines_histogram = meter.create_histogram(
    name="order_lines",
    description="Number of lines per placed order",
    unit="1",
)


def record_signup() -> None:
    """Record a completed signup."""
    signup_counter.add(1)


def record_login(outcome: str) -> None:
    """Record a login attempt.

    Args:
        outcome: "success", "unknown_email" or "wrong_password"
    """
    login_counter.add(1, {"outcome": outcome})


def record_auth_failure(reason: str) -> None:
    """Record a rejected request on a protected route.

    Args:
        reason: "missing_token", "invalid_token" or "not_admin"
    """
    auth_failure_counter.add(1, {"reason": reason})


def record_order_placed(line_count: int) -> None:
    """Record a placed order.

    Args:
        line_count: Number of lines in the order
    """
    orders_placed_counter.add(1)
    order_lines_histogram.record(line_count)
