"""
Prometheus metrics for the verification endpoint.

Exposes the default FastAPI request metrics plus a counter of verification
outcomes at /metrics.
"""

from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

payment_verifications = Counter(
    "paypal_verifications_total",
    "PayPal order verifications by outcome",
    ["outcome"],  # verified / rejected
)


def init_metrics(app):
    """
    Instrument the FastAPI app and expose the /metrics endpoint.

    Args:
        app: FastAPI application instance

    Returns:
        Instrumentator instance
    """
    inst = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
    )
    inst.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    return inst
