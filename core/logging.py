import logging
import sys
import structlog
import os
from opentelemetry.instrumentation.logging import LoggingInstrumentor


def get_log_level():
    """Get log level from environment or default to INFO"""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_renderer():
    """Get log renderer based on environment"""
    env = os.getenv("ENVIRONMENT", "development")
    if env in ["test", "production"]:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True, sort_keys=False)


def configure_logging():
    """Set up structlog + OTEL context injection."""
    shared_processors = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.ExceptionPrettyPrinter(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            get_log_renderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    env = os.getenv("ENVIRONMENT", "development")
    if env == "test":
        # In test mode, write to stdout for easier capture
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(get_log_level())

    # Silence Uvicorn noise but keep access logs routed through structlog
    logging.getLogger("uvicorn.error").handlers.clear()
    logging.getLogger("uvicorn.access").handlers.clear()

    # Request logging is chatty at INFO; payloads are logged by the callers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.ERROR)

    LoggingInstrumentor().instrument(set_logging_format=False)


# Business Event Log Names
class BusinessEvents:
    """Standard names for business event logs"""

    API_ENTRY = "api.request"

    # Checkout page
    SDK_WAITING = "checkout.sdk_waiting"
    SDK_READY = "checkout.sdk_ready"
    SDK_TIMEOUT = "checkout.sdk_timeout"
    SDK_ERROR = "checkout.sdk_error"
    BUTTONS_RENDERED = "checkout.buttons_rendered"
    BUTTONS_RENDER_FAILED = "checkout.buttons_render_failed"
    SUMMARY_SKIPPED = "checkout.summary_skipped"
    ORDER_CREATE_ATTEMPT = "checkout.order_create_attempt"
    ORDER_CREATED = "checkout.order_created"
    ORDER_CREATE_FAILED = "checkout.order_create_failed"
    CAPTURE_ATTEMPT = "checkout.capture_attempt"
    CAPTURE_SUCCEEDED = "checkout.capture_succeeded"
    CAPTURE_FAILED = "checkout.capture_failed"
    ORDER_ID_MISSING = "checkout.order_id_missing"
    HOST_NOTIFIED = "checkout.host_notified"
    CHECKOUT_CANCELLED = "checkout.cancelled"

    # Server side verification
    VERIFICATION_ATTEMPT = "payment.verification_attempt"
    PAYMENT_VERIFIED = "payment.verified"
    PAYMENT_REJECTED = "payment.rejected"


# Configure logging when module is imported
configure_logging()
