import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Load .env file automatically
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (verification records)
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 5
    DATABASE_POOL_RECYCLE: int = 3600

    # PayPal REST credentials
    PAYPAL_CLIENT_ID: str = ""
    PAYPAL_SECRET: str = ""
    PAYPAL_BASE: str = "https://api-m.sandbox.paypal.com"

    # Order API used by the checkout page
    ORDER_API_URL: str = "https://salimstore.onrender.com"
    ORDER_API_TIMEOUT: float = 30.0
    PAYMENT_SUCCESS_URL: str = "https://salimstore.onrender.com/payment-success"

    # App settings
    APP_NAME: str = "PayPal Checkout Bridge"
    ENVIRONMENT: Literal["development", "test", "production"] = "development"

    # Observability (Optional)
    OTEL_SERVICE_NAME: str = "paypal-checkout-bridge"

    model_config = ConfigDict(env_file=".env", case_sensitive=True)

    def __init__(self, **kwargs):
        # Check for DATABASE_URL before calling parent constructor
        if not os.getenv("DATABASE_URL") and "DATABASE_URL" not in kwargs:
            raise RuntimeError(
                "DATABASE_URL not set; create .env or export the variable"
            )
        super().__init__(**kwargs)
