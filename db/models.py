"""
Database Models Module

Verification records written by the PayPal verifier, one row per order id.
"""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class PaymentVerification(Base):
    """A PayPal order confirmed as paid for the expected amount."""

    __tablename__ = "payments"

    order_id = Column(String(64), primary_key=True)  # PayPal order id
    status = Column(String(20), nullable=False, default="verified")
    amount = Column(String(32), nullable=False)
    payer = Column(String(255), nullable=False, default="unknown")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<PaymentVerification(order_id={self.order_id}, status={self.status}, amount={self.amount})>"
