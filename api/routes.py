"""
API Routes Module

This module defines FastAPI routes for:
- PayPal payment verification
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from api import schemas
from core.dependencies import get_settings
from core.settings import Settings
from db.session import get_db
from payments.paypal_service import PayPalService
from payments.verification import verify_payment

router = APIRouter()


def get_paypal_service(settings: Settings = Depends(get_settings)) -> PayPalService:
    """FastAPI dependency for PayPalService."""
    return PayPalService(settings)


@router.post(
    "/payments/paypal/verify",
    response_model=schemas.VerifyPaymentResponse,
    response_model_exclude_none=True,
)
async def verify_paypal_payment(
    body: schemas.VerifyPaymentRequest,
    db: Session = Depends(get_db),
    paypal: PayPalService = Depends(get_paypal_service),
):
    """Verify a PayPal order and record it when status and amount match."""
    return await run_in_threadpool(
        verify_payment, db, paypal, body.order_id, body.expected_amount
    )
