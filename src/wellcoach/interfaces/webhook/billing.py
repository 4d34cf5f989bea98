# src/wellcoach/interfaces/webhook/billing.py
"""
Webhook receiver for the billing processor.

No bearer auth: the delivery is authenticated by its `Billing-Signature`
header, computed over the raw body, so the body is read before any JSON
parsing.
"""

import json
import logging

from fastapi import APIRouter, Depends, Request

from wellcoach.application.services import BillingService
from wellcoach.domain.errors import ValidationError
from wellcoach.infrastructure.db.uow import session_scope
from wellcoach.interfaces.api.deps import get_billing_service
from wellcoach.interfaces.api.metrics import WEBHOOK_EVENTS

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api/webhook", tags=["Webhooks"])

SIGNATURE_HEADER = "Billing-Signature"


@router.post("/billing")
async def billing_webhook(
    request: Request,
    billing_service: BillingService = Depends(get_billing_service),
):
    payload = await request.body()
    try:
        billing_service.verify(payload, request.headers.get(SIGNATURE_HEADER))
    except ValidationError as e:
        log.warning("Rejected billing webhook: %s", e.message)
        raise

    try:
        event = json.loads(payload)
    except ValueError:
        raise ValidationError("Webhook body is not valid JSON")
    if not isinstance(event, dict):
        raise ValidationError("Webhook body must be a JSON object")

    event_type = event.get("type") or "unknown"
    WEBHOOK_EVENTS.labels(type=event_type).inc()
    log.info("Billing webhook received: %s (%s)", event_type, event.get("id"))

    with session_scope() as session:
        billing_service.handle_event(session, event)
    return {"received": True}
