# src/wellcoach/application/services/billing_service.py
"""
Subscription state driven by billing processor webhooks.

The processor signs each delivery with
`Billing-Signature: t=<unix ts>,v1=<hex hmac-sha256(secret, "<t>.<body>")>`.
Only state transitions on the User row happen here; amounts, checkout and
payment methods are the processor's business.
"""

from __future__ import annotations
import hashlib
import hmac
import logging
import time
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from wellcoach.config import settings
from wellcoach.domain.entities import SubscriptionStatus, SubscriptionTier
from wellcoach.domain.errors import DependencyError, ValidationError
from wellcoach.infrastructure.db.models import User
from wellcoach.infrastructure.db.repository import UserRepository

log = logging.getLogger(__name__)

PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
PAYMENT_FAILED = "invoice.payment_failed"
SUBSCRIPTION_CREATED = "customer.subscription.created"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"


def compute_signature(secret: str, timestamp: int, payload: bytes) -> str:
    signed = f"{timestamp}.".encode() + payload
    return hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()


def verify_signature(
    payload: bytes,
    header: Optional[str],
    secret: Optional[str],
    tolerance: int = 300,
    now: Optional[float] = None,
) -> None:
    """Raise ValidationError unless `header` is a fresh, valid signature of `payload`."""
    if not secret:
        log.error("BILLING_WEBHOOK_SECRET is not configured; rejecting webhook.")
        raise DependencyError("Billing webhook secret is not configured")
    if not header:
        raise ValidationError("Missing billing signature header")
    try:
        parts = dict(item.strip().split("=", 1) for item in header.split(",") if "=" in item)
        timestamp = int(parts["t"])
        signature = parts["v1"]
    except (KeyError, ValueError):
        raise ValidationError("Malformed billing signature header")

    now = time.time() if now is None else now
    if tolerance and abs(now - timestamp) > tolerance:
        raise ValidationError("Billing signature timestamp outside tolerance")

    expected = compute_signature(secret, timestamp, payload)
    if not hmac.compare_digest(expected, signature):
        raise ValidationError("Invalid billing signature")


class BillingService:

    def __init__(self, user_repo_class: type[UserRepository] = UserRepository):
        self.user_repo_class = user_repo_class
        self._handlers: Dict[str, Callable[[UserRepository, Dict[str, Any]], Optional[User]]] = {
            PAYMENT_SUCCEEDED: self._payment_succeeded,
            PAYMENT_FAILED: self._payment_failed,
            SUBSCRIPTION_CREATED: self._subscription_created,
            SUBSCRIPTION_DELETED: self._subscription_deleted,
        }

    def verify(self, payload: bytes, header: Optional[str], now: Optional[float] = None) -> None:
        verify_signature(
            payload, header, settings.BILLING_WEBHOOK_SECRET,
            tolerance=settings.BILLING_WEBHOOK_TOLERANCE_SECONDS, now=now,
        )

    def handle_event(self, session: Session, event: Dict[str, Any]) -> Optional[User]:
        """Apply one webhook event. Returns the updated user, or None if nothing matched."""
        event_type = event.get("type")
        obj = (event.get("data") or {}).get("object") or {}
        handler = self._handlers.get(event_type)
        if handler is None:
            log.info("Unhandled billing event type %s", event_type)
            return None
        return handler(self.user_repo_class(session), obj)

    # --- transitions ---

    def _find_customer(self, repo: UserRepository, obj: Dict[str, Any]) -> Optional[User]:
        customer_id = obj.get("customer")
        if not customer_id:
            log.warning("Billing event without customer id ignored.")
            return None
        user = repo.find_by_billing_customer_id(customer_id)
        if user is None:
            log.warning("No user linked to billing customer %s", customer_id)
        return user

    def _payment_succeeded(self, repo: UserRepository, obj: Dict[str, Any]) -> Optional[User]:
        user = self._find_customer(repo, obj)
        if user is None:
            return None
        log.info("Payment succeeded for user %s", user.id)
        return repo.update(user, subscription_status=SubscriptionStatus.ACTIVE)

    def _payment_failed(self, repo: UserRepository, obj: Dict[str, Any]) -> Optional[User]:
        user = self._find_customer(repo, obj)
        if user is None:
            return None
        log.warning("Payment failed for user %s", user.id)
        return repo.update(user, subscription_status=SubscriptionStatus.PAST_DUE)

    def _subscription_deleted(self, repo: UserRepository, obj: Dict[str, Any]) -> Optional[User]:
        user = self._find_customer(repo, obj)
        if user is None:
            return None
        log.info("Subscription canceled for user %s", user.id)
        return repo.update(
            user,
            subscription_status=SubscriptionStatus.CANCELED,
            subscription_tier=SubscriptionTier.FREE,
            subscription_id=None,
        )

    def _subscription_created(self, repo: UserRepository, obj: Dict[str, Any]) -> Optional[User]:
        """Links the processor's customer to the user named in the metadata."""
        metadata = obj.get("metadata") or {}
        user_id = metadata.get("userId") or metadata.get("user_id")
        user = repo.find_by_id(user_id) if user_id else self._find_customer(repo, obj)
        if user is None:
            log.warning("Subscription created for unknown user (metadata=%s)", metadata)
            return None
        try:
            tier = SubscriptionTier(metadata.get("tier") or SubscriptionTier.PREMIUM.value)
        except ValueError:
            log.warning("Unknown subscription tier %r for user %s; using premium", metadata.get("tier"), user.id)
            tier = SubscriptionTier.PREMIUM
        log.info("Subscription %s (%s) started for user %s", obj.get("id"), tier.value, user.id)
        return repo.update(
            user,
            billing_customer_id=obj.get("customer") or user.billing_customer_id,
            subscription_id=obj.get("id"),
            subscription_tier=tier,
            subscription_status=SubscriptionStatus.ACTIVE,
        )
