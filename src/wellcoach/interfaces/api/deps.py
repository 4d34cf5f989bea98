# src/wellcoach/interfaces/api/deps.py

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from wellcoach.application.services import (
    AnalyticsService,
    BillingService,
    DashboardService,
    EventService,
    InboxService,
    ProfileService,
)
from wellcoach.infrastructure.db.repository import UserRepository
from wellcoach.infrastructure.db.uow import session_scope
from wellcoach.interfaces.api.security.auth import decode_token

log = logging.getLogger(__name__)

# --- Security & Auth Dependencies ---

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """The authenticated caller; `id` is the identity provider's subject."""
    id: str
    email: Optional[str] = None


def get_current_user(creds: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> CurrentUser:
    if creds is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token"
        )
    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has no subject")

    with session_scope() as session:
        user = UserRepository(session).find_or_create(
            str(subject),
            email=payload.get("email"),
            first_name=payload.get("first_name") or payload.get("given_name"),
            last_name=payload.get("last_name") or payload.get("family_name"),
            profile_image_url=payload.get("profile_image_url") or payload.get("picture"),
        )
        return CurrentUser(id=user.id, email=user.email)

# --- Service Dependencies ---

def _service(request: Request, name: str) -> Any:
    services = request.app.state.services or {}
    service = services.get(name)
    if not service:
        log.error("Service %s requested before it was built.", name)
        raise HTTPException(status_code=503, detail=f"{name} is currently unavailable.")
    return service


def get_event_service(request: Request) -> EventService:
    return _service(request, "event_service")


def get_inbox_service(request: Request) -> InboxService:
    return _service(request, "inbox_service")


def get_analytics_service(request: Request) -> AnalyticsService:
    return _service(request, "analytics_service")


def get_dashboard_service(request: Request) -> DashboardService:
    return _service(request, "dashboard_service")


def get_billing_service(request: Request) -> BillingService:
    return _service(request, "billing_service")


def get_profile_service(request: Request) -> ProfileService:
    return _service(request, "profile_service")
