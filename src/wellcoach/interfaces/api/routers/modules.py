# src/wellcoach/interfaces/api/routers/modules.py
"""
Module event endpoints: `/api/module/{training,nutrition,mental,productivity}`.

Creating an event always answers 201 once the event is stored. Recommendation
problems are reported in `warnings`, never as an error status.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, status

from wellcoach.application.services import EventService
from wellcoach.config import settings
from wellcoach.domain.entities import Module
from wellcoach.infrastructure.db.uow import session_scope
from wellcoach.interfaces.api.deps import CurrentUser, get_current_user, get_event_service
from wellcoach.interfaces.api.metrics import EVENTS_CREATED, RECOMMENDATIONS_GENERATED, RECOMMENDATION_FAILURES
from wellcoach.interfaces.api.schemas import event_out, parse_event_payload

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api/module", tags=["Modules"])


def record_generation(module: Module, recommendations: Optional[List[Any]]) -> None:
    """`None` marks a failed rule-engine run."""
    if recommendations is None:
        RECOMMENDATION_FAILURES.labels(module=module.value).inc()
    else:
        RECOMMENDATIONS_GENERATED.labels(module=module.value).inc(len(recommendations))


def generate_in_background(event_service: EventService, module: Module, event: Any) -> None:
    record_generation(module, event_service.generate_recommendations_background(event))


@router.post("/{module}", status_code=status.HTTP_201_CREATED)
def create_module_event(
    module: Module,
    background_tasks: BackgroundTasks,
    payload: Dict[str, Any] = Body(...),
    user: CurrentUser = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service),
) -> Dict[str, Any]:
    fields = parse_event_payload(module, payload)
    inline = settings.RECOMMENDATIONS_INLINE
    result = event_service.create_event(user.id, module, fields, generate_recommendations=inline)
    EVENTS_CREATED.labels(module=module.value).inc()

    if inline:
        record_generation(module, None if result.warnings else result.recommendations)
    else:
        background_tasks.add_task(generate_in_background, event_service, module, result.event)

    body = event_out(module, result.event)
    body["recommendationsGenerated"] = len(result.recommendations)
    body["warnings"] = result.warnings
    return body


@router.get("/{module}")
def list_module_events(
    module: Module,
    user: CurrentUser = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service),
) -> List[Dict[str, Any]]:
    with session_scope() as session:
        events = event_service.list_events(session, user.id, module)
        return [event_out(module, event) for event in events]
