# src/wellcoach/interfaces/api/routers/recommendations.py

from typing import List

from fastapi import APIRouter, Depends

from wellcoach.application.services import InboxService
from wellcoach.infrastructure.db.uow import session_scope
from wellcoach.interfaces.api.deps import CurrentUser, get_current_user, get_inbox_service
from wellcoach.interfaces.api.schemas import RecommendationOut, RecommendationUpdateIn

router = APIRouter(prefix="/api/recommendations", tags=["Recommendations"])


@router.get("", response_model=List[RecommendationOut])
def list_recommendations(
    user: CurrentUser = Depends(get_current_user),
    inbox: InboxService = Depends(get_inbox_service),
):
    with session_scope() as session:
        return [RecommendationOut.model_validate(rec) for rec in inbox.list(session, user.id)]


@router.patch("/{rec_id}", response_model=RecommendationOut)
def update_recommendation(
    rec_id: str,
    payload: RecommendationUpdateIn,
    user: CurrentUser = Depends(get_current_user),
    inbox: InboxService = Depends(get_inbox_service),
):
    with session_scope() as session:
        rec = inbox.update(
            session, rec_id, user.id,
            is_read=payload.is_read,
            is_completed=payload.is_completed,
        )
        return RecommendationOut.model_validate(rec)
