# src/wellcoach/interfaces/api/routers/users.py

from typing import Optional

from fastapi import APIRouter, Depends

from wellcoach.application.services import ProfileService
from wellcoach.domain.errors import NotFoundError
from wellcoach.infrastructure.db.repository import UserRepository
from wellcoach.infrastructure.db.uow import session_scope
from wellcoach.interfaces.api.deps import CurrentUser, get_current_user, get_profile_service
from wellcoach.interfaces.api.schemas import ProfileIn, ProfileOut, UserOut

router = APIRouter(prefix="/api", tags=["Users"])


@router.get("/auth/user", response_model=UserOut)
def get_auth_user(user: CurrentUser = Depends(get_current_user)):
    with session_scope() as session:
        row = UserRepository(session).find_by_id(user.id)
        if row is None:
            raise NotFoundError(f"User {user.id} not found")
        return UserOut.model_validate(row)


@router.get("/profile", response_model=Optional[ProfileOut])
def get_profile(
    user: CurrentUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """The caller's profile, or null before the first save."""
    with session_scope() as session:
        profile = profiles.get(session, user.id)
        return ProfileOut.model_validate(profile) if profile else None


@router.post("/profile", response_model=ProfileOut)
def save_profile(
    payload: ProfileIn,
    user: CurrentUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    with session_scope() as session:
        profile = profiles.upsert(session, user.id, payload.model_dump(exclude_unset=True))
        return ProfileOut.model_validate(profile)
