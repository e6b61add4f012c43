"""/v1/profile - a user's available funds and minimum payment preference"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from avalanche_planner.api.v1.schemas import ProfileRequest, ProfileResponse
from avalanche_planner.api.dependencies import get_profile_repository, get_request_id, get_user_id
from avalanche_planner.infrastructure.database.session import get_db
from avalanche_planner.infrastructure.database.repositories import ProfileRepository

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(get_user_id),
    repo: ProfileRepository = Depends(get_profile_repository),
):
    profile = repo.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileResponse.from_profile(profile)


@router.put("/profile", response_model=ProfileResponse)
def save_profile(
    body: ProfileRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    repo: ProfileRepository = Depends(get_profile_repository),
):
    """Create or overwrite the user's profile"""
    request_id = get_request_id(request)

    try:
        profile = repo.save_profile(user_id, body.to_profile())
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return ProfileResponse.from_profile(profile)
