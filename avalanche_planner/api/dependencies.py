"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session
from avalanche_planner.infrastructure.database.session import get_db
from avalanche_planner.infrastructure.database.repositories import DebtRepository, ProfileRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(user_id: str = Query(..., min_length=1, description="User identifier")) -> str:
    return user_id


def get_debt_repository(db: Session = Depends(get_db)) -> DebtRepository:
    """Provide debt repository bound to the request session"""
    return DebtRepository(db)


def get_profile_repository(db: Session = Depends(get_db)) -> ProfileRepository:
    """Provide profile repository bound to the request session"""
    return ProfileRepository(db)
