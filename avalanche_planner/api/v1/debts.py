"""/v1/debts - create, read, replace and delete a user's debts"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from avalanche_planner.api.v1.schemas import DebtRequest, DebtResponse, ValidationErrorResponse
from avalanche_planner.api.dependencies import get_debt_repository, get_request_id, get_user_id
from avalanche_planner.config import settings
from avalanche_planner.infrastructure.database.session import get_db
from avalanche_planner.infrastructure.database.repositories import DebtRepository
from avalanche_planner.domain.exceptions import DebtNotFoundError
from avalanche_planner.domain.validation import validate
from avalanche_planner.infrastructure.observability.metrics import debt_rejected_counter, record_debt_saved
from avalanche_planner.infrastructure.observability.logging import log_validation_rejected

router = APIRouter()

_VALIDATION_RESPONSES = {422: {"model": ValidationErrorResponse}}


def _rejected(request_id: str, user_id: str, errors: List[str]) -> JSONResponse:
    debt_rejected_counter.inc()
    log_validation_rejected(request_id, user_id, errors)
    return JSONResponse(status_code=422, content={"errors": errors})


@router.get("/debts", response_model=List[DebtResponse])
def list_debts(
    user_id: str = Depends(get_user_id),
    repo: DebtRepository = Depends(get_debt_repository),
):
    """List a user's debts in the order they were added"""
    return [DebtResponse.from_debt(d) for d in repo.get_debts_by_user(user_id)]


@router.post(
    "/debts",
    response_model=DebtResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_VALIDATION_RESPONSES,
)
def create_debt(
    body: DebtRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    repo: DebtRepository = Depends(get_debt_repository),
):
    """
    Validate and store a new debt.

    Every validation problem is returned at once as {"errors": [...]}.
    """
    request_id = get_request_id(request)
    draft = body.to_draft()

    errors = validate(draft, max_term_months=settings.max_installment_term_months)
    if errors:
        return _rejected(request_id, user_id, errors)

    try:
        debt = repo.create_debt(user_id, draft)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_debt_saved(debt)
    return DebtResponse.from_debt(debt)


@router.get("/debts/{debt_id}", response_model=DebtResponse)
def get_debt(
    debt_id: str,
    user_id: str = Depends(get_user_id),
    repo: DebtRepository = Depends(get_debt_repository),
):
    debt = repo.get_debt(user_id, debt_id)
    if debt is None:
        raise HTTPException(status_code=404, detail="Debt not found")
    return DebtResponse.from_debt(debt)


@router.put("/debts/{debt_id}", response_model=DebtResponse, responses=_VALIDATION_RESPONSES)
def replace_debt(
    debt_id: str,
    body: DebtRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    repo: DebtRepository = Depends(get_debt_repository),
):
    """Replace the whole debt snapshot; creation time is kept, update time is bumped"""
    request_id = get_request_id(request)
    draft = body.to_draft()

    errors = validate(draft, max_term_months=settings.max_installment_term_months)
    if errors:
        return _rejected(request_id, user_id, errors)

    try:
        debt = repo.replace_debt(user_id, debt_id, draft)
        db.commit()
    except DebtNotFoundError as e:
        db.rollback()
        logging.warning(f"Debt not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Debt not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_debt_saved(debt)
    return DebtResponse.from_debt(debt)


@router.delete("/debts/{debt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_debt(
    debt_id: str,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    repo: DebtRepository = Depends(get_debt_repository),
):
    request_id = get_request_id(request)

    try:
        repo.delete_debt(user_id, debt_id)
        db.commit()
    except DebtNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Debt not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
