"""GET /v1/export and POST /v1/import - move a user's full data set as JSON"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from avalanche_planner.api.v1.schemas import (
    DebtResponse,
    ExportResponse,
    ImportRequest,
    ImportResponse,
    ProfileResponse,
)
from avalanche_planner.api.dependencies import (
    get_debt_repository,
    get_profile_repository,
    get_request_id,
    get_user_id,
)
from avalanche_planner.config import settings
from avalanche_planner.infrastructure.database.session import get_db
from avalanche_planner.infrastructure.database.repositories import DebtRepository, ProfileRepository
from avalanche_planner.domain.validation import validate
from avalanche_planner.infrastructure.observability.metrics import debt_rejected_counter, record_debt_saved
from avalanche_planner.infrastructure.observability.logging import log_validation_rejected

router = APIRouter()


@router.get("/export", response_model=ExportResponse)
def export_data(
    user_id: str = Depends(get_user_id),
    debt_repo: DebtRepository = Depends(get_debt_repository),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
):
    profile = profile_repo.get_profile(user_id)
    return ExportResponse(
        debts=[DebtResponse.from_debt(d) for d in debt_repo.get_debts_by_user(user_id)],
        profile=ProfileResponse.from_profile(profile) if profile else None,
        exported_at=datetime.now(timezone.utc),
    )


@router.post("/import", response_model=ImportResponse)
def import_data(
    body: ImportRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    debt_repo: DebtRepository = Depends(get_debt_repository),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
):
    """
    Replace the user's debts (and profile, when given) with an exported document.

    Debt ids and timestamps in the document are kept, so a restore leaves
    references to existing debts intact.

    All debts are validated before anything is written; one bad debt rejects
    the whole import with errors keyed by its position.
    """
    request_id = get_request_id(request)
    drafts = [d.to_draft() for d in body.debts]

    errors = {}
    seen_ids = set()
    for index, (item, draft) in enumerate(zip(body.debts, drafts)):
        problems = validate(draft, max_term_months=settings.max_installment_term_months)
        if item.debt_id is not None:
            if item.debt_id in seen_ids:
                problems.append(f"Duplicate debt id {item.debt_id}")
            seen_ids.add(item.debt_id)
        if problems:
            errors[str(index)] = problems

    if errors:
        debt_rejected_counter.inc(len(errors))
        log_validation_rejected(
            request_id, user_id, [f"debt {i}: {p}" for i, ps in errors.items() for p in ps]
        )
        return JSONResponse(status_code=422, content={"errors": errors})

    try:
        debt_repo.delete_all_for_user(user_id)
        debts = [
            debt_repo.create_debt(
                user_id,
                draft,
                debt_id=item.debt_id,
                created_at=item.created_at,
                updated_at=item.updated_at,
            )
            for item, draft in zip(body.debts, drafts)
        ]
        if body.profile is not None:
            profile_repo.save_profile(user_id, body.profile.to_profile())
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Import failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    for debt in debts:
        record_debt_saved(debt)

    return ImportResponse(
        user_id=user_id,
        debts_imported=len(debts),
        profile_imported=body.profile is not None,
    )
