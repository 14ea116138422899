"""
FastAPI Router: setup guides and per-user step progress.

Progress keys follow the ``"<guideId>-<stepIndex>"`` format the front end
keeps in local storage, so an existing browser map can be uploaded as-is.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from xtermux.api.deps import get_current_user, get_db
from xtermux.api.models import GuideView, ProgressMap, ResetResult, ResetSelection, StepToggle
from xtermux.database.core.funcs import (
    get_progress_map,
    guides_with_progress,
    import_progress,
    reset_candidates,
    reset_progress,
    toggle_step,
)
from xtermux.database.entities import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/guides")


@router.get("", response_model=List[GuideView])
def list_guides(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Every guide with the caller's completion percentage."""
    try:
        return guides_with_progress(db, user.id)
    except SQLAlchemyError:
        logger.exception("Failed to load guide progress")
        raise HTTPException(status_code=500, detail="Failed to fetch guides")


@router.get("/progress", response_model=ProgressMap)
def read_progress(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return get_progress_map(db, user.id)
    except SQLAlchemyError:
        logger.exception("Failed to load guide progress")
        raise HTTPException(status_code=500, detail="Failed to fetch progress")


@router.put("/progress", response_model=ProgressMap)
def replace_progress(data: ProgressMap, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Replace the stored progress with a local-storage map.

    Request Body
    ------------
    dict[str, bool]
        ``{"setup-1-0": true, ...}``; false values and unknown steps are dropped.
    """
    try:
        return import_progress(db, user.id, data)
    except SQLAlchemyError:
        logger.exception("Failed to import guide progress")
        raise HTTPException(status_code=500, detail="Failed to save progress")


@router.post("/progress/reset", response_model=ResetResult)
def reset(data: ResetSelection, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Reset the progress of the selected guides.

    Raises
    ------
    HTTPException 400
        If the selection is empty or there is no progress to reset.
    """
    try:
        count = reset_progress(db, user.id, data.guide_ids)
    except SQLAlchemyError:
        logger.exception("Failed to reset guide progress")
        raise HTTPException(status_code=500, detail="Failed to reset progress")
    return ResetResult(reset=count, message=f"Reset progress for {count} guides.")


@router.get("/reset-candidates", response_model=List[str])
def candidates(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Guides with some progress, pre-selected in the reset dialog."""
    try:
        return reset_candidates(db, user.id)
    except SQLAlchemyError:
        logger.exception("Failed to load guide progress")
        raise HTTPException(status_code=500, detail="Failed to fetch progress")


@router.post("/{guide_id}/steps/{step_index}/toggle", response_model=StepToggle)
def toggle(guide_id: str, step_index: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return toggle_step(db, user.id, guide_id, step_index)
    except SQLAlchemyError:
        logger.exception("Failed to toggle guide step")
        raise HTTPException(status_code=500, detail="Failed to save progress")
