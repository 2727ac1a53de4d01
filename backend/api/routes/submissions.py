"""Wizard submission endpoint."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.common import ErrorResponse, SubmissionFailure, SubmissionResponse
from app.dependencies import get_db, get_notifier
from core.constants import SUBMIT_FAILURE
from core.exceptions import PersistenceError
from core.security import Actor, get_current_actor
from notifications.manager import NotificationManager
from services.submission_service import SubmissionService
from wizard.submission import WizardSubmission

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/submissions",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}, 500: {"model": SubmissionFailure}},
)
async def submit_wizard(
    submission: WizardSubmission,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    notifier: NotificationManager = Depends(get_notifier),
) -> SubmissionResponse:
    """
    Record a completed onboarding wizard.

    Business submissions are stored; consumer submissions are not. The
    automation platform is notified in the background either way, and the
    response never waits for it.
    """
    service = SubmissionService(db, notifier)
    try:
        result = await service.submit(submission, actor)
    except PersistenceError as e:
        logger.error(f"Submission failed for {actor.id}: {e.details or e.message}")
        raise PersistenceError(SUBMIT_FAILURE, details=e.details or e.message)

    return SubmissionResponse(message=result.message, record=result.record)
