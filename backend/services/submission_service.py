"""Submission adapter: turns a completed wizard into a record and a notification.

Business submissions are persisted as a ``businesses`` row; consumer
submissions are not stored and get a synthesized record instead. Either
way the automation platform is then notified in the background. The
result depends on persistence only: a notification that cannot be
delivered never fails the submission.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from core.constants import (
    SUBMIT_SUCCESS_BUSINESS,
    SUBMIT_SUCCESS_CONSUMER,
    WIZARD_SOURCE,
    NotificationEvent,
    UserType,
)
from core.exceptions import UnauthenticatedError
from core.security import Actor
from notifications.channels import NotificationEnvelope
from notifications.manager import NotificationManager
from services.business_service import BusinessService
from wizard.submission import BusinessSubmission, ConsumerSubmission

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """Outcome of a wizard submission."""

    user_type: UserType
    record: dict[str, Any]
    message: str
    persisted: bool


class SubmissionService:
    """Persist (or synthesize) a submission, then notify the automation platform."""

    def __init__(self, db: AsyncSession, notifier: NotificationManager):
        self.db = db
        self.notifier = notifier

    async def submit(
        self,
        submission: Union[BusinessSubmission, ConsumerSubmission],
        actor: Optional[Actor],
    ) -> SubmissionResult:
        """Handle a completed wizard.

        Raises:
            UnauthenticatedError: If no actor identity is present
            PersistenceError: If the business row cannot be written
        """
        if actor is None:
            raise UnauthenticatedError()

        if isinstance(submission, BusinessSubmission):
            result = await self._submit_business(submission, actor)
        else:
            result = self._submit_consumer(submission, actor)

        self._notify(result, actor)
        return result

    async def _submit_business(self, submission: BusinessSubmission, actor: Actor) -> SubmissionResult:
        business = await BusinessService(self.db).create_from_submission(submission, actor.id)
        logger.info("Business created", extra={"business_id": business.id, "user_id": actor.id})
        return SubmissionResult(
            user_type=UserType.BUSINESS,
            record=business.to_dict(),
            message=SUBMIT_SUCCESS_BUSINESS,
            persisted=True,
        )

    def _submit_consumer(self, submission: ConsumerSubmission, actor: Actor) -> SubmissionResult:
        record = {
            "user_id": actor.id,
            "user_type": UserType.CONSUMER.value,
            **submission.model_dump(exclude={"userType"}),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        return SubmissionResult(
            user_type=UserType.CONSUMER,
            record=record,
            message=SUBMIT_SUCCESS_CONSUMER,
            persisted=False,
        )

    def _notify(self, result: SubmissionResult, actor: Actor) -> None:
        record = result.record
        if result.user_type is UserType.BUSINESS:
            envelope = NotificationEnvelope(
                event=NotificationEvent.BUSINESS_WIZARD_COMPLETED.value,
                payload_key="business",
                payload={"user_type": UserType.BUSINESS.value, **record},
                user_id=actor.id,
                user_email=actor.email,
                source=WIZARD_SOURCE,
            )
        else:
            envelope = NotificationEnvelope(
                event=NotificationEvent.CONSUMER_WIZARD_COMPLETED.value,
                payload_key="consumer",
                payload={
                    "user_type": UserType.CONSUMER.value,
                    "preferences": record.get("preferences") or {},
                    "serviceTypes": record.get("serviceTypes") or [],
                    "location": record.get("location") or "",
                    "generalHelp": record.get("generalHelp") or "not-selected",
                    "analysisType": record.get("analysisType") or "not-selected",
                    "goalDescription": record.get("goalDescription") or "not-specified",
                    "created_at": record["created_at"],
                },
                user_id=actor.id,
                user_email=actor.email,
                source=WIZARD_SOURCE,
            )

        try:
            self.notifier.dispatch(envelope)
        except Exception as e:
            logger.error(f"Could not schedule automation notification: {e}", exc_info=True)
