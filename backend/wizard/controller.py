"""Form state controller for the onboarding wizard.

Holds the current step, the collected values and the user-type branch.
Pure local state: no I/O, no side effects beyond its own attributes.

Usage:
    wizard = WizardController()
    wizard.set_user_type(UserType.CONSUMER)
    wizard.advance()
    wizard.set_field("serviceTypes", ["restaurants"])
    wizard.set_field("location", "Austin, TX")
    wizard.advance()
"""

from typing import Any, Optional, Union

from core.constants import UserType
from wizard.steps import KNOWN_FIELDS, StepDefinition, steps_for
from wizard.submission import BusinessSubmission, ConsumerSubmission


class WizardController:
    """Step index, field values and branch selector of one wizard session."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        """Discard all collected state and return to step 1."""
        self.user_type: Optional[UserType] = None
        self.values: dict[str, Any] = {}
        self._step = 1

    # ─── Branch & fields ───────────────────────────────────

    def set_user_type(self, user_type: Union[UserType, str]) -> None:
        """Select the branch. Clamps the current step if the new branch is shorter."""
        self.user_type = UserType(user_type)
        self.values["userType"] = self.user_type.value
        self._step = min(self._step, self.total_steps)

    def set_field(self, name: str, value: Any) -> None:
        """Store a field value.

        Raises:
            ValueError: If ``name`` is not a wizard field
        """
        if name == "userType":
            self.set_user_type(value)
            return
        if name not in KNOWN_FIELDS:
            raise ValueError(f"Unknown wizard field: {name}")
        self.values[name] = value

    # ─── Steps ─────────────────────────────────────────────

    @property
    def steps(self) -> tuple[StepDefinition, ...]:
        return steps_for(self.user_type)

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def current_step(self) -> int:
        """1-based index of the current step."""
        return self._step

    @property
    def current_definition(self) -> StepDefinition:
        return self.steps[self._step - 1]

    @property
    def is_last_step(self) -> bool:
        return self._step == self.total_steps

    @property
    def progress(self) -> float:
        """Completion percentage shown by the progress bar."""
        return self._step / self.total_steps * 100

    def current_step_valid(self) -> bool:
        return self.current_definition.is_valid(self.values)

    def advance(self) -> bool:
        """Move to the next step if the current one is valid.

        Returns:
            True if the step changed; False (state untouched) otherwise
        """
        if self.is_last_step or not self.current_step_valid():
            return False
        self._step += 1
        return True

    def retreat(self) -> bool:
        """Move back one step. No-op at step 1."""
        if self._step <= 1:
            return False
        self._step -= 1
        return True

    # ─── Submission ────────────────────────────────────────

    def to_submission(self) -> Union[BusinessSubmission, ConsumerSubmission]:
        """Snapshot the collected values as a typed submission.

        Raises:
            ValueError: If no user type has been chosen
        """
        if self.user_type is None:
            raise ValueError("User type has not been selected")

        model = BusinessSubmission if self.user_type is UserType.BUSINESS else ConsumerSubmission
        fields = {k: v for k, v in self.values.items() if k in model.model_fields and v is not None}
        if "serviceTypes" in fields:
            fields["serviceTypes"] = sorted(fields["serviceTypes"])
        return model(**fields)
