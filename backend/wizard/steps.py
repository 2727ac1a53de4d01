"""Step definitions for the onboarding wizard, indexed by user type.

Each step lists the fields it requires. A step is valid when every rule
passes; rules only look at their own field (no cross-step checks).
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from core.constants import UserType


def is_filled(value: Any) -> bool:
    """Non-empty string (ignoring whitespace) or non-empty collection."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) > 0
    return True


@dataclass(frozen=True)
class FieldRule:
    name: str
    check: Callable[[Any], bool] = is_filled


@dataclass(frozen=True)
class StepDefinition:
    key: str
    title: str
    rules: tuple[FieldRule, ...] = field(default_factory=tuple)

    def is_valid(self, values: dict[str, Any]) -> bool:
        return all(rule.check(values.get(rule.name)) for rule in self.rules)

    @property
    def required_fields(self) -> list[str]:
        return [rule.name for rule in self.rules]


USER_TYPE_STEP = StepDefinition(
    key="user_type",
    title="Welcome to LocaLink",
    rules=(FieldRule("userType"),),
)

BUSINESS_STEPS: tuple[StepDefinition, ...] = (
    USER_TYPE_STEP,
    StepDefinition(
        key="business_info",
        title="Business Information",
        rules=(FieldRule("businessName"), FieldRule("category")),
    ),
    StepDefinition(
        key="business_details",
        title="Business Details",
        rules=(FieldRule("description"), FieldRule("address")),
    ),
    StepDefinition(
        key="goals",
        title="Goals & Challenges",
        rules=(FieldRule("goals"),),
    ),
    StepDefinition(key="review", title="Ready to Launch"),
)

CONSUMER_STEPS: tuple[StepDefinition, ...] = (
    USER_TYPE_STEP,
    StepDefinition(
        key="preferences",
        title="Your Preferences",
        rules=(FieldRule("serviceTypes"), FieldRule("location")),
    ),
    StepDefinition(
        key="help",
        title="How Can We Help?",
        rules=(FieldRule("generalHelp"),),
    ),
    StepDefinition(key="review", title="Ready to Launch"),
)

STEP_TABLE: dict[UserType, tuple[StepDefinition, ...]] = {
    UserType.BUSINESS: BUSINESS_STEPS,
    UserType.CONSUMER: CONSUMER_STEPS,
}

BUSINESS_FIELDS = ("businessName", "category", "description", "address", "goals", "helpNeeded")
CONSUMER_FIELDS = (
    "preferences",
    "serviceTypes",
    "location",
    "generalHelp",
    "analysisType",
    "goalDescription",
)
KNOWN_FIELDS = frozenset(BUSINESS_FIELDS + CONSUMER_FIELDS)


def steps_for(user_type: Optional[UserType]) -> tuple[StepDefinition, ...]:
    """Step list for a branch.

    Before a user type is chosen the longest branch is reported.
    """
    if user_type is None:
        return max(STEP_TABLE.values(), key=len)
    return STEP_TABLE[user_type]
