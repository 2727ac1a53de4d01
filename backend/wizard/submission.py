"""Wizard submission payloads, one model per user type."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class BusinessSubmission(BaseModel):
    """Completed business-owner wizard."""

    model_config = ConfigDict(str_strip_whitespace=True)

    userType: Literal["business"] = "business"
    businessName: str = Field(min_length=1)
    category: str = ""
    description: str = ""
    address: str = ""
    goals: str = ""
    helpNeeded: str = ""


class ConsumerSubmission(BaseModel):
    """Completed consumer wizard."""

    model_config = ConfigDict(str_strip_whitespace=True)

    userType: Literal["consumer"] = "consumer"
    preferences: str = ""
    serviceTypes: list[str] = Field(default_factory=list)
    location: str = ""
    generalHelp: str = ""
    analysisType: str = ""
    goalDescription: str = ""


WizardSubmission = Annotated[
    Union[BusinessSubmission, ConsumerSubmission],
    Field(discriminator="userType"),
]
