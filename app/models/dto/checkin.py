"""
Check-in DTOs.

A fired ping produces a CheckInPrompt for the presenter; the user answers
with a CheckInResponse or cancels (no response at all).
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from app.models.database.scheduler_state import BlockerType
from app.models.dto.progress import ProgressResult


class CheckInSource(str, Enum):
    """What opened the check-in."""

    SCHEDULED = "scheduled"
    MANUAL = "manual"


class CheckInPrompt(BaseModel):
    """Everything the presentation layer needs to show one check-in."""

    workspace_id: str
    source: CheckInSource
    opening_message: str = Field(description="Short greeting derived from progress")
    description: str = Field(description="One-line progress description")
    detailed_report: str = Field(description="Multi-line comparison with the previous check-in")
    questions: List[str] = Field(default_factory=list)
    progress: ProgressResult
    opened_at: datetime


class CheckInResponse(BaseModel):
    """User answers for a check-in."""

    blocker_type: BlockerType = Field(default=BlockerType.NONE, description="Reported blocker")
    answers: List[str] = Field(default_factory=list, description="Free-text answers, in question order")
    engaged: bool = Field(
        default=True,
        description="User interacted with the dialog (counts as activity)"
    )

    model_config = {"json_schema_extra": {"examples": [
        {
            "blocker_type": "waiting_for_person",
            "answers": ["Payment webhook retries", "Waiting for review", "Address comments"],
            "engaged": True,
        }
    ]}}
