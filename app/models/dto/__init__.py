# Data Transfer Objects (DTOs)
# Derived values and request/response models for API endpoints

from app.models.dto.progress import ProgressClassification, ProgressResult
from app.models.dto.checkin import CheckInSource, CheckInPrompt, CheckInResponse
from app.models.dto.nudge_config import NudgeConfig, NudgeConfigUpdate

__all__ = [
    "ProgressClassification",
    "ProgressResult",
    "CheckInSource",
    "CheckInPrompt",
    "CheckInResponse",
    "NudgeConfig",
    "NudgeConfigUpdate",
]
