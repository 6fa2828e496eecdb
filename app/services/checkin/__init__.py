"""Check-in presentation boundary and message composition."""

from app.services.checkin.presenter import (
    CheckInPresenter,
    PendingCheckInPresenter,
    PendingCheckIn,
)
from app.services.checkin.message_composer import MessageComposer

__all__ = [
    "CheckInPresenter",
    "PendingCheckInPresenter",
    "PendingCheckIn",
    "MessageComposer",
]
