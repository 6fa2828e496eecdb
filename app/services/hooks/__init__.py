"""
Service Hooks.

Integration hooks that bridge the API and the scheduler.
"""

from .manual_checkin import trigger_manual_checkin

__all__ = ["trigger_manual_checkin"]
