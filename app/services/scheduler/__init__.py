"""
Scheduler Module

Idle detection, ping timers and the per-workspace nudge state machine.
"""
from .scheduler_orchestrator import get_scheduler_orchestrator, SchedulerOrchestrator
from .scheduler_base import SchedulerBase
from .activity_debouncer import ActivityDebouncer
from .nudge_scheduler import NudgeScheduler, NudgePhase
from .workflows.nudge_workflow_scheduler import (
    get_nudge_workflow_scheduler,
    NudgeWorkflowScheduler,
)

__all__ = [
    "get_scheduler_orchestrator",
    "SchedulerOrchestrator",
    "SchedulerBase",
    "ActivityDebouncer",
    "NudgeScheduler",
    "NudgePhase",
    "get_nudge_workflow_scheduler",
    "NudgeWorkflowScheduler",
]
