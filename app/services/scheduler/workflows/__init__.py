"""
Workflow Implementations

Periodic workspace workflows driven by the shared orchestrator.
"""
from .nudge_workflow_scheduler import (
    get_nudge_workflow_scheduler,
    NudgeWorkflowScheduler,
    default_provider_for,
)

__all__ = [
    "get_nudge_workflow_scheduler",
    "NudgeWorkflowScheduler",
    "default_provider_for",
]
