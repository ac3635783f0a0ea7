"""
Domain models — pydantic and dataclass types for the orchestrator.

All models are re-exported here for convenient access:

    from starterkit.core.models import Action, Receipt, ProjectState, Step, RunReport
"""

from starterkit.core.models.action import Action, Receipt
from starterkit.core.models.report import (
    RunReport,
    StepRecord,
    ToolResponse,
    ValidationResult,
)
from starterkit.core.models.state import Capability, DetectionRule, ProjectState
from starterkit.core.models.step import (
    Operation,
    Precondition,
    RunStatus,
    Step,
    StepStatus,
    refuses,
    requires,
)

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # state.py
    "Capability",
    "DetectionRule",
    "ProjectState",
    # step.py
    "Operation",
    "Precondition",
    "RunStatus",
    "Step",
    "StepStatus",
    "refuses",
    "requires",
    # report.py
    "RunReport",
    "StepRecord",
    "ToolResponse",
    "ValidationResult",
]
