"""Data models for the testrunnermcp package."""

from .run_models import (
    RunConfiguration,
    RunSettings,
    SessionDescriptor,
    SuiteConfiguration,
    TestConfiguration,
    TestStep,
)
from .session_models import (
    UNSET_POSITION,
    EngineResult,
    Session,
    SessionType,
    StepRequest,
)
from .tool_models import (
    AccessibilityTreeOutput,
    DomTreeOutput,
    OpenSessionOutput,
    StepOutput,
    ToolResponse,
)

__all__ = [
    "UNSET_POSITION",
    "AccessibilityTreeOutput",
    "DomTreeOutput",
    "EngineResult",
    "OpenSessionOutput",
    "RunConfiguration",
    "RunSettings",
    "Session",
    "SessionDescriptor",
    "SessionType",
    "StepOutput",
    "StepRequest",
    "SuiteConfiguration",
    "TestConfiguration",
    "TestStep",
    "ToolResponse",
]
