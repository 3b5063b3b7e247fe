"""Translate tool requests into test runner run configurations."""

from __future__ import annotations

from typing import Optional, Union

from testrunnermcp.models.run_models import (
    RunConfiguration,
    RunSettings,
    SessionDescriptor,
    SuiteConfiguration,
    TestConfiguration,
    TestStep,
)
from testrunnermcp.models.session_models import UNSET_POSITION, SessionType, StepRequest

STEP_TEST_NAME = "McpServer Do Step Test"
STEP_SUITE_NAME = "McpServer Do Step Suite"


def _type_value(session_type: Union[SessionType, str]) -> str:
    return SessionType(session_type).value


def build_step(request: StepRequest) -> TestStep:
    """Build a runner step, attaching optional fields only when meaningful.

    The command is passed through untouched; the runner owns the command
    vocabulary and reports unknown commands as a failed run.
    """
    step = TestStep(command=request.command)
    if request.selectors:
        step.selectors = list(request.selectors)
    if request.value:
        step.value = request.value
    if request.position is not None and request.position != UNSET_POSITION:
        step.position = request.position
    if request.operator:
        step.operator = request.operator
    return step


def translate_step(
    request: StepRequest, session_type: Union[SessionType, str]
) -> RunConfiguration:
    """Wrap a single step into one suite holding one test.

    The runner only executes suites, so even an ad-hoc step travels as
    suite -> test -> step. Variables stay empty for step execution.
    """
    test = TestConfiguration(
        name=STEP_TEST_NAME,
        type=_type_value(session_type),
        steps=[build_step(request)],
    )
    return RunConfiguration(
        suites=[SuiteConfiguration(name=STEP_SUITE_NAME, tests=[test])],
        variables={},
    )


def build_open_session_run(
    session_type: Union[SessionType, str],
    url: Optional[str] = None,
    browser: Optional[str] = None,
) -> RunConfiguration:
    """Minimal document asking the runner to start a single session."""
    type_value = _type_value(session_type)
    variables = {}
    if url:
        variables["startUrl"] = url
    return RunConfiguration(
        run_settings=RunSettings(
            sessions=[
                SessionDescriptor(type=type_value, browser_name=browser, start_url=url)
            ],
            run_type=type_value,
            run_name=f"McpServer Open Session for URL: {url}",
        ),
        variables=variables,
    )
