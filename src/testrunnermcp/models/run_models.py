"""Run configuration documents understood by the test runner.

The runner executes suites of tests; each test is a list of steps. These
dataclasses mirror that nesting and serialise to the runner's camelCase
JSON through ``to_dict()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TestStep:
    """One atomic automation action."""

    __test__ = False  # Not a pytest test class

    command: str
    selectors: Optional[List[str]] = None
    position: Optional[int] = None
    value: Optional[str] = None
    operator: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"command": self.command}
        if self.selectors is not None:
            data["selectors"] = list(self.selectors)
        if self.position is not None:
            data["position"] = self.position
        if self.value is not None:
            data["value"] = self.value
        if self.operator is not None:
            data["operator"] = self.operator
        return data


@dataclass
class TestConfiguration:
    """A named test of a given session type."""

    __test__ = False  # Not a pytest test class

    name: str
    type: str
    steps: List[TestStep] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "steps": [step.to_dict() for step in self.steps],
        }


@dataclass
class SuiteConfiguration:
    name: str
    tests: List[TestConfiguration] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "tests": [test.to_dict() for test in self.tests]}


@dataclass
class SessionDescriptor:
    """Session the runner should start (used only when opening)."""

    type: str
    browser_name: Optional[str] = None
    start_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        browser: Dict[str, Any] = {}
        if self.browser_name is not None:
            browser["name"] = self.browser_name
        if self.start_url is not None:
            browser["startUrl"] = self.start_url
        if browser:
            data["browser"] = browser
        return data


@dataclass
class RunSettings:
    sessions: List[SessionDescriptor]
    run_type: str
    run_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessions": [session.to_dict() for session in self.sessions],
            "runType": self.run_type,
            "runName": self.run_name,
        }


@dataclass
class RunConfiguration:
    """Top-level document handed to the test runner."""

    suites: List[SuiteConfiguration] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)
    run_settings: Optional[RunSettings] = None
    functions: List[Dict[str, Any]] = field(default_factory=list)
    apis: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.run_settings is not None:
            data["runConfiguration"] = self.run_settings.to_dict()
        data["variables"] = dict(self.variables)
        data["suites"] = [suite.to_dict() for suite in self.suites]
        data["functions"] = list(self.functions)
        data["apis"] = list(self.apis)
        return data
