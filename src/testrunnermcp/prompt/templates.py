"""Prompt texts offered to MCP clients.

Pure string builders; the server registers each one as an MCP prompt.
"""

from __future__ import annotations

from typing import Optional

from testrunnermcp.config.capability_catalog import STEP_COMMANDS_REFERENCE


def _selector_suffix(selector: Optional[str]) -> str:
    if not selector:
        return ""
    return f" and specifically for selector {selector} and its children"


def build_open_session_prompt(url: str, browser: Optional[str] = None) -> str:
    return f"Please open a session for {url} in {browser or 'chrome'}."


def build_close_session_prompt(session_id: str) -> str:
    return f"Please close the session with ID {session_id}."


def build_accessibility_tree_prompt(session_id: str, selector: Optional[str] = None) -> str:
    return (
        f"Please get the accessibility tree for current page using session ID {session_id}"
        f"{_selector_suffix(selector)}."
    )


def build_dom_tree_prompt(session_id: str, selector: Optional[str] = None) -> str:
    return (
        f"Please get the DOM tree for current page using session ID {session_id}"
        f"{_selector_suffix(selector)}."
    )


def build_test_steps_prompt(scenario: str) -> str:
    """Ask the agent to turn a step/expected scenario into runner steps."""
    lines = [
        f"Please generate test steps based on the following user scenario: \n{scenario}\n",
        'The output should be a JSON array in following format: [{note: "step name", '
        'command: "command", selectors: ["selector"], value: "value", operator: "operator"}] '
        "where:",
        "- selectors: it should include only tested selectors",
        "- value: value to use in the step (if applicable)",
        "- operator: operator to use in the step (if applicable)",
        "Notes:",
        "- In order to analyze page, 2 tools are available: get-accessibility-tree (priority) "
        "and get-dom-tree",
        "- Selectors priority: aria (e.g. aria/XXX), text bound (e.g. h1=XXX, =XXX), "
        "generic XPath (e.g. //h1, //tr/td[2]), CSS",
        f"- Reference for the available steps' commands can be found at: {STEP_COMMANDS_REFERENCE}.",
        "- In case you need additional information to perform a task, please ask user for "
        "more details.",
        "- In all steps property fields (selectors, value) it is possible to use dynamic "
        "variable in format {{variable_name}} that will be replaced at runtime with the "
        "actual variable value.",
        "- In case you need to keep state between steps (e.g. value of search result, clicked "
        "text, etc..), please make sure to use variables and associated command to store the "
        "state and use it in the following steps.",
        "- In case of navigation or redirection, please make sure to add steps validating page "
        "was loaded successfully (e.g. validate page title, validate current url, validate "
        "specific element is present such as logo, etc...)",
        "- Assertion priority is: check on page/dom (e.g. assert-is-displayed, assert-text, "
        "etc...), check on accessibility tree (assert-accessibility-tree) as fallback.",
        "- Make sure to add all necessary assertions to validate expected result provided in "
        "scenario (i.e. element is displayed and its value is correct one).",
    ]
    return "\n".join(lines) + "\n"


def build_test_scenario_prompt(requirements: str) -> str:
    lines = [
        "Please generate a detailed test scenario based on the following high level "
        f"requirements: \n{requirements}\n",
        "The output should be a JSON object representing the test scenario with following "
        "format: [{ step: 'steps details', expected: 'expected outcomes'}].",
        "Notes:",
        "- Make sure to cover all aspects of the requirements in the scenario.",
        "- Use clear and descriptive step details, it can include multiple actions "
        '(e.g. Login, then Navigate to, etc..) and use conceptual actions, not detailed '
        'interactions (e.g. simply "Login" instead of "Enter username", "Enter password", '
        '"Click login")',
        "- Include in expected outcome all the necessary checks to validate completion.",
    ]
    return "\n".join(lines) + "\n"
