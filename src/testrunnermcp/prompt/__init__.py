"""Prompt templates exposed through MCP."""

from .templates import (
    build_accessibility_tree_prompt,
    build_close_session_prompt,
    build_dom_tree_prompt,
    build_open_session_prompt,
    build_test_scenario_prompt,
    build_test_steps_prompt,
)

__all__ = [
    "build_accessibility_tree_prompt",
    "build_close_session_prompt",
    "build_dom_tree_prompt",
    "build_open_session_prompt",
    "build_test_scenario_prompt",
    "build_test_steps_prompt",
]
