"""Tool-facing models: parameter types, output records and the response envelope.

Parameter aliases use ``Annotated[Literal[...], BeforeValidator(...)]`` so the
JSON Schema stays a flat ``{"enum": [...]}`` while wrong-case input from a
model is still accepted at runtime.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, Field


def _normalize_str(v: Any) -> Any:
    """Normalize string input: strip whitespace, lowercase."""
    return v.strip().lower() if isinstance(v, str) else v


def _coerce_string_to_list(v: Any) -> Any:
    """Coerce a stringified JSON array or a single string into a list.

    1. JSON array string: '["aria/Submit", "button=Submit"]' -> [...]
    2. Single value:      'aria/Submit'                     -> ["aria/Submit"]

    Selectors may legitimately contain commas, so there is no comma split.
    """
    if isinstance(v, str):
        v_stripped = v.strip()
        if v_stripped.startswith("["):
            try:
                parsed = json.loads(v_stripped)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
        if v_stripped:
            return [v_stripped]
        return []
    return v


# ── Tool parameter types ──────────────────────────────────────

OpenableSessionType = Annotated[
    Literal["web", "mobile", "api"],
    BeforeValidator(_normalize_str),
]

BrowserName = Annotated[
    Literal["chrome", "firefox", "edge"],
    BeforeValidator(_normalize_str),
]

OptionalSelectorList = Annotated[
    Optional[List[str]], BeforeValidator(_coerce_string_to_list)
]


# ── Structured output records ─────────────────────────────────


class OpenSessionOutput(BaseModel):
    sessionType: Literal["web", "mobile", "api"] = Field(
        description="Type of the opened session"
    )
    sessionId: Optional[str] = Field(description="ID of the opened session")


class AccessibilityTreeOutput(BaseModel):
    axtree: Any = Field(description="Accessibility tree object")


class DomTreeOutput(BaseModel):
    domtree: Any = Field(description="DOM tree object")


class StepOutput(BaseModel):
    result: bool = Field(description="Result of the performed step")


# ── Response envelope ─────────────────────────────────────────


@dataclass
class ToolResponse:
    """Transport-neutral tool response.

    ``texts`` is the human-readable half (one text content item each);
    ``structured_content`` is the machine-typed half checked against the
    tool's output schema. ``None`` means the response carries no
    structured content at all.
    """

    texts: List[str] = field(default_factory=list)
    structured_content: Optional[Dict[str, Any]] = None

    @property
    def text(self) -> str:
        return "\n".join(self.texts)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "content": [{"type": "text", "text": text} for text in self.texts]
        }
        if self.structured_content is not None:
            data["structuredContent"] = dict(self.structured_content)
        return data
