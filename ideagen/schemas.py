from __future__ import annotations

from typing import Any, List, Mapping

from pydantic import BaseModel, ConfigDict, Field

from ideagen.errors import ClientInputError
from ideagen.services.sanitize import (
    MAX_STRING_LENGTH,
    VALID_DIFFICULTIES,
    VALID_MODES,
    sanitize_string,
    validate_choice,
    validate_number,
)

MISSING_FIELDS_MESSAGE = "Missing required fields: domain, audience, difficulty, mode"
INVALID_DIFFICULTY_MESSAGE = "Invalid difficulty level"
INVALID_MODE_MESSAGE = "Invalid mode"

DEFAULT_DAYS = 7
DEFAULT_IDEA_COUNT = 3


class IdeaRequest(BaseModel):
    """Sanitized, validated idea parameters for a single call."""

    domain: str
    audience: str
    difficulty: str
    mode: str
    skills: str = ""
    constraints: str = ""
    time_available_days: int = DEFAULT_DAYS
    multi_idea_count: int = DEFAULT_IDEA_COUNT

    @classmethod
    def from_payload(
        cls,
        body: Mapping[str, Any],
        *,
        max_length: int = MAX_STRING_LENGTH,
        max_days: int = 365,
        max_ideas: int = 5,
    ) -> "IdeaRequest":
        """Sanitize a raw JSON object and enforce the field invariants.

        Raises ClientInputError for missing required fields or values outside
        the difficulty / mode sets. Numeric fields never fail; they are
        clamped or defaulted.
        """
        fields = {
            name: sanitize_string(body.get(name), max_length)
            for name in ("domain", "audience", "difficulty", "mode", "skills", "constraints")
        }
        days = validate_number(body.get("time_available_days"), 1, max_days, DEFAULT_DAYS)
        count = validate_number(body.get("multi_idea_count"), 1, max_ideas, DEFAULT_IDEA_COUNT)

        if not all(fields[k] for k in ("domain", "audience", "difficulty", "mode")):
            raise ClientInputError(MISSING_FIELDS_MESSAGE)
        if not validate_choice(fields["difficulty"], VALID_DIFFICULTIES):
            raise ClientInputError(INVALID_DIFFICULTY_MESSAGE)
        if not validate_choice(fields["mode"], VALID_MODES):
            raise ClientInputError(INVALID_MODE_MESSAGE)

        return cls(time_available_days=days, multi_idea_count=count, **fields)


# ---------------------------------------------------------------------------
# Response documentation models. Gateway output is returned verbatim; these
# only describe the shape the model is asked to produce.
# ---------------------------------------------------------------------------


class _DocModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class RoadmapPhase(_DocModel):
    phase: str = Field(..., description='e.g. "Day 1" or "Week 1"')
    tasks: List[str]


class Feasibility(_DocModel):
    technical: float = Field(..., ge=1, le=10)
    time_days: float
    market_fit: float = Field(..., ge=1, le=10)


class TaskArea(_DocModel):
    area: str = Field(..., description="frontend | backend | AI/ML | DevOps | UI/UX")
    tasks: List[str]
    estimated_hours: float


class GeneratedIdea(_DocModel):
    title: str
    tagline: str
    problem: str
    solution: str
    features: List[str]
    tech_stack: List[str]
    architecture: str = Field(..., description="ASCII architecture diagram")
    roadmap: List[RoadmapPhase]
    feasibility: Feasibility
    persona: str
    monetization: str
    task_breakdown: List[TaskArea]


class IdeasResponse(_DocModel):
    ideas: List[GeneratedIdea]


class ErrorResponse(BaseModel):
    error: str


class IdeaRequestBody(BaseModel):
    """Inbound body as documented in OpenAPI; parsing is done by IdeaRequest."""

    domain: str
    audience: str
    difficulty: str = Field(..., description=" | ".join(VALID_DIFFICULTIES))
    mode: str = Field(..., description=" | ".join(VALID_MODES))
    skills: str | None = None
    constraints: str | None = None
    time_available_days: int | None = Field(default=None, description="1-365, default 7")
    multi_idea_count: int | None = Field(default=None, description="1-5, default 3")
