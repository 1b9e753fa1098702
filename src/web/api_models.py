from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class CounterModel(BaseModel):
    id: str
    count: int
    target_value: int
    name: Optional[str] = None
    color: Optional[str] = None
    progress: float = Field(..., description="count / target_value clamped to [0, 1]")


class FeedbackModel(BaseModel):
    direction: str = Field(..., description="increment|decrement")
    magnitude: int
    generation: int
    committed: bool


class StateResponse(BaseModel):
    """Everything a presentation layer needs to render the counters."""
    counters: List[CounterModel]
    active_index: int
    can_remove: bool = Field(..., description="False when only one counter remains")
    has_previous: bool
    has_next: bool
    editor_open: bool
    editing_counter_id: Optional[str] = None
    feedback: Optional[FeedbackModel] = None


class IntentModel(BaseModel):
    kind: str = Field(..., description="none|increment|decrement|switch_prev|switch_next|feedback_hint")
    amount: int = 0
    direction: Optional[str] = None


class GestureResponse(BaseModel):
    intent: IntentModel
    state: StateResponse


class RemoveResponse(BaseModel):
    removed: bool
    state: StateResponse


class TargetRequest(BaseModel):
    # Raw form input; validated by the edit service, not by pydantic
    target_value: Any = None


class DetailsRequest(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None


class ActiveIndexRequest(BaseModel):
    index: int


class EditorOpenRequest(BaseModel):
    counter_id: Optional[str] = None


class PointerRequest(BaseModel):
    phase: str = Field(..., description="down|move|up|cancel")
    x: float = 0.0
    y: float = 0.0
    t: float = Field(0.0, description="Timestamp in milliseconds")
    excluded: bool = Field(False, description="Pointer went down over an excluded region")


class HealthResponse(BaseModel):
    status: str
    counters: int
    storage_backend: str
    write_failures: int
