"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pathmove.actions.move_to import MoveToCommand, SubjectType, TargetType


# --- Characters ---

class CharacterSchema(BaseModel):
    id: int
    kind: str
    x: int
    y: int
    real_x: float
    real_y: float
    direction: str
    through: bool = False
    moving: bool = False
    session_state: str = "IDLE"
    target: list[int] | None = None
    destination: list[int] | None = None
    remaining_path: list[list[int]] = Field(default_factory=list)
    stuck_count: int = 0
    forcing_through: bool = False
    last_outcome: str | None = None


class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    character_ids: list[int] = Field(default_factory=list)


class WorldStateResponse(BaseModel):
    tick: int
    characters: list[CharacterSchema]
    events: list[EventSchema] = Field(default_factory=list)


# --- Map ---

class MapResponse(BaseModel):
    width: int
    height: int
    grid: list[int] = Field(description="RLE-encoded Material values: [value, count, value, count, ...]")
    edge_blocks: dict[str, list[str]] = Field(
        default_factory=dict,
        description="'x,y' -> directions in which that tile cannot be crossed",
    )


# --- Commands ---

class MoveToRequest(BaseModel):
    """MoveTo command arguments, using the scripting layer's argument names."""

    model_config = ConfigDict(populate_by_name=True)

    subject: SubjectType = SubjectType.player
    subject_event_id: int = Field(1, ge=1, alias="subjectEventId")
    target_type: TargetType = Field(TargetType.coordinates, alias="targetType")
    target_x: int = Field(0, ge=0, alias="targetX")
    target_y: int = Field(0, ge=0, alias="targetY")
    target_event_id: int = Field(1, ge=1, alias="targetEventId")
    recalculate_if_blocked: bool = Field(True, alias="recalculateIfBlocked")

    def to_command(self) -> MoveToCommand:
        return MoveToCommand(
            subject=self.subject,
            subject_event_id=self.subject_event_id,
            target_type=self.target_type,
            target_x=self.target_x,
            target_y=self.target_y,
            target_event_id=self.target_event_id,
            recalculate_if_blocked=self.recalculate_if_blocked,
        )


class CommandResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


# --- Config / stats ---

class SimulationConfigResponse(BaseModel):
    world_seed: int
    grid_width: int
    grid_height: int
    max_ticks: int
    step_ticks: int
    max_iteration: int
    through_if_hard_blocked: bool
    closest_point_radius: int
    stuck_threshold: int
    num_walkers: int
    tick_rate: float


class SimulationStats(BaseModel):
    tick: int
    character_count: int
    active_sessions: int
    commands_accepted: int
    commands_rejected: int
    running: bool
    paused: bool
