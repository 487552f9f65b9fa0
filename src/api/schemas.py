"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.enums import Difficulty, GraphMode, StepAction


# ── Shared ────────────────────────────────────────────────────────────


class GeoNodeSchema(BaseModel):
    id: int
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    elevation: Optional[float] = None

    model_config = {"from_attributes": True}


class StreetEdgeSchema(BaseModel):
    """Input edge; keys follow the dataset files (``from`` / ``to``)."""

    from_id: int = Field(..., alias="from")
    to_id: int = Field(..., alias="to")
    weight: float = Field(..., ge=0, description="Length in metres.")
    street_name: str = ""

    model_config = {"populate_by_name": True}


# ── Requests ──────────────────────────────────────────────────────────


class RouteRequest(BaseModel):
    source_id: int
    target_id: int
    max_radius_m: Optional[float] = Field(
        None,
        ge=0,
        description="Proximity graph only: max link length (default from settings).",
    )
    max_connections: Optional[int] = Field(
        None,
        ge=0,
        description="Proximity graph only: max links per node (default from settings).",
    )
    use_street_edges: bool = Field(
        True,
        description="Set to false to force the proximity graph even if street edges exist.",
    )


class RouteComputeRequest(BaseModel):
    nodes: list[GeoNodeSchema] = Field(..., min_length=1)
    edges: Optional[list[StreetEdgeSchema]] = None
    source_id: int
    target_id: int
    max_radius_m: Optional[float] = Field(None, ge=0)
    max_connections: Optional[int] = Field(None, ge=0)


class PlaybackCreateRequest(RouteRequest):
    speed_ms: Optional[int] = Field(None, gt=0, le=60_000)
    autoplay: bool = False


class JumpRequest(BaseModel):
    index: int = Field(..., ge=0)


class SpeedRequest(BaseModel):
    speed_ms: int = Field(..., gt=0, le=60_000)


# ── Responses ─────────────────────────────────────────────────────────


class AlgorithmStepSchema(BaseModel):
    """One replayable step; serialised with the front end's camelCase keys."""

    step: int
    action: StepAction
    current_node: int = Field(..., alias="currentNode")
    explored_nodes: list[int] = Field(..., alias="exploredNodes")
    frontier: list[int]
    distances: dict[int, float]
    description: str
    timestamp: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class RouteMetricsSchema(BaseModel):
    execution_time_ms: float
    nodes_explored: int
    graph_nodes: int
    graph_edges: int
    avg_connections: float

    model_config = {"from_attributes": True}


class RouteResponse(BaseModel):
    found: bool
    mode: GraphMode
    total_distance_m: float
    geometric_length_m: float
    route: list[GeoNodeSchema]
    steps: list[AlgorithmStepSchema]
    metrics: RouteMetricsSchema

    model_config = {"from_attributes": True}


class BoundsResponse(BaseModel):
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float
    center_lat: float
    center_lon: float
    zoom: int

    model_config = {"from_attributes": True}


class DemoExampleSchema(BaseModel):
    id: str
    name: str
    description: str
    source_id: int
    target_id: int
    difficulty: Difficulty
    learning_objective: str

    model_config = {"from_attributes": True}


class PlaybackStateResponse(BaseModel):
    session_id: str
    current_index: int
    total_steps: int
    is_playing: bool
    speed_ms: int
    current_step: Optional[AlgorithmStepSchema] = None


class StatsResponse(BaseModel):
    nodes: int
    edges: int
    playback_sessions: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
