"""
Route endpoints
===============

POST /api/v1/routes         -- shortest route over the stored city dataset
POST /api/v1/routes/compute -- shortest route over an inline node/edge payload

Both return the route, its length and the full Dijkstra step trace.
"""

from __future__ import annotations

from typing import Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db
from src.api.middleware import limiter
from src.api.schemas import RouteComputeRequest, RouteRequest, RouteResponse
from src.config import settings
from src.domain.entities import GeoNode, RouteInputError, RouteResult, StreetEdge
from src.domain.shortest_path import compute_route
from src.infrastructure.repositories import CityNodeRepository, StreetEdgeRepository

router = APIRouter(prefix="/routes", tags=["routes"])


async def run_route(
    nodes: Sequence[GeoNode],
    edges: Optional[Sequence[StreetEdge]],
    source_id: int,
    target_id: int,
    max_radius_m: Optional[float] = None,
    max_connections: Optional[int] = None,
) -> RouteResult:
    """Run ``compute_route`` off the event loop with settings as defaults."""
    return await run_in_threadpool(
        compute_route,
        nodes,
        edges,
        source_id,
        target_id,
        max_radius_m=(
            settings.max_connection_radius_m if max_radius_m is None else max_radius_m
        ),
        max_connections=(
            settings.max_connections if max_connections is None else max_connections
        ),
    )


async def route_from_dataset(db: AsyncSession, body: RouteRequest) -> RouteResult:
    """Load the stored dataset and compute; unknown ids become a 404."""
    nodes = await CityNodeRepository(db).list_nodes()
    edges = await StreetEdgeRepository(db).list_edges() if body.use_street_edges else None
    try:
        return await run_route(
            nodes,
            edges,
            body.source_id,
            body.target_id,
            body.max_radius_m,
            body.max_connections,
        )
    except RouteInputError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.post(
    "",
    response_model=RouteResponse,
    summary="Compute the shortest route between two stored nodes",
    responses={404: {"description": "Source or target node not found."}},
)
@limiter.limit(settings.rate_limit)
async def create_route(
    request: Request,
    body: RouteRequest,
    db: AsyncSession = Depends(get_db),
):
    result = await route_from_dataset(db, body)
    return RouteResponse.model_validate(result)


@router.post(
    "/compute",
    response_model=RouteResponse,
    summary="Compute the shortest route over an inline dataset",
    description=(
        "Street edges are used when supplied; otherwise nodes are linked by "
        "the proximity fallback (one neighbour per compass quadrant)."
    ),
)
@limiter.limit(settings.rate_limit)
async def compute_inline_route(request: Request, body: RouteComputeRequest):
    nodes = [
        GeoNode(id=n.id, lat=n.lat, lon=n.lon, elevation=n.elevation)
        for n in body.nodes
    ]
    edges = None
    if body.edges:
        edges = [
            StreetEdge(
                from_id=e.from_id,
                to_id=e.to_id,
                weight=e.weight,
                street_name=e.street_name,
            )
            for e in body.edges
        ]

    try:
        result = await run_route(
            nodes,
            edges,
            body.source_id,
            body.target_id,
            body.max_radius_m,
            body.max_connections,
        )
    except RouteInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return RouteResponse.model_validate(result)
