"""
City node endpoints
===================

GET /api/v1/nodes               -- all nodes of the stored dataset
GET /api/v1/nodes/nearby        -- closest nodes to a map click
GET /api/v1/nodes/bounds        -- bounding box / centre / zoom for the map
GET /api/v1/nodes/{node_id}     -- a single node
GET /api/v1/demo-examples       -- classroom example routes
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db
from src.api.middleware import limiter
from src.api.schemas import BoundsResponse, DemoExampleSchema, GeoNodeSchema
from src.config import settings
from src.domain.demo_examples import generate_demo_examples
from src.domain.geo import compute_bounds, find_nearby_nodes
from src.infrastructure.repositories import CityNodeRepository

router = APIRouter(tags=["nodes"])


@router.get(
    "/nodes",
    response_model=list[GeoNodeSchema],
    summary="List all city nodes",
)
@limiter.limit(settings.rate_limit)
async def list_nodes(request: Request, db: AsyncSession = Depends(get_db)):
    return await CityNodeRepository(db).list_nodes()


@router.get(
    "/nodes/nearby",
    response_model=list[GeoNodeSchema],
    summary="Nodes closest to a point, nearest first",
)
@limiter.limit(settings.rate_limit)
async def nearby_nodes(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius_m: Optional[float] = Query(None, gt=0),
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    nodes = await CityNodeRepository(db).list_nodes()
    return find_nearby_nodes(
        nodes,
        lat,
        lon,
        radius_m if radius_m is not None else settings.nearby_radius_m,
        limit if limit is not None else settings.nearby_limit,
    )


@router.get(
    "/nodes/bounds",
    response_model=BoundsResponse,
    summary="Map bounds and suggested zoom for the dataset",
    responses={404: {"description": "No nodes loaded."}},
)
@limiter.limit(settings.rate_limit)
async def node_bounds(request: Request, db: AsyncSession = Depends(get_db)):
    bounds = compute_bounds(await CityNodeRepository(db).list_nodes())
    if bounds is None:
        raise HTTPException(status_code=404, detail="No city nodes loaded")
    return BoundsResponse.model_validate(bounds)


@router.get(
    "/nodes/{node_id}",
    response_model=GeoNodeSchema,
    summary="Get a single node",
)
@limiter.limit(settings.rate_limit)
async def get_node(
    request: Request,
    node_id: int,
    db: AsyncSession = Depends(get_db),
):
    node = await CityNodeRepository(db).get_by_id(node_id)
    if not node:
        raise HTTPException(status_code=404, detail="Node not found")
    return node


@router.get(
    "/demo-examples",
    response_model=list[DemoExampleSchema],
    summary="Predefined example routes for classroom demos",
)
@limiter.limit(settings.rate_limit)
async def demo_examples(request: Request, db: AsyncSession = Depends(get_db)):
    nodes = await CityNodeRepository(db).list_nodes()
    return generate_demo_examples(
        nodes, center=(settings.demo_center_lat, settings.demo_center_lon)
    )
