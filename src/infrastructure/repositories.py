"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and hands
domain entities (``GeoNode`` / ``StreetEdge``) back to the caller.
"""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import CityNodeModel, StreetEdgeModel
from src.domain.entities import GeoNode, StreetEdge


class CityNodeRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def bulk_create(self, nodes: Iterable[GeoNode]) -> int:
        models = [
            CityNodeModel(id=n.id, lat=n.lat, lon=n.lon, elevation=n.elevation)
            for n in nodes
        ]
        self.session.add_all(models)
        await self.session.flush()
        return len(models)

    async def get_by_id(self, node_id: int) -> Optional[GeoNode]:
        model = await self.session.get(CityNodeModel, node_id)
        return model.to_entity() if model else None

    async def list_nodes(self) -> list[GeoNode]:
        result = await self.session.execute(
            select(CityNodeModel).order_by(CityNodeModel.id)
        )
        return [m.to_entity() for m in result.scalars().all()]

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(CityNodeModel)
        )
        return result.scalar() or 0


class StreetEdgeRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def bulk_create(self, edges: Iterable[StreetEdge]) -> int:
        models = [
            StreetEdgeModel(
                from_node_id=e.from_id,
                to_node_id=e.to_id,
                weight=e.weight,
                street_name=e.street_name,
            )
            for e in edges
        ]
        self.session.add_all(models)
        await self.session.flush()
        return len(models)

    async def list_edges(self) -> list[StreetEdge]:
        result = await self.session.execute(
            select(StreetEdgeModel).order_by(StreetEdgeModel.id)
        )
        return [m.to_entity() for m in result.scalars().all()]

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(StreetEdgeModel)
        )
        return result.scalar() or 0
