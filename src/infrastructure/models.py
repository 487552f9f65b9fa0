"""
SQLAlchemy ORM models for the city dataset.

Tables
------
* ``city_nodes``    -- routable points (street intersections / samples)
* ``street_edges``  -- directed, weighted street segments between nodes

Node ids come from the source dataset (OpenStreetMap export) and are kept
as-is so edges and client selections refer to the same ids.

Indexes
-------
* **B-Tree** on ``street_edges.from_node_id`` -- adjacency is built by
  origin node.
"""

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)

from .database import Base
from src.domain.entities import GeoNode, StreetEdge


class CityNodeModel(Base):
    __tablename__ = "city_nodes"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    elevation = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_entity(self) -> GeoNode:
        return GeoNode(
            id=self.id, lat=self.lat, lon=self.lon, elevation=self.elevation
        )


class StreetEdgeModel(Base):
    __tablename__ = "street_edges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_node_id = Column(BigInteger, ForeignKey("city_nodes.id"), nullable=False)
    to_node_id = Column(BigInteger, ForeignKey("city_nodes.id"), nullable=False)
    weight = Column(Float, nullable=False)  # metres
    street_name = Column(String(255), nullable=False, default="")

    __table_args__ = (
        Index("idx_street_edges_from", "from_node_id"),
    )

    def to_entity(self) -> StreetEdge:
        return StreetEdge(
            from_id=self.from_node_id,
            to_id=self.to_node_id,
            weight=self.weight,
            street_name=self.street_name or "",
        )
