"""
Seed script -- loads a city dataset into the database.

Run after migrations:
    python seed.py [path/to/dataset.json]

The dataset is either the street export ``{"nodes": [...], "edges": [...]}``
or a bare node list (routes then use the proximity fallback graph).  The
path defaults to ``DATASET_PATH``; if that file does not exist a small
demo grid around Culiacan's centre is seeded instead.
"""

import asyncio
import sys
from pathlib import Path

from src.config import settings
from src.domain.entities import GeoNode, StreetEdge
from src.domain.geo import node_distance_m
from src.infrastructure.database import async_session_factory, engine
from src.infrastructure.dataset_loader import CityDataset, load_dataset_file
from src.infrastructure.repositories import CityNodeRepository, StreetEdgeRepository

GRID_SIZE = 6  # 6 x 6 intersections
GRID_STEP_DEG = 0.0008  # ~80-90 m between intersections

AVENUES = ["Av. Obregon", "Av. Rosales", "Av. Morelos", "Av. Juarez", "Av. Hidalgo", "Av. Carrasco"]
STREETS = ["Calle Ruperto Paliza", "Calle Andrade", "Calle Escobedo", "Calle Zaragoza", "Calle Colon", "Calle Rubi"]


def demo_grid() -> CityDataset:
    """Two-way street grid so the demo works without an OSM export."""
    nodes: list[GeoNode] = []
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            nodes.append(
                GeoNode(
                    id=row * GRID_SIZE + col + 1,
                    lat=settings.demo_center_lat + (row - GRID_SIZE / 2) * GRID_STEP_DEG,
                    lon=settings.demo_center_lon + (col - GRID_SIZE / 2) * GRID_STEP_DEG,
                )
            )

    edges: list[StreetEdge] = []
    for node in nodes:
        row, col = divmod(node.id - 1, GRID_SIZE)
        for d_row, d_col, name in ((0, 1, AVENUES[row]), (1, 0, STREETS[col])):
            r, c = row + d_row, col + d_col
            if r >= GRID_SIZE or c >= GRID_SIZE:
                continue
            other = nodes[r * GRID_SIZE + c]
            weight = node_distance_m(node, other)
            edges.append(StreetEdge(node.id, other.id, weight, name))
            edges.append(StreetEdge(other.id, node.id, weight, name))

    return CityDataset(nodes=nodes, edges=edges)


async def seed(dataset: CityDataset):
    async with async_session_factory() as session:
        node_repo = CityNodeRepository(session)
        edge_repo = StreetEdgeRepository(session)

        # Check if already seeded
        if await node_repo.count() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Nodes ─────────────────────────────────────────────────────
        created = await node_repo.bulk_create(dataset.nodes)
        print(f"  Created {created} city nodes")

        # ── Edges (dangling endpoints would violate the foreign keys) ─
        known = {n.id for n in dataset.nodes}
        edges = [e for e in dataset.edges if e.from_id in known and e.to_id in known]
        if len(edges) < len(dataset.edges):
            print(f"  Dropped {len(dataset.edges) - len(edges)} edges with unknown endpoints")
        created = await edge_repo.bulk_create(edges)
        print(f"  Created {created} street edges")

        await session.commit()
        print("\nSeed complete!")


async def main():
    path = Path(sys.argv[1] if len(sys.argv) > 1 else settings.dataset_path)
    if path.exists():
        dataset = load_dataset_file(path)
    else:
        print(f"{path} not found, seeding the demo grid")
        dataset = demo_grid()

    print("Seeding database...")
    await seed(dataset)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
