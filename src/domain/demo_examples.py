"""
Classroom demo routes picked from the loaded node set.

Nodes are ranked by planar (degree) distance to the city centre -- only
the ordering matters here, so the Haversine formula is not needed:

* **easy**   -- the two nodes closest to the centre.
* **medium** -- closest node to the median-ranked one (>= 4 nodes).
* **hard**   -- the two nodes farthest from the centre.
* **demo**   -- first node to the sixth (or last) node of the data set.

Examples whose source equals their target are dropped.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from .entities import GeoNode
from .enums import Difficulty
from .geo import CULIACAN_CENTER


@dataclass(frozen=True)
class DemoExample:
    id: str
    name: str
    description: str
    source_id: int
    target_id: int
    difficulty: Difficulty
    learning_objective: str


def generate_demo_examples(
    nodes: Sequence[GeoNode],
    center: tuple[float, float] = CULIACAN_CENTER,
) -> list[DemoExample]:
    if len(nodes) < 2:
        return []

    c_lat, c_lon = center
    ranked = sorted(nodes, key=lambda n: math.hypot(n.lat - c_lat, n.lon - c_lon))

    examples = [
        DemoExample(
            id="easy-1",
            name="Short route",
            description="Two nearby points, ideal to follow the algorithm step by step",
            source_id=ranked[0].id,
            target_id=ranked[1].id,
            difficulty=Difficulty.EASY,
            learning_objective="Understand the basic exploration order",
        )
    ]

    mid = len(ranked) // 2
    if len(ranked) >= 4:
        examples.append(
            DemoExample(
                id="medium-1",
                name="Medium route",
                description="Medium distance route, shows how the search widens",
                source_id=ranked[0].id,
                target_id=ranked[mid].id,
                difficulty=Difficulty.MEDIUM,
                learning_objective="Analyse complexity and efficiency",
            )
        )

    examples.append(
        DemoExample(
            id="hard-1",
            name="Long route",
            description="Distant points, demonstrates how the algorithm scales",
            source_id=ranked[-1].id,
            target_id=ranked[-2].id,
            difficulty=Difficulty.HARD,
            learning_objective="Evaluate performance on larger searches",
        )
    )

    examples.append(
        DemoExample(
            id="demo-1",
            name="Class demonstration",
            description="Route tuned for a live classroom walkthrough",
            source_id=nodes[0].id,
            target_id=nodes[min(5, len(nodes) - 1)].id,
            difficulty=Difficulty.EASY,
            learning_objective="Show the fundamental pathfinding concepts",
        )
    )

    return [ex for ex in examples if ex.source_id != ex.target_id]
