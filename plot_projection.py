"""Plot a plan view and procedure altitude profile of the projected aviation map.

This script uses the aviation_map library to load the data document and project
it with every layer switched on, then draws the entities with matplotlib.
"""

import asyncio
import sys
from pathlib import Path

import matplotlib.pyplot as plt

from aviation_map import FilterState, load_dataset, project
from aviation_map.models import Color, EntityKind, Layer, RenderableEntity

DATA_FILE = Path(__file__).parent / "aviation_data.json"
OUTPUT_PLOT = Path(__file__).parent / "aviation_map.png"


def _mpl_color(color: Color) -> tuple[float, float, float, float]:
    return (color.red / 255, color.green / 255, color.blue / 255, color.alpha / 255)


def all_layers_on(filters: FilterState) -> FilterState:
    """Switch on the layers that are off by default."""
    for layer in Layer:
        if not filters.layer_enabled(layer):
            filters = filters.toggle_layer(layer)
    return filters


def plot_entities(entities: list[RenderableEntity], path: Path, title: str = "Aviation Map") -> None:
    """Plan view (lon/lat) of every entity plus the altitude profile of procedure routes."""
    fig, (plan, profile) = plt.subplots(1, 2, figsize=(16, 7), gridspec_kw={"width_ratios": [3, 2]})

    for entity in entities:
        if entity.polygon is not None:
            xs = [p.lon for p in entity.polygon.positions]
            ys = [p.lat for p in entity.polygon.positions]
            plan.fill(xs, ys, color=_mpl_color(entity.polygon.material))
            plan.plot(xs, ys, color=_mpl_color(entity.polygon.outline_color), linewidth=0.8)
        elif entity.polyline is not None:
            line = entity.polyline
            xs = [p.lon for p in line.positions]
            ys = [p.lat for p in line.positions]
            color = "black" if entity.kind is EntityKind.RUNWAY else _mpl_color(line.color)
            plan.plot(xs, ys, color=color, linewidth=line.width / 2)
            if entity.kind is EntityKind.PROCEDURE_ROUTE:
                profile.plot(range(len(line.positions)), [p.height for p in line.positions],
                             color=_mpl_color(line.color), linewidth=1.2)
        elif entity.cylinder is not None and entity.position is not None:
            plan.scatter(entity.position.lon, entity.position.lat, s=12, marker="^",
                         color=_mpl_color(entity.cylinder.outline_color))
        elif entity.point is not None and entity.position is not None:
            plan.scatter(entity.position.lon, entity.position.lat, s=10,
                         color=_mpl_color(entity.point.color), edgecolors="black", linewidths=0.3)
            plan.annotate(entity.name, (entity.position.lon, entity.position.lat), fontsize=5)

    plan.set_xlabel("Longitude (deg)")
    plan.set_ylabel("Latitude (deg)")
    plan.set_title(title)
    plan.set_aspect("equal", adjustable="datalim")
    plan.grid(True, alpha=0.3)

    profile.set_xlabel("Route point")
    profile.set_ylabel("Display altitude (m)")
    profile.set_title("Procedure routes")
    profile.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(path, dpi=150)
    print(f"Plot saved: {path}")


def main():
    data_file = Path(sys.argv[1]) if len(sys.argv) > 1 else DATA_FILE
    print(f"Reading aviation data: {data_file}\n")
    dataset = asyncio.run(load_dataset(data_file))

    filters = all_layers_on(FilterState.for_dataset(dataset))
    entities = project(dataset, filters)

    counts: dict[str, int] = {}
    for entity in entities:
        counts[entity.kind.value] = counts.get(entity.kind.value, 0) + 1
    for kind, count in counts.items():
        print(f"{kind + ':':<17}{count:,}")
    print()

    title = f"{dataset.airport.name_kr or 'Airport'} ({dataset.airport.icao or 'RKPU'})"
    plot_entities(entities, OUTPUT_PLOT, title=title)


if __name__ == "__main__":
    main()
