"""Entity projection: dataset + filter state -> renderable map entities."""

from __future__ import annotations

from . import styles
from .models import (
    AirspaceZone,
    AviationDataset,
    CylinderGraphic,
    EntityKind,
    FilterState,
    LabelGraphic,
    Layer,
    Leg,
    Obstacle,
    PointGraphic,
    PolygonGraphic,
    PolylineGraphic,
    Position,
    Procedure,
    ProcedureCategory,
    RenderableEntity,
    Waypoint,
)

DEFAULT_WAYPOINT_ALTITUDE = 100.0
DEFAULT_AIRSPACE_BASE = 0.0
DEFAULT_AIRSPACE_TOP = 3000.0
DEFAULT_LEG_ALTITUDE = 1000.0
ROUTE_BASE_ALTITUDE = 500.0
ROUTE_CLIMB_PER_POINT = 50.0

RUNWAY_NAME = "Runway 18/36"
RUNWAY_START = (129.3505, 35.5890)
RUNWAY_END = (129.3530, 35.5978)


def project(dataset: AviationDataset, filters: FilterState) -> list[RenderableEntity]:
    """Build the full list of visible entities for ``dataset`` under ``filters``.

    Pure: identical inputs give identical output. The runway is always first.
    """
    entities = [runway_entity()]
    if filters.layer_enabled(Layer.WAYPOINTS):
        entities.extend(
            _waypoint_entity(name, wp)
            for name, wp in dataset.waypoints.items()
            if _waypoint_visible(name, wp, filters)
        )
    if filters.layer_enabled(Layer.OBSTACLES):
        entities.extend(
            _obstacle_entity(obs)
            for obs in dataset.obstacles
            if filters.obstacle_type_enabled(obs.type) and filters.matches_search(obs.id)
        )
    if filters.layer_enabled(Layer.AIRSPACE):
        entities.extend(
            _airspace_entity(idx, zone)
            for idx, zone in enumerate(dataset.airspace)
            if zone.boundary
        )
    for category in ProcedureCategory:
        if not filters.layer_enabled(Layer(category.value)):
            continue
        for proc in dataset.procedures.for_category(category):
            entities.extend(_procedure_entities(category, proc))
    return entities


def _fallback(value: float | None, default: float) -> float:
    # zero counts as absent, same as a missing value
    return value if value else default


def _waypoint_visible(name: str, wp: Waypoint, filters: FilterState) -> bool:
    return filters.matches_search(name) and any(filters.source_enabled(src) for src in wp.sources)


def runway_entity() -> RenderableEntity:
    positions = [Position(lon=lon, lat=lat) for lon, lat in (RUNWAY_START, RUNWAY_END)]
    return RenderableEntity(
        id="runway:18/36",
        kind=EntityKind.RUNWAY,
        name=RUNWAY_NAME,
        polyline=PolylineGraphic(
            positions=positions,
            width=15,
            color=styles.RUNWAY,
            clamp_to_ground=True,
        ),
        description=f"<h3>{RUNWAY_NAME}</h3>\n<p>Ulsan Airport runway</p>",
    )


def _waypoint_entity(name: str, wp: Waypoint) -> RenderableEntity:
    altitude = _fallback(wp.altitude, DEFAULT_WAYPOINT_ALTITUDE)
    return RenderableEntity(
        id=f"waypoint:{name}",
        kind=EntityKind.WAYPOINT,
        name=name,
        position=Position(lon=wp.lon, lat=wp.lat, height=altitude),
        point=PointGraphic(
            pixel_size=8,
            color=styles.WAYPOINT,
            outline_color=styles.BLACK,
            outline_width=1,
        ),
        label=LabelGraphic(
            text=name,
            font="12px sans-serif",
            fill_color=styles.WHITE,
            outline_color=styles.BLACK,
            outline_width=2,
            pixel_offset=(0, -12),
            max_distance=50_000,
        ),
        description=(
            f"<h3>{name}</h3>\n"
            f"<p><strong>Position:</strong> {wp.lat:.6f}, {wp.lon:.6f}</p>\n"
            f"<p><strong>Altitude:</strong> {altitude:g}m</p>\n"
            f"<p><strong>Sources:</strong> {', '.join(wp.sources)}</p>"
        ),
    )


def _obstacle_entity(obs: Obstacle) -> RenderableEntity:
    elevation = obs.elevation or 0.0
    color = styles.obstacle_color(obs.obstacle_type)
    name = f"Obstacle #{obs.id}"
    return RenderableEntity(
        id=f"obstacle:{obs.id}",
        kind=EntityKind.OBSTACLE,
        name=name,
        # cylinders are centred on their position, so the column spans 0..elevation
        position=Position(lon=obs.lon, lat=obs.lat, height=elevation / 2),
        cylinder=CylinderGraphic(
            length=elevation,
            top_radius=20,
            bottom_radius=30,
            material=color.with_alpha(0.8),
            outline_color=color,
        ),
        label=LabelGraphic(
            text=f"#{obs.id}",
            font="10px sans-serif",
            fill_color=styles.WHITE,
            outline_color=styles.BLACK,
            outline_width=1,
            pixel_offset=(0, -10),
            max_distance=20_000,
        ),
        description=(
            f"<h3>{name}</h3>\n"
            f"<p><strong>Type:</strong> {obs.type}</p>\n"
            f"<p><strong>Position:</strong> {obs.lat:.6f}, {obs.lon:.6f}</p>\n"
            f"<p><strong>Elevation:</strong> {elevation:g}m</p>"
        ),
    )


def _airspace_entity(index: int, zone: AirspaceZone) -> RenderableEntity:
    name = zone.name or "Airspace"
    base = _fallback(zone.base_alt, DEFAULT_AIRSPACE_BASE)
    top = _fallback(zone.top_alt, DEFAULT_AIRSPACE_TOP)
    return RenderableEntity(
        id=f"airspace:{index}",
        kind=EntityKind.AIRSPACE,
        name=name,
        polygon=PolygonGraphic(
            positions=[Position(lon=c[0], lat=c[1], height=top) for c in zone.boundary],
            height=base,
            extruded_height=top,
            material=styles.AIRSPACE_FILL,
            outline_color=styles.AIRSPACE_OUTLINE,
        ),
        description=(
            f"<h3>{name}</h3>\n"
            f"<p><strong>Base:</strong> {base:g}m</p>\n"
            f"<p><strong>Top:</strong> {top:g}m</p>"
        ),
    )


def _procedure_entities(category: ProcedureCategory, proc: Procedure) -> list[RenderableEntity]:
    color = styles.PROCEDURE_COLORS[category]
    entities: list[RenderableEntity] = []

    if proc.coordinates and len(proc.coordinates) >= 2:
        # synthetic climb for display only
        positions = [
            Position(lon=c[0], lat=c[1], height=ROUTE_BASE_ALTITUDE + i * ROUTE_CLIMB_PER_POINT)
            for i, c in enumerate(proc.coordinates)
        ]
        entities.append(
            RenderableEntity(
                id=f"{category.value}:{proc.name}",
                kind=EntityKind.PROCEDURE_ROUTE,
                name=proc.name,
                polyline=PolylineGraphic(positions=positions, width=4, color=color, glow_power=0.3),
                description=(
                    f"<h3>{proc.name}</h3>\n"
                    f"<p><strong>Type:</strong> {category.value}</p>\n"
                    f"<p><strong>Table:</strong> {proc.table}</p>"
                ),
            )
        )

    for idx, leg in enumerate(proc.legs or []):
        if len(leg.coordinates) < 2:
            continue
        entities.append(_leg_entity(category, proc, idx, leg))

    return entities


def _leg_entity(category: ProcedureCategory, proc: Procedure, idx: int, leg: Leg) -> RenderableEntity:
    altitude = leg.start_alt or leg.end_alt or DEFAULT_LEG_ALTITUDE
    seq = leg.seq or idx + 1
    name = f"{proc.name} - Leg {seq}"
    return RenderableEntity(
        id=f"{category.value}:{proc.name}:leg:{seq}",
        kind=EntityKind.PROCEDURE_LEG,
        name=name,
        polyline=PolylineGraphic(
            positions=[Position(lon=c[0], lat=c[1], height=altitude) for c in leg.coordinates],
            width=3,
            color=styles.PROCEDURE_COLORS[category],
        ),
        description=(
            f"<h3>{name}</h3>\n"
            f"<p><strong>Start altitude:</strong> {_alt_text(leg.start_alt)}</p>\n"
            f"<p><strong>End altitude:</strong> {_alt_text(leg.end_alt)}</p>"
        ),
    )


def _alt_text(value: float | None) -> str:
    return f"{value:g}m" if value else "N/A"
