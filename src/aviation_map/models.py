"""Pydantic data models for the aviation map."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ObstacleType(str, Enum):
    BUILDING = "Building"
    TOWER = "Tower"
    NATURAL = "Natural"
    TREE = "Tree"
    NAVAID = "Navaid"
    ETC = "ETC"

    @classmethod
    def parse(cls, value: str) -> ObstacleType:
        """Map a raw type string onto a known type, falling back to ETC."""
        try:
            return cls(value)
        except ValueError:
            return cls.ETC


class ProcedureCategory(str, Enum):
    SID = "SID"
    STAR = "STAR"
    APPROACH = "APPROACH"


class Layer(str, Enum):
    WAYPOINTS = "waypoints"
    OBSTACLES = "obstacles"
    AIRSPACE = "airspace"
    SID = "SID"
    STAR = "STAR"
    APPROACH = "APPROACH"


class PanelSection(str, Enum):
    WAYPOINTS = "waypoints"
    OBSTACLES = "obstacles"
    PROCEDURES = "procedures"


# --- Dataset ---------------------------------------------------------------

# (lon, lat) with an optional trailing altitude that is ignored
Coordinate = Annotated[list[float], Field(min_length=2)]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Airport(_Record):
    """Airport metadata shown in the info box."""

    name_kr: str | None = None
    icao: str | None = None
    elevation: float | None = None


class Waypoint(_Record):
    """A named navigational point. The name is the key of the waypoint mapping."""

    lat: float
    lon: float
    altitude: float | None = None
    sources: list[str] = Field(default_factory=list)


class Obstacle(_Record):
    """A point hazard with a vertical extent above ground."""

    id: str
    type: str = ObstacleType.ETC.value
    lat: float
    lon: float
    elevation: float | None = None

    @field_validator("id", "type", mode="before")
    @classmethod
    def _coerce_str(cls, v, info):
        if v is None:
            return ObstacleType.ETC.value if info.field_name == "type" else ""
        return v if isinstance(v, str) else str(v)

    @property
    def obstacle_type(self) -> ObstacleType:
        return ObstacleType.parse(self.type)


class AirspaceZone(_Record):
    """An extruded polygon between a base and a top altitude."""

    name: str | None = None
    base_alt: float | None = None
    top_alt: float | None = None
    coordinates: list[list[Coordinate]] = Field(default_factory=list)

    @property
    def boundary(self) -> list[Coordinate]:
        """The outer ring; inner rings are ignored."""
        if not self.coordinates:
            return []
        return self.coordinates[0]


class Leg(_Record):
    seq: int | str | None = None
    start_alt: float | None = None
    end_alt: float | None = None
    coordinates: list[Coordinate] = Field(default_factory=list)


class Procedure(_Record):
    """A named flight path made of an overall route and/or discrete legs."""

    name: str = ""
    table: str | None = None
    coordinates: list[Coordinate] | None = None
    legs: list[Leg] | None = None


class Procedures(_Record):
    SID: list[Procedure] = Field(default_factory=list)
    STAR: list[Procedure] = Field(default_factory=list)
    APPROACH: list[Procedure] = Field(default_factory=list)

    def for_category(self, category: ProcedureCategory) -> list[Procedure]:
        return getattr(self, category.value)

    def count(self) -> int:
        return len(self.SID) + len(self.STAR) + len(self.APPROACH)


class AviationDataset(_Record):
    """The complete aviation data document, read-only after load."""

    airport: Airport = Field(default_factory=Airport)
    waypoints: dict[str, Waypoint] = Field(default_factory=dict)
    obstacles: list[Obstacle] = Field(default_factory=list)
    airspace: list[AirspaceZone] = Field(default_factory=list)
    procedures: Procedures = Field(default_factory=Procedures)

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_empty(cls, v, info):
        if v is not None:
            return v
        return [] if info.field_name in ("obstacles", "airspace") else {}

    def waypoint_sources(self) -> list[str]:
        """All source tags seen on any waypoint, in first-seen order."""
        seen: dict[str, None] = {}
        for wp in self.waypoints.values():
            for src in wp.sources:
                seen.setdefault(src, None)
        return list(seen)


# --- Filter state ----------------------------------------------------------

DEFAULT_LAYERS: dict[Layer, bool] = {
    Layer.WAYPOINTS: True,
    Layer.OBSTACLES: True,
    Layer.AIRSPACE: True,
    Layer.SID: False,
    Layer.STAR: False,
    Layer.APPROACH: True,
}


class FilterState(BaseModel):
    """View-state consumed by the projection.

    Values are never mutated; every transition returns a new ``FilterState``.
    """

    model_config = ConfigDict(frozen=True)

    layers: dict[Layer, bool] = Field(default_factory=lambda: dict(DEFAULT_LAYERS))
    obstacle_types: dict[str, bool] = Field(
        default_factory=lambda: {t.value: True for t in ObstacleType}
    )
    sources: dict[str, bool] = Field(default_factory=dict)
    search: str = ""
    expanded: dict[PanelSection, bool] = Field(
        default_factory=lambda: {s: True for s in PanelSection}
    )

    @classmethod
    def for_dataset(cls, dataset: AviationDataset) -> FilterState:
        """Default state with every waypoint source of ``dataset`` enabled."""
        return cls(sources={src: True for src in dataset.waypoint_sources()})

    def layer_enabled(self, layer: Layer) -> bool:
        return self.layers.get(layer, False)

    def obstacle_type_enabled(self, raw_type: str) -> bool:
        return self.obstacle_types.get(raw_type, True)

    def source_enabled(self, source: str) -> bool:
        return self.sources.get(source, False)

    def matches_search(self, text: str) -> bool:
        return self.search.lower() in text.lower()

    def toggle_layer(self, layer: Layer) -> FilterState:
        layers = dict(self.layers)
        layers[layer] = not self.layer_enabled(layer)
        return self.model_copy(update={"layers": layers})

    def toggle_obstacle_type(self, obstacle_type: ObstacleType) -> FilterState:
        types = dict(self.obstacle_types)
        types[obstacle_type.value] = not self.obstacle_type_enabled(obstacle_type.value)
        return self.model_copy(update={"obstacle_types": types})

    def toggle_source(self, source: str) -> FilterState:
        sources = dict(self.sources)
        sources[source] = not self.source_enabled(source)
        return self.model_copy(update={"sources": sources})

    def with_search(self, term: str) -> FilterState:
        return self.model_copy(update={"search": term})

    def toggle_section(self, section: PanelSection) -> FilterState:
        expanded = dict(self.expanded)
        expanded[section] = not expanded.get(section, False)
        return self.model_copy(update={"expanded": expanded})


# --- Renderable entities ---------------------------------------------------


class EntityKind(str, Enum):
    RUNWAY = "runway"
    WAYPOINT = "waypoint"
    OBSTACLE = "obstacle"
    AIRSPACE = "airspace"
    PROCEDURE_ROUTE = "procedure_route"
    PROCEDURE_LEG = "procedure_leg"


class Color(BaseModel):
    """An RGBA colour with 0-255 channels."""

    model_config = ConfigDict(frozen=True)

    red: int
    green: int
    blue: int
    alpha: int = 255

    @classmethod
    def from_css(cls, value: str) -> Color:
        """Parse a ``#RRGGBB`` string."""
        hex_str = value.lstrip("#")
        if len(hex_str) != 6:
            raise ValueError(f"Unsupported colour string: {value!r}")
        return cls(
            red=int(hex_str[0:2], 16),
            green=int(hex_str[2:4], 16),
            blue=int(hex_str[4:6], 16),
        )

    def with_alpha(self, alpha: float) -> Color:
        return self.model_copy(update={"alpha": round(alpha * 255)})

    def to_css(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    def rgba(self) -> list[int]:
        return [self.red, self.green, self.blue, self.alpha]


class Position(BaseModel):
    """A geographic position in degrees with height in metres."""

    model_config = ConfigDict(frozen=True)

    lon: float
    lat: float
    height: float = 0.0


class PointGraphic(BaseModel):
    pixel_size: float
    color: Color
    outline_color: Color
    outline_width: float


class LabelGraphic(BaseModel):
    text: str
    font: str
    fill_color: Color
    outline_color: Color
    outline_width: float
    pixel_offset: tuple[float, float] = (0.0, 0.0)
    max_distance: float | None = None


class CylinderGraphic(BaseModel):
    length: float
    top_radius: float
    bottom_radius: float
    material: Color
    outline: bool = True
    outline_color: Color


class PolygonGraphic(BaseModel):
    positions: list[Position]
    height: float
    extruded_height: float
    material: Color
    outline: bool = True
    outline_color: Color


class PolylineGraphic(BaseModel):
    positions: list[Position]
    width: float
    color: Color
    glow_power: float | None = None
    clamp_to_ground: bool = False


class RenderableEntity(BaseModel):
    """A declarative map entity produced by the projection."""

    id: str
    kind: EntityKind
    name: str
    description: str = ""
    position: Position | None = None
    point: PointGraphic | None = None
    label: LabelGraphic | None = None
    cylinder: CylinderGraphic | None = None
    polygon: PolygonGraphic | None = None
    polyline: PolylineGraphic | None = None


class CameraView(BaseModel):
    """An animated camera flight target."""

    destination: Position
    heading: float = 0.0
    pitch: float = -45.0
    roll: float = 0.0
    duration: float


class DatasetStatus(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"
