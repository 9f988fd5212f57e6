"""Viewer session: owns the filter state and re-projects on every change."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from pydantic import BaseModel

from . import styles
from .camera import home_view, initial_view
from .config import Settings
from .loader import DatasetState
from .models import (
    AviationDataset,
    CameraView,
    FilterState,
    Layer,
    ObstacleType,
    PanelSection,
    ProcedureCategory,
)
from .projection import project
from .renderer import Scene

logger = logging.getLogger(__name__)

DEFAULT_AIRPORT_NAME = "울산공항"
DEFAULT_AIRPORT_ICAO = "RKPU"
DEFAULT_AIRPORT_ELEVATION = 14.0

LAYER_COLORS: dict[Layer, str] = {
    Layer.WAYPOINTS: styles.WAYPOINT.to_css(),
    Layer.OBSTACLES: styles.obstacle_color(ObstacleType.BUILDING).to_css(),
    Layer.AIRSPACE: styles.AIRSPACE_OUTLINE.to_css(),
    Layer.SID: styles.PROCEDURE_COLORS[ProcedureCategory.SID].to_css(),
    Layer.STAR: styles.PROCEDURE_COLORS[ProcedureCategory.STAR].to_css(),
    Layer.APPROACH: styles.PROCEDURE_COLORS[ProcedureCategory.APPROACH].to_css(),
}


class AirportInfo(BaseModel):
    name: str
    icao: str
    elevation: float


class Stats(BaseModel):
    """Counts shown in the panel's stats bar."""

    waypoints: int
    obstacles: int
    procedures: int
    airport: AirportInfo


class Toggle(BaseModel):
    key: str
    enabled: bool
    color: str | None = None


class LegendItem(BaseModel):
    label: str
    color: str


class Panel(BaseModel):
    """Everything the side panel displays."""

    search: str
    layers: list[Toggle]
    obstacle_types: list[Toggle]
    sources: list[Toggle]
    expanded: dict[PanelSection, bool]
    stats: Stats
    legend: list[LegendItem]


LEGEND = [
    LegendItem(label="Waypoint", color=styles.WAYPOINT.to_css()),
    LegendItem(label="Building", color=styles.obstacle_color(ObstacleType.BUILDING).to_css()),
    LegendItem(label="Tower", color=styles.obstacle_color(ObstacleType.TOWER).to_css()),
    LegendItem(label="Natural", color=styles.obstacle_color(ObstacleType.NATURAL).to_css()),
    LegendItem(label="SID", color=styles.PROCEDURE_COLORS[ProcedureCategory.SID].to_css()),
    LegendItem(label="STAR", color=styles.PROCEDURE_COLORS[ProcedureCategory.STAR].to_css()),
    LegendItem(label="Approach", color=styles.PROCEDURE_COLORS[ProcedureCategory.APPROACH].to_css()),
]


class NoDataError(Exception):
    """Raised when an operation needs the dataset before it has loaded."""


class ViewerSession:
    """The map view of one process: dataset, filter state and scene.

    Filter transitions are serialized: reading the current filters, projecting
    and rendering happen under one lock, so the scene always matches
    ``filters``.
    """

    def __init__(self, settings: Settings, state: DatasetState | None = None) -> None:
        self.settings = settings
        self.state = state or DatasetState()
        self.filters = FilterState()
        self.scene = Scene()
        self._lock = threading.Lock()

    @property
    def dataset(self) -> AviationDataset:
        if not self.state.loaded or self.state.dataset is None:
            raise NoDataError(self.state.error or "Aviation data is not loaded")
        return self.state.dataset

    async def start(self) -> None:
        """Load the dataset once, then show the initial view."""
        await self.state.load(self.settings.data_source)
        self.scene.fly_to(initial_view(self.settings))
        if self.state.loaded:
            self.reset_filters()

    def attach(self, dataset: AviationDataset) -> None:
        """Use an already-loaded dataset instead of fetching one."""
        self.state.set_dataset(dataset)
        self.reset_filters()

    def _apply(self, transition: Callable[[FilterState], FilterState]) -> FilterState:
        with self._lock:
            dataset = self.dataset
            filters = transition(self.filters)
            count = self.scene.render(project(dataset, filters))
            self.filters = filters
        logger.info("Re-projected scene: %d entities", count)
        return filters

    def reset_filters(self) -> FilterState:
        return self._apply(lambda _: FilterState.for_dataset(self.dataset))

    def toggle_layer(self, layer: Layer) -> FilterState:
        return self._apply(lambda f: f.toggle_layer(layer))

    def toggle_obstacle_type(self, obstacle_type: ObstacleType) -> FilterState:
        return self._apply(lambda f: f.toggle_obstacle_type(obstacle_type))

    def toggle_waypoint_source(self, source: str) -> FilterState:
        return self._apply(lambda f: f.toggle_source(source))

    def set_search(self, term: str) -> FilterState:
        return self._apply(lambda f: f.with_search(term))

    def toggle_section(self, section: PanelSection) -> FilterState:
        return self._apply(lambda f: f.toggle_section(section))

    def fly_home(self) -> CameraView:
        view = home_view(self.settings)
        self.scene.fly_to(view)
        return view

    def stats(self) -> Stats:
        dataset = self.dataset
        airport = dataset.airport
        return Stats(
            waypoints=len(dataset.waypoints),
            obstacles=len(dataset.obstacles),
            procedures=dataset.procedures.count(),
            airport=AirportInfo(
                name=airport.name_kr or DEFAULT_AIRPORT_NAME,
                icao=airport.icao or DEFAULT_AIRPORT_ICAO,
                elevation=airport.elevation or DEFAULT_AIRPORT_ELEVATION,
            ),
        )

    def panel(self) -> Panel:
        filters = self.filters
        return Panel(
            search=filters.search,
            layers=[
                Toggle(key=layer.value, enabled=filters.layer_enabled(layer), color=LAYER_COLORS[layer])
                for layer in Layer
            ],
            obstacle_types=[
                Toggle(
                    key=t.value,
                    enabled=filters.obstacle_type_enabled(t.value),
                    color=styles.obstacle_color(t).to_css(),
                )
                for t in ObstacleType
            ],
            sources=[Toggle(key=src, enabled=on) for src, on in filters.sources.items()],
            expanded=filters.expanded,
            stats=self.stats(),
            legend=LEGEND,
        )
