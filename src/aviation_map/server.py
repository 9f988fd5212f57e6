"""FastAPI server exposing the aviation map view."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel

from .config import Settings, get_settings
from .models import (
    CameraView,
    DatasetStatus,
    EntityKind,
    FilterState,
    Layer,
    ObstacleType,
    PanelSection,
    RenderableEntity,
)
from .projection import project
from .session import Panel, Stats, ViewerSession


class StatusResponse(BaseModel):
    status: DatasetStatus
    error: str | None = None


class SearchUpdate(BaseModel):
    term: str = ""


class EntityInfo(BaseModel):
    """Info popup content for one entity."""

    id: str
    name: str
    description: str


def create_app(settings: Settings | None = None, session: ViewerSession | None = None) -> FastAPI:
    """Build the app around a viewer session.

    The dataset is loaded on startup unless ``session`` already has one.
    """
    settings = settings or get_settings()
    session = session or ViewerSession(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if session.state.status is DatasetStatus.LOADING:
            await session.start()
        yield

    app = FastAPI(title="Aviation Map", version="0.1.0", lifespan=lifespan)
    app.state.session = session
    app.include_router(router)
    return app


def get_session(request: Request) -> ViewerSession:
    return request.app.state.session


def require_data(session: ViewerSession = Depends(get_session)) -> ViewerSession:
    """Reject requests while the dataset is loading or failed to load."""
    if not session.state.loaded:
        detail = session.state.error or "Aviation data is not loaded"
        raise HTTPException(status_code=503, detail=detail)
    return session


router = APIRouter()


@router.get("/healthz")
def healthz():
    return {"status": "ok"}


@router.get("/api/status", response_model=StatusResponse)
def status(session: ViewerSession = Depends(get_session)):
    return StatusResponse(status=session.state.status, error=session.state.error)


@router.get("/api/stats", response_model=Stats)
def stats(session: ViewerSession = Depends(require_data)):
    return session.stats()


@router.get("/api/panel", response_model=Panel)
def panel(session: ViewerSession = Depends(require_data)):
    return session.panel()


@router.get("/api/filters", response_model=FilterState)
def filters(session: ViewerSession = Depends(require_data)):
    return session.filters


@router.post("/api/filters/layers/{layer}/toggle", response_model=FilterState)
async def toggle_layer(layer: Layer, session: ViewerSession = Depends(require_data)):
    return session.toggle_layer(layer)


@router.post("/api/filters/obstacle-types/{obstacle_type}/toggle", response_model=FilterState)
async def toggle_obstacle_type(obstacle_type: ObstacleType, session: ViewerSession = Depends(require_data)):
    return session.toggle_obstacle_type(obstacle_type)


@router.post("/api/filters/sources/{source}/toggle", response_model=FilterState)
async def toggle_source(source: str, session: ViewerSession = Depends(require_data)):
    return session.toggle_waypoint_source(source)


@router.put("/api/filters/search", response_model=FilterState)
async def set_search(update: SearchUpdate, session: ViewerSession = Depends(require_data)):
    return session.set_search(update.term)


@router.post("/api/filters/sections/{section}/toggle", response_model=FilterState)
async def toggle_section(section: PanelSection, session: ViewerSession = Depends(require_data)):
    return session.toggle_section(section)


@router.post("/api/filters/reset", response_model=FilterState)
async def reset_filters(session: ViewerSession = Depends(require_data)):
    return session.reset_filters()


@router.get("/api/entities", response_model=list[RenderableEntity])
def entities(kind: EntityKind | None = None, session: ViewerSession = Depends(require_data)):
    """Entities currently in the scene, optionally limited to one kind."""
    found = session.scene.entities
    if kind is not None:
        found = [e for e in found if e.kind is kind]
    return found


@router.get("/api/entities/{entity_id:path}", response_model=EntityInfo)
def entity_info(entity_id: str, session: ViewerSession = Depends(require_data)):
    try:
        entity = session.scene.describe(entity_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown entity: {entity_id}")
    return EntityInfo(id=entity.id, name=entity.name, description=entity.description)


@router.get("/api/scene.czml")
def scene_czml(session: ViewerSession = Depends(require_data)):
    return session.scene.to_czml(name=session.stats().airport.name)


@router.post("/api/project", response_model=list[RenderableEntity])
def project_filters(filters: FilterState, session: ViewerSession = Depends(require_data)):
    """Project the dataset under ``filters`` without touching the session."""
    return project(session.dataset, filters)


@router.get("/api/camera", response_model=CameraView | None)
def camera(session: ViewerSession = Depends(get_session)):
    return session.scene.camera


@router.post("/api/camera/home", response_model=CameraView)
async def fly_home(session: ViewerSession = Depends(get_session)):
    return session.fly_home()


app = create_app()
