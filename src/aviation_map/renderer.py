"""Scene of materialized entities and its CZML serialization for Cesium clients."""

from __future__ import annotations

import logging
from functools import lru_cache

from pyproj import Transformer

from .models import CameraView, Color, LabelGraphic, Position, RenderableEntity

logger = logging.getLogger(__name__)


class Scene:
    """The entities currently shown on the globe.

    Every ``render`` call releases the previous entities before materializing
    the new ones, so repeated renders never accumulate entities. Repeated ids
    get a ``#n`` suffix when materialized, so each id names exactly one entity.
    """

    def __init__(self) -> None:
        self._entities: list[RenderableEntity] = []
        self.camera: CameraView | None = None
        self.generation = 0

    def __len__(self) -> int:
        return len(self._entities)

    @property
    def entities(self) -> list[RenderableEntity]:
        return list(self._entities)

    def clear(self) -> None:
        self._entities = []

    def render(self, entities: list[RenderableEntity]) -> int:
        """Replace the scene contents with ``entities``; returns the entity count."""
        self.clear()
        self._entities = _unique_ids(entities)
        self.generation += 1
        logger.debug("Rendered generation %d with %d entities", self.generation, len(self._entities))
        return len(self._entities)

    def describe(self, entity_id: str) -> RenderableEntity:
        """Look up the entity behind an info popup."""
        for entity in self._entities:
            if entity.id == entity_id:
                return entity
        raise KeyError(entity_id)

    def fly_to(self, view: CameraView) -> None:
        # last request wins
        self.camera = view

    def to_czml(self, name: str = "Aviation Map") -> list[dict]:
        """Serialize the scene as a CZML document."""
        packets: list[dict] = [{"id": "document", "name": name, "version": "1.0"}]
        packets.extend(entity_to_czml(entity) for entity in self._entities)
        return packets


def _unique_ids(entities: list[RenderableEntity]) -> list[RenderableEntity]:
    seen: dict[str, int] = {}
    out: list[RenderableEntity] = []
    for entity in entities:
        count = seen.get(entity.id, 0)
        seen[entity.id] = count + 1
        if count:
            entity = entity.model_copy(update={"id": f"{entity.id}#{count}"})
        out.append(entity)
    return out


@lru_cache
def _ecef_transformer() -> Transformer:
    # geographic 3D (lon, lat, ellipsoidal height) -> earth-centred cartesian
    return Transformer.from_crs("EPSG:4979", "EPSG:4978", always_xy=True)


def to_cartesian(positions: list[Position]) -> list[float]:
    """Flatten positions into CZML ``cartesian`` values (x, y, z in metres)."""
    if not positions:
        return []
    xs, ys, zs = _ecef_transformer().transform(
        [p.lon for p in positions],
        [p.lat for p in positions],
        [p.height for p in positions],
    )
    out: list[float] = []
    for x, y, z in zip(xs, ys, zs):
        out.extend((float(x), float(y), float(z)))
    return out


def _cartographic_degrees(positions: list[Position]) -> list[float]:
    out: list[float] = []
    for p in positions:
        out.extend((p.lon, p.lat, p.height))
    return out


def _rgba(color: Color) -> dict:
    return {"rgba": color.rgba()}


def _solid(color: Color) -> dict:
    return {"solidColor": {"color": _rgba(color)}}


def _label(label: LabelGraphic) -> dict:
    packet = {
        "text": label.text,
        "font": label.font,
        "fillColor": _rgba(label.fill_color),
        "outlineColor": _rgba(label.outline_color),
        "outlineWidth": label.outline_width,
        "style": "FILL_AND_OUTLINE",
        "verticalOrigin": "BOTTOM",
        "pixelOffset": {"cartesian2": list(label.pixel_offset)},
    }
    if label.max_distance is not None:
        packet["distanceDisplayCondition"] = {"distanceDisplayCondition": [0, label.max_distance]}
    return packet


def entity_to_czml(entity: RenderableEntity) -> dict:
    """Build the CZML packet for one entity."""
    packet: dict = {
        "id": entity.id,
        "name": entity.name,
        "description": entity.description,
    }
    if entity.position is not None:
        packet["position"] = {"cartesian": to_cartesian([entity.position])}
    if entity.point is not None:
        packet["point"] = {
            "pixelSize": entity.point.pixel_size,
            "color": _rgba(entity.point.color),
            "outlineColor": _rgba(entity.point.outline_color),
            "outlineWidth": entity.point.outline_width,
        }
    if entity.label is not None:
        packet["label"] = _label(entity.label)
    if entity.cylinder is not None:
        cyl = entity.cylinder
        packet["cylinder"] = {
            "length": cyl.length,
            "topRadius": cyl.top_radius,
            "bottomRadius": cyl.bottom_radius,
            "material": _solid(cyl.material),
            "outline": cyl.outline,
            "outlineColor": _rgba(cyl.outline_color),
        }
    if entity.polygon is not None:
        poly = entity.polygon
        packet["polygon"] = {
            "positions": {"cartographicDegrees": _cartographic_degrees(poly.positions)},
            "height": poly.height,
            "extrudedHeight": poly.extruded_height,
            "material": _solid(poly.material),
            "outline": poly.outline,
            "outlineColor": _rgba(poly.outline_color),
        }
    if entity.polyline is not None:
        line = entity.polyline
        if line.glow_power is not None:
            material = {"polylineGlow": {"color": _rgba(line.color), "glowPower": line.glow_power}}
        else:
            material = _solid(line.color)
        packet["polyline"] = {
            "positions": {"cartesian": to_cartesian(line.positions)},
            "width": line.width,
            "material": material,
            "clampToGround": line.clamp_to_ground,
        }
    return packet
