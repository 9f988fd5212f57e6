"""Colour tables and fixed styling for map entities."""

from .models import Color, ObstacleType, ProcedureCategory

WAYPOINT = Color.from_css("#FFEB3B")
AIRSPACE_OUTLINE = Color.from_css("#E91E63")
AIRSPACE_FILL = AIRSPACE_OUTLINE.with_alpha(0.2)
RUNWAY = Color.from_css("#FFFFFF")
WHITE = Color.from_css("#FFFFFF")
BLACK = Color.from_css("#000000")

PROCEDURE_COLORS: dict[ProcedureCategory, Color] = {
    ProcedureCategory.SID: Color.from_css("#00C853"),
    ProcedureCategory.STAR: Color.from_css("#FF6D00"),
    ProcedureCategory.APPROACH: Color.from_css("#2979FF"),
}


def obstacle_color(obstacle_type: ObstacleType) -> Color:
    """Colour for an obstacle type. ETC doubles as the fallback for unknown types."""
    match obstacle_type:
        case ObstacleType.BUILDING:
            return Color.from_css("#F44336")
        case ObstacleType.TOWER:
            return Color.from_css("#FF5722")
        case ObstacleType.NATURAL:
            return Color.from_css("#4CAF50")
        case ObstacleType.TREE:
            return Color.from_css("#8BC34A")
        case ObstacleType.NAVAID:
            return Color.from_css("#9C27B0")
        case _:
            return Color.from_css("#607D8B")
