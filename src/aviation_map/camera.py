"""Camera flights to the home view."""

from .config import Settings
from .models import CameraView, Position


def initial_view(settings: Settings) -> CameraView:
    """View requested once the map is first shown."""
    return CameraView(
        destination=Position(lon=settings.home_lon, lat=settings.home_lat, height=settings.initial_height),
        duration=2.0,
    )


def home_view(settings: Settings) -> CameraView:
    """View requested by the fly-to-home action; closer than the initial view."""
    return CameraView(
        destination=Position(lon=settings.home_lon, lat=settings.home_lat, height=settings.home_height),
        duration=1.5,
    )
