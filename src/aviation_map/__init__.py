"""3D aviation map: dataset loading, entity projection and scene rendering."""

from .loader import DatasetLoadError, DatasetState, load_dataset, parse_dataset
from .models import AviationDataset, FilterState, RenderableEntity
from .projection import project
from .renderer import Scene

__all__ = [
    "AviationDataset",
    "DatasetLoadError",
    "DatasetState",
    "FilterState",
    "RenderableEntity",
    "Scene",
    "load_dataset",
    "parse_dataset",
    "project",
]
