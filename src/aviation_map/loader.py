"""Single-shot loading of the aviation data document.

The document is fetched once, either over HTTP or from a local file. There is
no retry and no partial load: the outcome is a validated dataset or an error.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import httpx
from pydantic import ValidationError

from .models import AviationDataset, DatasetStatus

logger = logging.getLogger(__name__)


class DatasetLoadError(Exception):
    """The aviation data document could not be fetched or parsed."""


def parse_dataset(payload: dict) -> AviationDataset:
    """Validate an already-decoded JSON document."""
    try:
        return AviationDataset.model_validate(payload)
    except ValidationError as exc:
        raise DatasetLoadError(f"Invalid aviation data document: {exc}") from exc


async def load_dataset(source: str | Path, client: httpx.AsyncClient | None = None) -> AviationDataset:
    """Fetch and validate the document at ``source`` (http(s) URL or file path).

    ``client`` is used for URLs when given; otherwise a short-lived client is opened.
    """
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        if client is None:
            async with httpx.AsyncClient() as client:
                payload = await _fetch_url(client, source)
        else:
            payload = await _fetch_url(client, source)
    else:
        payload = await asyncio.to_thread(_read_file, Path(source))
    return parse_dataset(payload)


async def _fetch_url(client: httpx.AsyncClient, url: str) -> dict:
    try:
        resp = await client.get(url)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as exc:
        raise DatasetLoadError(f"Failed to fetch {url}: {exc}") from exc
    except ValueError as exc:
        raise DatasetLoadError(f"{url} did not return valid JSON: {exc}") from exc


def _read_file(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return json.load(f)
    except OSError as exc:
        raise DatasetLoadError(f"Failed to read {path}: {exc}") from exc
    except ValueError as exc:
        raise DatasetLoadError(f"{path} is not valid JSON: {exc}") from exc


class DatasetState:
    """Loading/loaded/error holder for the one dataset of the process."""

    def __init__(self) -> None:
        self.status = DatasetStatus.LOADING
        self.dataset: AviationDataset | None = None
        self.error: str | None = None

    @property
    def loaded(self) -> bool:
        return self.status is DatasetStatus.LOADED

    def set_dataset(self, dataset: AviationDataset) -> None:
        self.dataset = dataset
        self.error = None
        self.status = DatasetStatus.LOADED

    async def load(self, source: str | Path) -> None:
        """Perform the single fetch and record its outcome. Never raises."""
        try:
            dataset = await load_dataset(source)
        except DatasetLoadError as exc:
            logger.error("Failed to load aviation data: %s", exc)
            self.dataset = None
            self.error = str(exc)
            self.status = DatasetStatus.ERROR
            return
        logger.info(
            "Loaded aviation data from %s: %d waypoints, %d obstacles, %d airspace zones, %d procedures",
            source,
            len(dataset.waypoints),
            len(dataset.obstacles),
            len(dataset.airspace),
            dataset.procedures.count(),
        )
        self.set_dataset(dataset)
