import json
from pathlib import Path

import pytest

from aviation_map import parse_dataset
from aviation_map.config import Settings
from aviation_map.session import ViewerSession

SAMPLEDATA = Path(__file__).parent.parent / "aviation_data.json"


@pytest.fixture
def document():
    """A small aviation data document covering every record type."""
    return {
        "airport": {"name_kr": "울산공항", "icao": "RKPU", "elevation": 14},
        "waypoints": {
            "ALPHA": {"lat": 35.0, "lon": 129.0, "sources": ["NAV1"]},
            "BRAVO": {"lat": 35.1, "lon": 129.1, "altitude": 250, "sources": ["NAV2"]},
            "CHARLIE": {"lat": 35.2, "lon": 129.2, "altitude": 500, "sources": ["NAV1", "NAV2"]},
        },
        "obstacles": [
            {"id": "42", "type": "Tower", "lat": 1, "lon": 1, "elevation": 80},
            {"id": 7, "type": "Building", "lat": 35.5, "lon": 129.3, "elevation": 30},
            {"id": "X9", "type": "Crane", "lat": 35.6, "lon": 129.4, "elevation": 50},
        ],
        "airspace": [
            {
                "name": "CTR",
                "base_alt": 100,
                "top_alt": 1500,
                "coordinates": [
                    [[129.0, 35.0], [129.1, 35.0], [129.1, 35.1], [129.0, 35.0]],
                    [[129.02, 35.02], [129.03, 35.02], [129.02, 35.03]],
                ],
            },
            {"coordinates": [[[129.2, 35.2], [129.3, 35.2], [129.3, 35.3]]]},
            {"name": "EMPTY", "coordinates": []},
        ],
        "procedures": {
            "SID": [
                {"name": "SID1", "table": "T_SID", "coordinates": [[129.0, 35.0], [129.1, 35.1], [129.2, 35.2]]},
            ],
            "STAR": [
                {
                    "name": "STAR1",
                    "table": "T_STAR",
                    "legs": [
                        {"seq": 1, "start_alt": 3000, "end_alt": 2000, "coordinates": [[129.0, 35.0], [129.1, 35.1]]},
                    ],
                },
            ],
            "APPROACH": [
                {
                    "name": "APP1",
                    "table": "T_APP",
                    "coordinates": [[129.3, 35.3], [129.35, 35.5]],
                    "legs": [
                        {"seq": 1, "start_alt": 2500, "coordinates": [[129.3, 35.3], [129.32, 35.4]]},
                        {"end_alt": 1200, "coordinates": [[129.32, 35.4], [129.35, 35.5]]},
                        {"coordinates": [[129.35, 35.5], [129.36, 35.55]]},
                        {"seq": 9, "coordinates": [[129.36, 35.55]]},
                    ],
                },
                {"name": "APP2", "table": "T_APP", "coordinates": [[129.3, 35.3]]},
            ],
        },
    }


@pytest.fixture
def dataset(document):
    return parse_dataset(document)


@pytest.fixture
def data_file(tmp_path, document):
    path = tmp_path / "aviation_data.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def settings(data_file):
    return Settings(data_source=str(data_file))


@pytest.fixture
def session(settings, dataset):
    session = ViewerSession(settings)
    session.attach(dataset)
    return session


@pytest.fixture
def sample_data_path():
    return SAMPLEDATA
