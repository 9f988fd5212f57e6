"""Tests for dataset parsing and filter-state transitions."""

import pytest
from pydantic import ValidationError

from aviation_map import FilterState, parse_dataset, project
from aviation_map.models import Color, EntityKind, Layer, ObstacleType, PanelSection, ProcedureCategory


class TestDatasetParsing:
    def test_waypoints_keyed_by_name(self, dataset):
        assert list(dataset.waypoints) == ["ALPHA", "BRAVO", "CHARLIE"]
        assert dataset.waypoints["ALPHA"].altitude is None

    def test_obstacle_ids_coerced_to_str(self, dataset):
        assert [o.id for o in dataset.obstacles] == ["42", "7", "X9"]

    def test_unknown_obstacle_type_kept(self, dataset):
        crane = dataset.obstacles[2]
        assert crane.type == "Crane"
        assert crane.obstacle_type is ObstacleType.ETC

    def test_null_obstacle_type(self):
        dataset = parse_dataset({"obstacles": [{"id": 1, "type": None, "lat": 0, "lon": 0}]})
        assert dataset.obstacles[0].type == "ETC"

    def test_null_obstacle_id_is_empty(self):
        dataset = parse_dataset({"obstacles": [{"id": None, "lat": 0, "lon": 0}]})
        assert dataset.obstacles[0].id == ""
        entities = project(dataset, FilterState().with_search("non"))
        assert [e for e in entities if e.kind is EntityKind.OBSTACLE] == []

    def test_airspace_boundary(self, dataset):
        assert len(dataset.airspace[0].boundary) == 4
        assert dataset.airspace[2].boundary == []

    def test_procedures_by_category(self, dataset):
        assert [p.name for p in dataset.procedures.for_category(ProcedureCategory.APPROACH)] == ["APP1", "APP2"]
        assert dataset.procedures.count() == 4

    def test_empty_document(self):
        dataset = parse_dataset({})
        assert dataset.waypoints == {}
        assert dataset.procedures.count() == 0
        assert dataset.airport.icao is None

    def test_null_collections(self):
        dataset = parse_dataset({"waypoints": None, "obstacles": None, "airspace": None, "procedures": None})
        assert dataset.obstacles == []
        assert dataset.airspace == []

    def test_waypoint_sources_first_seen_order(self, dataset):
        assert dataset.waypoint_sources() == ["NAV1", "NAV2"]

    def test_dataset_is_read_only(self, dataset):
        with pytest.raises(ValidationError):
            dataset.waypoints["ALPHA"].lat = 0.0

    def test_three_value_coordinates_accepted(self):
        dataset = parse_dataset({"procedures": {"SID": [{"name": "S", "coordinates": [[1, 2, 300], [3, 4, 400]]}]}})
        assert dataset.procedures.SID[0].coordinates[1] == [3, 4, 400]


class TestObstacleType:
    @pytest.mark.parametrize("raw", ["Building", "Tower", "Natural", "Tree", "Navaid", "ETC"])
    def test_known(self, raw):
        assert ObstacleType.parse(raw).value == raw

    @pytest.mark.parametrize("raw", ["Crane", "", "tower"])
    def test_fallback(self, raw):
        assert ObstacleType.parse(raw) is ObstacleType.ETC


class TestFilterState:
    def test_defaults(self):
        filters = FilterState()
        assert filters.layer_enabled(Layer.WAYPOINTS)
        assert filters.layer_enabled(Layer.APPROACH)
        assert not filters.layer_enabled(Layer.SID)
        assert not filters.layer_enabled(Layer.STAR)
        assert all(filters.obstacle_type_enabled(t.value) for t in ObstacleType)
        assert filters.search == ""
        assert filters.expanded == {s: True for s in PanelSection}

    def test_for_dataset_enables_sources(self, dataset):
        assert FilterState.for_dataset(dataset).sources == {"NAV1": True, "NAV2": True}

    def test_transitions_return_new_values(self):
        filters = FilterState()
        toggled = filters.toggle_layer(Layer.SID)
        assert toggled.layer_enabled(Layer.SID)
        assert not filters.layer_enabled(Layer.SID)

        searched = filters.with_search("abc")
        assert searched.search == "abc"
        assert filters.search == ""

    def test_toggle_twice_restores(self):
        filters = FilterState(sources={"NAV1": True})
        assert filters.toggle_source("NAV1").toggle_source("NAV1") == filters
        assert filters.toggle_obstacle_type(ObstacleType.TREE).toggle_obstacle_type(ObstacleType.TREE) == filters

    def test_toggle_unknown_source_enables_it(self):
        assert FilterState().toggle_source("NEW").sources == {"NEW": True}

    def test_toggle_section(self):
        collapsed = FilterState().toggle_section(PanelSection.OBSTACLES)
        assert collapsed.expanded[PanelSection.OBSTACLES] is False
        assert collapsed.expanded[PanelSection.WAYPOINTS] is True

    def test_frozen(self):
        with pytest.raises(ValidationError):
            FilterState().search = "x"

    def test_unknown_obstacle_type_defaults_on(self):
        assert FilterState(obstacle_types={}).obstacle_type_enabled("Crane")

    def test_round_trip_through_json(self):
        filters = FilterState(sources={"A": False}).toggle_layer(Layer.STAR).with_search("x")
        assert FilterState.model_validate_json(filters.model_dump_json()) == filters


class TestColor:
    def test_from_css(self):
        assert Color.from_css("#2979FF").rgba() == [0x29, 0x79, 0xFF, 255]

    def test_with_alpha(self):
        assert Color.from_css("#E91E63").with_alpha(0.2).alpha == 51

    def test_to_css(self):
        assert Color.from_css("#00c853").to_css() == "#00C853"

    def test_bad_string(self):
        with pytest.raises(ValueError):
            Color.from_css("#FFF")
