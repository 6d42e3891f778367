"""Tests for the capacity analytics metrics."""

import json

import pytest

from analytics.registry import AnalyticsRegistry
from analytics.visualizations import BarChart, Heatmap


@pytest.fixture(autouse=True)
def discovered():
    AnalyticsRegistry.discover()


class TestRegistry:
    def test_categories(self):
        iteration_ids = {
            m.metric_id.fget(None) for m in AnalyticsRegistry.get_by_category("iteration")
        }
        assert iteration_ids == {"iteration_capacity", "weekly_availability"}
        assert [m["metric_id"] for m in AnalyticsRegistry.describe("project")] == [
            "project_capacity_trend"
        ]


class TestIterationCapacity:
    def test_breakdown(self, roster, services, one_week_iteration):
        services.capacity.upsert_member_capacity(
            one_week_iteration.id, roster.alice.id, leaves=7
        )
        services.capacity.upsert_member_capacity(one_week_iteration.id, roster.bob.id)

        metric = AnalyticsRegistry.get("iteration_capacity")()
        result = metric.compute(iteration_id=str(one_week_iteration.id))

        assert result.error is None
        assert result.summary["totalMembers"] == 2
        assert result.summary["totalEffectiveCapacity"] == pytest.approx(2.75)
        assert result.summary["over_allocated"] == ["Alice"]
        assert result.data["work_mode_mix"] == {
            "labels": ["hybrid", "office"],
            "values": [1, 1],
        }
        assert json.loads(result.chart_json)["data"]
        assert "work_mode_mix" in result.charts

    def test_missing_iteration_id(self, db):
        result = AnalyticsRegistry.get("iteration_capacity")().compute()

        assert result.error == "iteration_id is required"
        assert result.chart_json is None

    def test_unknown_iteration(self, db):
        result = AnalyticsRegistry.get("iteration_capacity")().compute(iteration_id=42)
        assert result.error == "Iteration 42 not found"


class TestWeeklyAvailability:
    def test_matrix(self, roster, services, two_week_iteration):
        first = two_week_iteration.weeks[0]
        services.availability.set_override(roster.alice.id, first.id, 40)

        result = AnalyticsRegistry.get("weekly_availability")().compute(
            iteration_id=two_week_iteration.id
        )

        assert result.error is None
        assert result.summary["members"] == 2
        assert result.summary["weeks"] == 2
        assert result.summary["overrides"] == 1
        assert result.summary["unrecorded_cells"] == 3
        assert result.summary["lowest_week"] == "W1 (2024-01-01)"
        assert result.data["weekly_average"]["y"] == [70.0, 100.0]
        heatmap = json.loads(result.chart_json)
        assert heatmap["data"][0]["type"] == "heatmap"


class TestProjectTrend:
    def test_trend(self, roster, services, one_week_iteration, two_week_iteration):
        services.capacity.upsert_member_capacity(one_week_iteration.id, roster.alice.id)
        services.capacity.upsert_member_capacity(two_week_iteration.id, roster.alice.id)

        result = AnalyticsRegistry.get("project_capacity_trend")().compute(
            project_id=roster.project.id
        )

        assert result.error is None
        assert [row["total_capacity"] for row in result.data] == [5.0, 10.0]
        assert result.summary["totalIterations"] == 2
        assert result.summary["totalCapacity"] == 15.0
        assert result.summary["peak_iteration"] == "Sprint 2"


class TestCharts:
    def test_bar_chart_from_dict(self):
        figure = json.loads(BarChart().render_json({"x": ["a"], "y": [1]}, title="T"))
        assert figure["data"][0]["type"] == "bar"

    def test_heatmap_from_dict(self):
        figure = json.loads(
            Heatmap().render_json({"z": [[1, 2]], "x": ["W1", "W2"], "y": ["Alice"]})
        )
        assert figure["data"][0]["z"] == [[1, 2]]

    def test_render_html_embeds_div(self):
        html = BarChart().render_html({"x": ["a"], "y": [1]}, div_id="capacity")
        assert 'id="capacity"' in html
