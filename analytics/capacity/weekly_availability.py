"""Weekly availability metric."""

import logging
from typing import Literal

import pandas as pd

from analytics.base import AnalyticsMetric, AnalyticsResult, int_filter
from analytics.registry import AnalyticsRegistry
from analytics.visualizations import Heatmap, LineChart

logger = logging.getLogger(__name__)


@AnalyticsRegistry.register
class WeeklyAvailabilityMetric(AnalyticsMetric):
    """Member x week availability of an iteration."""

    @property
    def metric_id(self) -> str:
        return "weekly_availability"

    @property
    def title(self) -> str:
        return "Weekly Availability"

    @property
    def description(self) -> str:
        return "Effective availability percent of each member for each week"

    @property
    def category(self) -> Literal["iteration", "project"]:
        return "iteration"

    def compute(self, **kwargs) -> AnalyticsResult:
        """Compute the availability matrix for one iteration.

        Kwargs:
            iteration_id: Iteration to report on (required).
        """
        from data.services import AvailabilityService

        try:
            iteration_id = int_filter(kwargs, "iteration_id")
            grid = AvailabilityService().iteration_grid(iteration_id)
            frame = self._build_frame(grid)

            labels = {
                week["week_index"]: f"W{week['week_index']} ({week['week_start']})"
                for week in grid["weeks"]
            }

            names = dict(zip(frame["member_id"], frame["member"]))
            matrix = (
                frame.pivot(
                    index="member_id", columns="week_index", values="availability_percent"
                )
                .rename(index=names, columns=labels)
            )

            weekly = (
                frame.groupby("week_index")["availability_percent"].mean().round(1)
            )
            weekly_data = {
                "x": [labels[i] for i in weekly.index],
                "y": weekly.tolist(),
            }

            chart_json = None
            charts = {}
            if not frame.empty:
                chart_json = Heatmap().render_json(
                    matrix,
                    title="Availability % by Week",
                    x_label="Week",
                    y_label="Member",
                    zmin=0,
                    zmax=100,
                )
                charts["weekly_average"] = LineChart().render_json(
                    weekly_data,
                    title="Average Availability by Week",
                    x_label="Week",
                    y_label="Availability %",
                )

            lowest_week = None
            if not weekly.empty:
                lowest_week = labels[weekly.idxmin()]

            return AnalyticsResult(
                metric_id=self.metric_id,
                title=self.title,
                data={
                    "cells": frame.to_dict(orient="records"),
                    "weekly_average": weekly_data,
                },
                chart_json=chart_json,
                charts=charts,
                table_html=matrix.to_html(),
                summary={
                    "iteration_id": iteration_id,
                    "members": int(frame["member_id"].nunique()),
                    "weeks": len(grid["weeks"]),
                    "average_availability": (
                        round(float(frame["availability_percent"].mean()), 1)
                        if not frame.empty
                        else None
                    ),
                    "lowest_week": lowest_week,
                    "overrides": int(frame["is_override"].sum()),
                    "unrecorded_cells": int(len(frame) - frame["recorded"].sum()),
                },
            )

        except Exception as e:
            logger.warning(f"Failed to compute {self.metric_id}: {e}")
            return AnalyticsResult(
                metric_id=self.metric_id,
                title=self.title,
                error=str(e),
            )

    def _build_frame(self, grid: dict) -> pd.DataFrame:
        week_index = {week["id"]: week["week_index"] for week in grid["weeks"]}
        rows = []
        for member in grid["members"]:
            for cell in member["weeks"]:
                rows.append(
                    {
                        "member_id": member["team_member_id"],
                        "member": member["display_name"],
                        "week_index": week_index[cell["iteration_week_id"]],
                        "availability_percent": cell["availability_percent"],
                        "is_override": cell["is_override"],
                        "recorded": cell["recorded"],
                    }
                )
        return pd.DataFrame(
            rows,
            columns=[
                "member_id",
                "member",
                "week_index",
                "availability_percent",
                "is_override",
                "recorded",
            ],
        ).astype({"availability_percent": float, "is_override": bool, "recorded": bool})

    def get_filter_options(self) -> dict:
        return {
            "iteration_id": {"type": "select", "label": "Iteration"},
        }
