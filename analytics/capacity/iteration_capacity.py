"""Iteration capacity metric."""

import logging
from typing import Literal

import pandas as pd

from analytics.base import AnalyticsMetric, AnalyticsResult, int_filter
from analytics.registry import AnalyticsRegistry
from analytics.visualizations import BarChart, PieChart

logger = logging.getLogger(__name__)

COLUMNS = [
    "member_id",
    "member",
    "team",
    "work_mode",
    "leaves",
    "availability_percent",
    "effective_capacity_days",
]


@AnalyticsRegistry.register
class IterationCapacityMetric(AnalyticsMetric):
    """Effective capacity of each member of an iteration."""

    @property
    def metric_id(self) -> str:
        return "iteration_capacity"

    @property
    def title(self) -> str:
        return "Iteration Capacity"

    @property
    def description(self) -> str:
        return "Effective capacity per member and team, with work-mode mix"

    @property
    def category(self) -> Literal["iteration", "project"]:
        return "iteration"

    def compute(self, **kwargs) -> AnalyticsResult:
        """Compute capacity breakdown for one iteration.

        Kwargs:
            iteration_id: Iteration to report on (required).
        """
        from data.services import CapacityService

        try:
            iteration_id = int_filter(kwargs, "iteration_id")
            service = CapacityService()
            frame = self._build_frame(service.list_members(iteration_id))
            rollup = service.iteration_summary(iteration_id)

            over_allocated = frame.loc[
                frame["effective_capacity_days"] < 0, "member"
            ].tolist()

            mix = frame.groupby("work_mode").size()
            mix_data = {"labels": mix.index.tolist(), "values": mix.tolist()}

            by_team = (
                frame.groupby("team", sort=False)["effective_capacity_days"]
                .agg(["sum", "count"])
                .reset_index()
            )
            team_data = {
                "labels": by_team["team"].tolist(),
                "capacity": by_team["sum"].round(2).tolist(),
                "members": by_team["count"].tolist(),
            }

            chart_json = None
            charts = {}
            if not frame.empty:
                chart_json = BarChart().render_json(
                    frame,
                    x_col="member",
                    y_col="effective_capacity_days",
                    color_col="team",
                    title="Effective Capacity per Member",
                    x_label="Member",
                    y_label="Person-days",
                )
                charts["work_mode_mix"] = PieChart().render_json(
                    mix_data, title="Work Mode Mix", hole=0.4
                )

            return AnalyticsResult(
                metric_id=self.metric_id,
                title=self.title,
                data={
                    "members": frame.to_dict(orient="records"),
                    "by_team": team_data,
                    "work_mode_mix": mix_data,
                },
                chart_json=chart_json,
                charts=charts,
                table_html=frame.to_html(index=False),
                summary={**rollup.to_dict(), "over_allocated": over_allocated},
            )

        except Exception as e:
            logger.warning(f"Failed to compute {self.metric_id}: {e}")
            return AnalyticsResult(
                metric_id=self.metric_id,
                title=self.title,
                error=str(e),
            )

    def _build_frame(self, entries: list) -> pd.DataFrame:
        rows = [
            {
                "member_id": entry.team_member_id,
                "member": entry.team_member.display_name,
                "team": entry.team_member.team.name,
                "work_mode": entry.work_mode,
                "leaves": float(entry.leaves),
                "availability_percent": float(entry.availability_percent),
                "effective_capacity_days": float(entry.effective_capacity_days),
            }
            for entry in entries
        ]
        return pd.DataFrame(rows, columns=COLUMNS).astype(
            {"leaves": float, "availability_percent": float, "effective_capacity_days": float}
        )

    def get_filter_options(self) -> dict:
        return {
            "iteration_id": {"type": "select", "label": "Iteration"},
        }
