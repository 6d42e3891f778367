"""Project capacity trend metric."""

import logging
from typing import Literal

import pandas as pd

from analytics.base import AnalyticsMetric, AnalyticsResult, int_filter
from analytics.registry import AnalyticsRegistry
from analytics.visualizations import LineChart

logger = logging.getLogger(__name__)


@AnalyticsRegistry.register
class ProjectCapacityTrendMetric(AnalyticsMetric):
    """Total effective capacity of each iteration of a project over time."""

    @property
    def metric_id(self) -> str:
        return "project_capacity_trend"

    @property
    def title(self) -> str:
        return "Project Capacity Trend"

    @property
    def description(self) -> str:
        return "Total effective capacity per iteration, ordered by start date"

    @property
    def category(self) -> Literal["iteration", "project"]:
        return "project"

    def compute(self, **kwargs) -> AnalyticsResult:
        """Compute the capacity trend of a project.

        Kwargs:
            project_id: Project to report on (required).
            team_id: Only iterations of this team.
        """
        from data.services import CapacityService, IterationService

        try:
            project_id = int_filter(kwargs, "project_id")
            team_id = int_filter(kwargs, "team_id", required=False)

            capacity = CapacityService()
            iterations = IterationService(capacity).list_iterations(project_id)
            if team_id is not None:
                iterations = [i for i in iterations if i.team_id == team_id]

            rows = []
            for iteration in iterations:
                rollup = capacity.iteration_summary(iteration.id)
                rows.append(
                    {
                        "iteration_id": iteration.id,
                        "iteration": iteration.name,
                        "team": iteration.team.name,
                        "start_date": iteration.start_date.isoformat(),
                        "working_days": iteration.working_days,
                        "members": rollup.total_members,
                        "total_capacity": float(rollup.total_effective_capacity),
                    }
                )
            frame = pd.DataFrame(
                rows,
                columns=[
                    "iteration_id",
                    "iteration",
                    "team",
                    "start_date",
                    "working_days",
                    "members",
                    "total_capacity",
                ],
            )

            chart_json = None
            if not frame.empty:
                chart_json = LineChart().render_json(
                    {
                        "x": frame["iteration"].tolist(),
                        "y": frame["total_capacity"].round(2).tolist(),
                    },
                    title="Total Effective Capacity by Iteration",
                    x_label="Iteration",
                    y_label="Person-days",
                )

            summary = capacity.project_summary(project_id)
            if not frame.empty:
                peak = frame.loc[frame["total_capacity"].idxmax()]
                summary["peak_iteration"] = peak["iteration"]
                summary["average_capacity"] = round(
                    float(frame["total_capacity"].mean()), 1
                )

            return AnalyticsResult(
                metric_id=self.metric_id,
                title=self.title,
                data=frame.to_dict(orient="records"),
                chart_json=chart_json,
                table_html=frame.to_html(index=False),
                summary=summary,
            )

        except Exception as e:
            logger.warning(f"Failed to compute {self.metric_id}: {e}")
            return AnalyticsResult(
                metric_id=self.metric_id,
                title=self.title,
                error=str(e),
            )

    def get_filter_options(self) -> dict:
        return {
            "project_id": {"type": "select", "label": "Project"},
            "team_id": {"type": "select", "label": "Team"},
        }
