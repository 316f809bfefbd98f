from __future__ import annotations
from typing import Optional
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from export.csv_exporter import merged_to_dataframe, schedule_to_dataframe
from schema.models import MergedTimeline, Schedule


class TimelineChart:
    """Build Plotly Gantt charts (minutes on the x axis) from engine output.

    Methods return Plotly Figure objects (or None if there is nothing to draw).
    Keep this module UI-agnostic; Streamlit rendering happens in the dashboard.
    """

    @staticmethod
    def _bars(
        df: pd.DataFrame, y: str, color: str, title: str
    ) -> Optional[go.Figure]:
        df = df.loc[~df["is_terminal"].astype(bool)].copy()
        df = df.loc[df["duration"] > 0]
        if df.empty:
            return None
        hover_cols = [
            c
            for c in ["recipe", "step", "details", "start_mmss", "duration_mmss", "temperature"]
            if c in df.columns
        ]
        fig = px.bar(
            df,
            x="duration",
            y=y,
            base="start",
            color=color,
            orientation="h",
            hover_data=hover_cols,
            title=title,
        )
        fig.update_yaxes(autorange="reversed")
        fig.update_xaxes(title_text="minutes")
        return fig

    def schedule_gantt(self, sched: Schedule) -> Optional[go.Figure]:
        """One bar per step of a single recipe."""
        if not sched.entries:
            return None
        df = schedule_to_dataframe(sched)
        df["task"] = (df["index"] + 1).astype(str) + ". " + df["step"].astype(str)
        return self._bars(df, y="task", color="step", title=f"{sched.recipe_name} timeline")

    def merged_gantt(self, merged: MergedTimeline) -> Optional[go.Figure]:
        """One row per recipe, bars coloured by recipe, with a marker where each recipe finishes."""
        if not merged.entries:
            return None
        df = merged_to_dataframe(merged)
        fig = self._bars(
            df, y="recipe", color="recipe", title=merged.name or "Merged timeline"
        )
        if fig is None:
            return None
        done = df.loc[df["is_terminal"].astype(bool)]
        fig.add_trace(
            go.Scatter(
                x=done["start"],
                y=done["recipe"],
                mode="markers",
                marker_symbol="line-ns-open",
                marker_size=18,
                name=done["step"].iloc[0] if not done.empty else "Done",
                hovertext=done["start_mmss"],
            )
        )
        return fig


__all__ = ["TimelineChart"]
