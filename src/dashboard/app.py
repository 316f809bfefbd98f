import logging
import os

os.environ.setdefault("PANDAS_USE_BOTTLENECK", "0")

import pandas as pd
import streamlit as st

from adapters.csv_adapter import load_recipes, recipes_from_tables, get_last_load_stats
from export.csv_exporter import (
    merged_to_dataframe,
    safe_filename,
    schedule_to_dataframe,
    to_csv_bytes,
)
from export.excel_exporter import timelines_to_excel_bytes
from schema.validate import recipe_warnings
from timeline import load_settings, merge_timelines, schedule
from utils.time_format import format_time_for_display
from visualizations.gantt import TimelineChart

logging.basicConfig(level=logging.INFO)

st.set_page_config(page_title="Process Timeline", layout="wide")
st.title("Process Timeline")

settings = load_settings()

DISPLAY_COLUMNS = ["start_mmss", "step", "details", "duration_mmss", "temperature"]
DISPLAY_NAMES = {
    "recipe": "Recipe",
    "start_mmss": "Start",
    "step": "Step",
    "details": "Details",
    "duration_mmss": "Duration",
    "temperature": "Temperature",
}


@st.cache_data(show_spinner=False)
def _load_default():
    return load_recipes()


def _load_uploaded(files) -> list:
    tables = {}
    for f in files:
        name = os.path.splitext(f.name)[0].lower()
        tables[name] = pd.read_csv(f, dtype={"recipe_id": str, "step_id": str})
    return recipes_from_tables(tables)


# --- Sidebar: data source ------------------------------------------------------
st.sidebar.header("Recipes")
uploads = st.sidebar.file_uploader(
    "recipes.csv / steps.csv / rules.csv / overrides.csv",
    type=["csv"],
    accept_multiple_files=True,
)
try:
    recipes = _load_uploaded(uploads) if uploads else _load_default()
except ValueError as e:
    st.error(f"Could not load recipes: {e}")
    st.sidebar.json(get_last_load_stats())
    st.stop()

if not recipes:
    st.info("No recipes found. Upload recipe tables in the sidebar.")
    st.stop()

warnings = recipe_warnings(recipes)
if warnings:
    with st.sidebar.expander(f"Data warnings ({len(warnings)})"):
        for w in warnings:
            st.write(f"- {w}")

by_id = {r.recipe_id: r for r in recipes}
selected = st.sidebar.multiselect(
    "Recipes to run",
    options=list(by_id),
    default=list(by_id)[:1],
    format_func=lambda rid: by_id[rid].name,
)
quantity = st.sidebar.number_input(
    "Films in this batch", min_value=1, value=settings.default_quantity, step=1
)

if not selected:
    st.info("Select at least one recipe.")
    st.stop()

chart = TimelineChart()
chosen = [by_id[rid] for rid in selected]

# --- Single recipe -------------------------------------------------------------
if len(chosen) == 1:
    sched = schedule(chosen[0], int(quantity), settings)
    st.subheader(sched.recipe_name)
    if chosen[0].side_note:
        st.caption(chosen[0].side_note)
    st.metric("Total time", format_time_for_display(sched.total_duration))
    df = schedule_to_dataframe(sched)
    st.dataframe(
        df[DISPLAY_COLUMNS].rename(columns=DISPLAY_NAMES),
        hide_index=True,
        use_container_width=True,
    )
    fig = chart.schedule_gantt(sched)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True)
    sheets = [(sched.recipe_name, df)]
    base_name = sched.recipe_name
# --- Merged view ---------------------------------------------------------------
else:
    merged = merge_timelines(chosen, int(quantity), settings)
    st.subheader(merged.name)
    st.caption(f"Composite id: {merged.composite_id}")
    if merged.side_note:
        st.caption(merged.side_note)
    st.metric("Total time", format_time_for_display(merged.total_duration))
    df = merged_to_dataframe(merged)
    st.dataframe(
        df[["recipe"] + DISPLAY_COLUMNS].rename(columns=DISPLAY_NAMES),
        hide_index=True,
        use_container_width=True,
    )
    fig = chart.merged_gantt(merged)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True)
    # pairs keep same-named sheets apart
    sheets = [("merged", df)] + [
        (r.name, schedule_to_dataframe(schedule(r, int(quantity), settings)))
        for r in chosen
    ]
    base_name = merged.name

# --- Downloads -----------------------------------------------------------------
st.markdown("---")
c1, c2 = st.columns(2)
c1.download_button(
    "Download CSV",
    data=to_csv_bytes(df),
    file_name=safe_filename(f"{base_name} x{int(quantity)}", "csv"),
    mime="text/csv",
)
c2.download_button(
    "Download Excel",
    data=timelines_to_excel_bytes(sheets),
    file_name=safe_filename(f"{base_name} x{int(quantity)}", "xlsx"),
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)
