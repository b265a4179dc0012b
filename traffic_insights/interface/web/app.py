"""Streamlit dashboard for circle traffic status and forecasts."""
from __future__ import annotations

import sys
import tempfile
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import pandas as pd
import streamlit as st

CURRENT_FILE = Path(__file__).resolve()
for candidate in CURRENT_FILE.parents:
    if (candidate / "pyproject.toml").exists():
        project_root = candidate
        break
else:
    project_root = CURRENT_FILE.parents[3]

project_root_str = str(project_root)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from scripts.bootstrap import bootstrap_project

PROJECT_ROOT = bootstrap_project()

from traffic_insights.utils.logger import configure_logging, logger

from traffic_insights.core.entities import Area, CurrentTrafficStatus, HourlyPrediction, RouteRecommendation
from traffic_insights.core.exceptions import InvalidSpreadsheetError
from traffic_insights.infrastructure.ingestion.samples import sample_frame
from traffic_insights.infrastructure.reports import ForecastReportAnalyzer
from traffic_insights.interface.services import TrafficServices, create_services
from traffic_insights.utils.config import (
    DEFAULT_TREND_HOURS_AHEAD,
    AppConfig,
    forecasting_setting,
    load_config,
    logging_settings,
)
from traffic_insights.utils.formatting import format_hour

LEVEL_BADGES = {
    "clear": "🟢 Clear",
    "moderate": "🟠 Moderate",
    "heavy": "🔴 Heavy",
}
VERDICT_BADGES = {
    "avoid": "⛔ Avoid",
    "proceed": "➡️ Proceed",
    "ideal": "✅ Ideal",
}


@st.cache_data
def load_app_config(path: Path) -> AppConfig:
    return load_config(path)


@st.cache_resource
def load_services(config_path: Path) -> TrafficServices:
    config = load_app_config(config_path)
    level, log_file = logging_settings(config)
    configure_logging(level, log_file)
    logger.info("Starting dashboard with configuration {}", config_path)
    return create_services(config, project_root=PROJECT_ROOT)


def _forecast_table(predictions: Sequence[HourlyPrediction]) -> pd.DataFrame:
    rows = [
        {
            "Hour": format_hour(prediction.hour),
            "Level": prediction.predicted_level,
            "Density (%)": prediction.predicted_density,
            "Confidence": prediction.confidence,
        }
        for prediction in predictions
    ]
    return pd.DataFrame(rows, columns=["Hour", "Level", "Density (%)", "Confidence"])


def _status_metric(column, label: str, status: CurrentTrafficStatus) -> None:
    column.metric(label, LEVEL_BADGES[status.display_level], f"{status.density:g}% density")
    column.caption(f"Confidence {status.confidence:.0%}")


def render_current_status(services: TrafficServices, area: Area, trend_hours: int) -> None:
    st.markdown(f"### Current traffic at {area.name}")
    status = services.current_status.for_area(area.id)
    col1, col2 = st.columns(2)
    _status_metric(col1, "Area status", status)

    lanes = services.catalog.lanes_for_area(area.id)
    if not lanes:
        col2.info("This area has no monitored lanes.")
        return

    lane_statuses = services.current_status.for_lanes([lane.id for lane in lanes])
    lane_columns = st.columns(len(lanes))
    for column, lane in zip(lane_columns, lanes):
        lane_status = lane_statuses.get(lane.id)
        if lane_status is None:
            column.warning(f"{lane.name}: no forecast available")
            continue
        _status_metric(column, lane.name, lane_status)
        column.caption(f"~{lane_status.vehicle_count} vehicles/hour")
        trend = services.lane_forecast.trend(lane.id, hours_ahead=trend_hours)
        column.caption(f"Next {trend_hours}h: {trend.trend}")


def render_forecast(services: TrafficServices, area: Area) -> None:
    st.markdown(f"### 24-hour forecast for {area.name}")
    predictions = services.current_status.forecast_24h(area.id)
    analyzer = ForecastReportAnalyzer()
    metrics = analyzer.compute_metrics(predictions)

    col1, col2, col3 = st.columns(3)
    col1.metric("Average density", f"{metrics['average_density']}%")
    col2.metric("Peak hour", metrics["peak_hour"]["label"])
    col3.metric("Quietest hour", metrics["quietest_hour"]["label"])

    for figure in analyzer.build_figures(predictions, title=area.name).values():
        st.pyplot(figure)
        plt.close(figure)
    st.dataframe(_forecast_table(predictions), use_container_width=True)


def render_weekly_patterns(services: TrafficServices, area: Area) -> None:
    st.markdown(f"### Weekly patterns for {area.name}")
    patterns = services.weekly_patterns.execute(area.id)
    frame = pd.DataFrame(
        [
            {
                "Day": pattern.day,
                "Average density (%)": pattern.avg_density,
                "Peak hour": format_hour(pattern.peak_hour),
                "Level": pattern.level,
            }
            for pattern in patterns
        ]
    )
    st.bar_chart(frame.set_index("Day")["Average density (%)"])
    st.dataframe(frame, use_container_width=True)


def _recommendation_rows(recommendations: Sequence[RouteRecommendation]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Location": item.location,
                "Now": item.current_level,
                "Next hour": item.predicted_level,
                "Recommendation": VERDICT_BADGES[item.recommendation],
                "Reason": item.reason,
                "Alternatives": ", ".join(item.alternatives) or "-",
            }
            for item in recommendations
        ]
    )


def render_recommendations(services: TrafficServices) -> None:
    st.markdown("### Route recommendations")
    recommendations = services.recommend_routes.execute()
    if not recommendations:
        st.info("No recommendations are available right now.")
        return
    st.dataframe(_recommendation_rows(recommendations), use_container_width=True)


def render_upload(services: TrafficServices) -> None:
    st.markdown("### Upload traffic data")
    lane_specific = st.checkbox("Lane-specific data (circle, lane_position, vehicle_count)")
    st.download_button(
        "Download sample CSV",
        data=sample_frame(lane_specific=lane_specific).to_csv(index=False).encode("utf-8"),
        file_name="mysore_lane_traffic_sample.csv" if lane_specific else "mysore_traffic_sample.csv",
        mime="text/csv",
    )

    uploaded = st.file_uploader("Spreadsheet", type=["xlsx", "xls", "csv"])
    if uploaded is None:
        return

    suffix = Path(uploaded.name).suffix.lower()
    with tempfile.TemporaryDirectory() as directory:
        path = Path(directory) / f"upload{suffix}"
        path.write_bytes(uploaded.getvalue())
        try:
            report = services.import_data.execute(path, lane_specific=lane_specific)
        except InvalidSpreadsheetError as error:
            st.error(str(error))
            return

    st.success(f"Imported {report.imported} records ({report.skipped} skipped).")
    if report.mappings:
        with st.expander(f"Automatically mapped {len(report.mappings)} area name(s)"):
            for message in report.mappings:
                st.write(message)
    for summary in report.summaries:
        area = services.catalog.get_area(summary.area_id)
        st.caption(
            f"{area.name if area else summary.area_id}: {summary.total_records} records today, "
            f"busiest {summary.busiest_time}, quietest {summary.quietest_time}"
        )


def main() -> None:
    st.set_page_config(page_title="Traffic Insights", layout="wide")
    st.title("🚦 Traffic Insights: circle traffic status and forecasts")

    config_path = PROJECT_ROOT / "configs" / "config.yaml"
    services = load_services(config_path)
    trend_hours = forecasting_setting(
        load_app_config(config_path), "trend_hours_ahead", DEFAULT_TREND_HOURS_AHEAD
    )

    areas = services.catalog.list_areas()
    if not areas:
        st.error("The area catalog is empty.")
        return
    area = st.sidebar.selectbox("Area", areas, format_func=lambda item: item.name)

    status_tab, forecast_tab, weekly_tab, routes_tab, upload_tab = st.tabs(
        ["Current status", "24-hour forecast", "Weekly patterns", "Recommendations", "Upload"]
    )
    with status_tab:
        render_current_status(services, area, trend_hours)
    with forecast_tab:
        render_forecast(services, area)
    with weekly_tab:
        render_weekly_patterns(services, area)
    with routes_tab:
        render_recommendations(services)
    with upload_tab:
        render_upload(services)


if __name__ == "__main__":
    main()
