"""Streamlit front end: ``streamlit run cycle_time_analyzer/dashboard.py``."""
import io
from typing import Optional

import streamlit as st
from pandas import DataFrame

from cycle_time_analyzer.analysis import DatasetAnalysis, analyze_dataset
from cycle_time_analyzer.charts import ChartGenerator
from cycle_time_analyzer.config import Config, ForecastSettings
from cycle_time_analyzer.loader import load_frame

ANALYSES = ["Cycle Time Analysis", "Process Behaviour Chart", "Correlation Analysis", "Monte Carlo Simulation"]


class Dashboard:
    def __init__(self, uploaded_file):
        self.uploaded_file = uploaded_file
        self.selections = {}

    def run(self):
        df = Dashboard.load_csv(self.uploaded_file.getvalue())
        if df is None:
            st.error("File Load Error: Could not read this file. Please ensure it's a standard CSV.")
            return
        self._display_sidebar()
        analysis = Dashboard.analyze(df, int(self.selections["simulations"]), int(self.selections["horizon"]))
        if not analysis.columns.has_usable_data:
            st.error("Invalid File Format: could not find an end date and a cycle time column.")
            return
        if analysis.columns.low_confidence_roles:
            st.warning(f"Column detection: {', '.join(analysis.columns.low_confidence_roles)} inferred from cell contents. Check the results look right.")
        tabs = st.tabs([f"**{name}**" for name in ANALYSES])
        with tabs[0]: self._display_cycle_time(analysis)
        with tabs[1]: self._display_process_behaviour(analysis)
        with tabs[2]: self._display_correlation(analysis)
        with tabs[3]: self._display_forecast(analysis)

    @staticmethod
    @st.cache_data(show_spinner="Processing CSV...")
    def load_csv(file_bytes: bytes) -> Optional[DataFrame]:
        return load_frame(io.BytesIO(file_bytes))

    @staticmethod
    @st.cache_data(show_spinner="Running simulations...")
    def analyze(df: DataFrame, simulation_count: int, forecast_horizon_days: int) -> DatasetAnalysis:
        """Cached on the frame and settings so display-only reruns reuse the same forecast."""
        settings = ForecastSettings(simulation_count, forecast_horizon_days)
        return analyze_dataset(df.to_dict('records'), settings, headers=list(df.columns))

    def _display_sidebar(self):
        st.sidebar.markdown("#### Forecast Settings")
        low, high = Config.SIMULATION_BOUNDS
        self.selections["simulations"] = st.sidebar.number_input("Number of simulations", min_value=low, max_value=high, value=Config.DEFAULT_SIMULATIONS, step=1000)
        low, high = Config.FORECAST_HORIZON_BOUNDS
        self.selections["horizon"] = st.sidebar.number_input("Forecast horizon (days)", min_value=low, max_value=high, value=Config.DEFAULT_FORECAST_HORIZON, step=1)
        self.selections['color_blind_mode'] = st.sidebar.checkbox("Enable Color-Blind Friendly Mode")

    def _display_cycle_time(self, analysis: DatasetAnalysis):
        st.header("Cycle Time Analysis")
        summary = analysis.cycle_time.summary
        m1, m2, m3, m4, m5 = st.columns(5)
        m1.metric("Items", summary.count)
        m2.metric("Average", f"{summary.mean:.1f}d")
        m3.metric("Min", f"{summary.minimum:g}d")
        m4.metric("Max", f"{summary.maximum:g}d")
        m5.metric("85th Percentile", f"{summary.p85:.1f}d")
        chart = ChartGenerator.create_cycle_time_chart(analysis.cycle_time, self.selections['color_blind_mode'])
        if chart: st.plotly_chart(chart, use_container_width=True)
        else: st.info("No completed items with a positive cycle time.")

    def _display_process_behaviour(self, analysis: DatasetAnalysis):
        st.header("Process Behaviour Chart")
        result = analysis.process_behaviour
        limits = result.control_limits
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Central Line", f"{limits.central_line:.1f}")
        m2.metric("Upper Process Limit", f"{limits.upper_limit:.1f}")
        m3.metric("Lower Process Limit", f"{limits.lower_limit:.1f}")
        m4.metric("Special Causes", result.special_cause_count)
        x_chart, mr_chart = ChartGenerator.create_process_behaviour_charts(result)
        if x_chart: st.plotly_chart(x_chart, use_container_width=True)
        else: st.info("No completed items with a positive cycle time.")
        if mr_chart: st.plotly_chart(mr_chart, use_container_width=True)

    def _display_correlation(self, analysis: DatasetAnalysis):
        st.header("Correlation Analysis")
        if analysis.columns.estimate_key is None:
            st.info("No 'Estimate' column found in this file.")
            return
        result = analysis.correlation
        m1, m2, m3 = st.columns(3)
        m1.metric("Items", result.total_items)
        m2.metric("Unique Estimates", result.unique_estimates)
        m3.metric("Estimate Range", result.estimate_range)
        chart = ChartGenerator.create_correlation_chart(result)
        if chart: st.plotly_chart(chart, use_container_width=True)
        else: st.info("No items with both a positive estimate and cycle time.")

    def _display_forecast(self, analysis: DatasetAnalysis):
        st.header("Monte Carlo Simulation")
        history = analysis.throughput_summary
        if not analysis.daily_throughput:
            st.warning("No throughput data available. Please ensure your CSV has valid end dates.")
            return
        if history.limited_history:
            st.warning(f"Limited Historical Data: only {history.total_days} days available. Consider using at least 2-4 weeks of data.")
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Total Days", history.total_days)
        m2.metric("Avg Daily", f"{history.average:.1f}")
        m3.metric("Min Daily", history.minimum)
        m4.metric("Max Daily", history.maximum)
        throughput_chart = ChartGenerator.create_throughput_chart(analysis.daily_throughput)
        if throughput_chart: st.plotly_chart(throughput_chart, use_container_width=True)
        result = analysis.forecast
        st.markdown("\n".join(f"- {line}" for line in ChartGenerator.forecast_summary(result)))
        chart = ChartGenerator.create_forecast_chart(result, self.selections['color_blind_mode'])
        if chart: st.plotly_chart(chart, use_container_width=True)


def main():
    """Main function to run the Streamlit app."""
    st.set_page_config(page_title="Cycle Time Analyzer", layout="wide")
    st.title("Cycle Time Analyzer")
    uploaded_file = st.file_uploader("Upload CSV file", type=["csv"], help="Columns: ID, End (DD/MM/YYYY), CT, optional Estimate.")
    if uploaded_file:
        Dashboard(uploaded_file).run()
    else:
        st.info("Upload a CSV of completed work items to begin. Your data is processed in memory and never stored.")


if __name__ == "__main__":
    main()
