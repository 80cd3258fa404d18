from typing import Dict, List, Optional, Sequence, Tuple

import plotly.graph_objects as go
from plotly.graph_objs import Figure

from .correlation import CorrelationResult
from .dates import DateNormalizer
from .forecast import ForecastResult
from .process_behaviour import ProcessBehaviourResult
from .statistics import CycleTimeAnalysis
from .throughput import DailyThroughput


class ColorManager:
    """Manages color palettes for the charts."""
    DEFAULT_POINT_COLOR = '#3B82F6'
    SPECIAL_CAUSE_COLOR = '#EF4444'
    LIMIT_COLOR = '#6B7280'
    DEFAULT_CONFIDENCE_COLORS = {50: "red", 85: "green", 95: "blue"}
    COLOR_BLIND_FRIENDLY_CONFIDENCE_COLORS = {50: '#E69F00', 85: '#7570b3', 95: '#e7298a'}

    @staticmethod
    def get_confidence_colors(is_color_blind_mode: bool) -> Dict[int, str]:
        return ColorManager.COLOR_BLIND_FRIENDLY_CONFIDENCE_COLORS if is_color_blind_mode else ColorManager.DEFAULT_CONFIDENCE_COLORS


class ChartConfig:
    CYCLE_TIME_HOVER = "<b>%{customdata[0]}</b><br><b>Completed:</b> %{customdata[1]}<br><b>Cycle time:</b> %{y} days<extra></extra>"
    BEHAVIOUR_HOVER = "<b>%{customdata[0]}</b><br><b>Sequence:</b> %{x}<br><b>Cycle time:</b> %{y} days<br><b>Completed:</b> %{customdata[1]}<extra></extra>"
    CORRELATION_HOVER = "<b>Estimate %{x}</b><br>Average: %{y:.1f} days<br>Range: %{customdata[0]} - %{customdata[1]} days<br>Items: %{customdata[2]}<extra></extra>"
    FORECAST_HOVER = "<b>%{x} items</b><br>Frequency: %{y}<br>Probability: %{customdata:.2f}%<extra></extra>"


class ChartGenerator:
    """Renders analysis results as Plotly figures."""

    @staticmethod
    def create_cycle_time_chart(analysis: CycleTimeAnalysis, is_color_blind_mode: bool = False) -> Optional[Figure]:
        if not analysis.items: return None
        items = analysis.items
        fig = go.Figure(go.Scattergl(
            x=[item.completed_on for item in items], y=[item.cycle_time_days for item in items], mode='markers', name='Items',
            marker=dict(color=ColorManager.DEFAULT_POINT_COLOR, size=8, opacity=0.7),
            customdata=[[item.id, DateNormalizer.format(item.completed_on)] for item in items], hovertemplate=ChartConfig.CYCLE_TIME_HOVER))
        p85 = analysis.summary.p85
        color = ColorManager.get_confidence_colors(is_color_blind_mode)[85]
        fig.add_hline(y=p85, line_dash="dash", line_color=color, annotation_text=f"85th: {p85:.1f}d", annotation_position="top left")
        fig.update_layout(title="Cycle Time Scatterplot", xaxis_title="Completed Date", yaxis_title="Cycle Time (Days)", height=600)
        return fig

    @staticmethod
    def create_process_behaviour_charts(result: ProcessBehaviourResult) -> Tuple[Optional[Figure], Optional[Figure]]:
        if not result.points: return None, None
        limits = result.control_limits
        points = result.points
        colors = [ColorManager.SPECIAL_CAUSE_COLOR if p.is_special_cause else ColorManager.DEFAULT_POINT_COLOR for p in points]
        x_chart = go.Figure(go.Scatter(
            x=[p.sequence for p in points], y=[p.value for p in points], mode='lines+markers', name='Cycle time',
            line=dict(color=ColorManager.DEFAULT_POINT_COLOR, width=1), marker=dict(color=colors, size=8),
            customdata=[[p.item_id or '', DateNormalizer.format(p.completed_on) if p.completed_on else ''] for p in points],
            hovertemplate=ChartConfig.BEHAVIOUR_HOVER))
        ChartGenerator._add_limit_lines(x_chart, [(limits.upper_limit, "UPL"), (limits.central_line, "CL"), (limits.lower_limit, "LPL")])
        x_chart.update_layout(title="Process Behaviour Chart (X)", xaxis_title="Sequence", yaxis_title="Cycle Time (Days)", height=500)

        mr_chart = None
        if result.moving_ranges:
            mr_chart = go.Figure(go.Scatter(
                x=[mr.sequence for mr in result.moving_ranges], y=[mr.moving_range for mr in result.moving_ranges],
                mode='lines+markers', name='Moving range', line=dict(color=ColorManager.LIMIT_COLOR, width=1)))
            ChartGenerator._add_limit_lines(mr_chart, [(limits.moving_range_upper_limit, "URL"), (limits.average_moving_range, "mR")])
            mr_chart.update_layout(title="Moving Range Chart (mR)", xaxis_title="Sequence", yaxis_title="Moving Range (Days)", height=350)
        return x_chart, mr_chart

    @staticmethod
    def create_correlation_chart(result: CorrelationResult) -> Optional[Figure]:
        if not result.groups: return None
        groups = result.groups
        fig = go.Figure(go.Bar(
            x=[g.estimate for g in groups], y=[g.avg_cycle_time for g in groups], name='Average cycle time',
            marker_color=ColorManager.DEFAULT_POINT_COLOR,
            error_y=dict(type='data', symmetric=False, array=[g.max_cycle_time - g.avg_cycle_time for g in groups], arrayminus=[g.avg_cycle_time - g.min_cycle_time for g in groups]),
            customdata=[[g.min_cycle_time, g.max_cycle_time, g.count] for g in groups], hovertemplate=ChartConfig.CORRELATION_HOVER))
        if result.trend is not None:
            xs = [groups[0].estimate, groups[-1].estimate]
            fig.add_trace(go.Scatter(x=xs, y=[result.trend.intercept + result.trend.slope * x for x in xs], mode='lines', name=f'Trend (R² {result.trend.r2:.2f})', line=dict(color='red', dash='dash', width=2)))
        fig.update_layout(title="Estimate vs Cycle Time", xaxis_title="Estimate", yaxis_title="Cycle Time (Days)", height=600)
        fig.update_xaxes(tickmode='array', tickvals=[g.estimate for g in groups])
        return fig

    @staticmethod
    def create_throughput_chart(daily: Sequence[DailyThroughput]) -> Optional[Figure]:
        if not daily: return None
        fig = go.Figure(go.Bar(x=[d.date for d in daily], y=[d.count for d in daily], marker_color=ColorManager.DEFAULT_POINT_COLOR))
        fig.update_layout(title="Daily Throughput", xaxis_title="Date", yaxis_title="Items Completed", height=400)
        return fig

    @staticmethod
    def create_forecast_chart(result: ForecastResult, is_color_blind_mode: bool = False) -> Optional[Figure]:
        if not result.histogram: return None
        values, frequencies = list(result.histogram.keys()), list(result.histogram.values())
        probabilities = [100.0 * f / result.simulation_count for f in frequencies]
        fig = go.Figure(data=[go.Bar(x=values, y=frequencies, name='Simulations', customdata=probabilities, hovertemplate=ChartConfig.FORECAST_HOVER)])
        colors = ColorManager.get_confidence_colors(is_color_blind_mode)
        for confidence, value in ChartGenerator._thresholds(result):
            fig.add_vline(x=value, line_dash="dash", line_color=colors[confidence], annotation_text=f"{confidence}%: {value}", annotation_position="top left")
        fig.update_layout(title=f"Forecast: How Many Items in the Next {result.forecast_horizon_days} Days?", xaxis_title="Number of Items Completed", yaxis_title="Frequency", bargap=0.1, yaxis_range=[0, max(frequencies) * 1.20], height=600)
        return fig

    @staticmethod
    def forecast_summary(result: ForecastResult) -> List[str]:
        return [f"There is a **{c}% chance** to complete **{v} or more** items." for c, v in ChartGenerator._thresholds(result)]

    @staticmethod
    def _thresholds(result: ForecastResult) -> List[Tuple[int, int]]:
        return [(95, result.p95), (85, result.p85), (50, result.p50)]

    @staticmethod
    def _add_limit_lines(fig: Figure, lines: Sequence[Tuple[float, str]]) -> None:
        for value, label in lines:
            fig.add_hline(y=value, line_dash="dash", line_color=ColorManager.LIMIT_COLOR, line_width=1.5, annotation_text=f"{label}: {value:.1f}", annotation_position="top left")
