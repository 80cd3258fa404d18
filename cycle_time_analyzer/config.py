import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class Config:
    """Centralized configuration for the analysis engine."""
    ID_ALIASES = ('id', 'key')
    END_DATE_ALIASES = ('end', 'end date')
    CYCLE_TIME_ALIASES = ('ct', 'cycle time')
    ESTIMATE_ALIASES = ('estimate', 'est')
    SNIFF_SAMPLE_SIZE = 5
    DATE_PATTERN = r'\d{1,2}[/-]\d{1,2}[/-]\d{2,4}'
    CYCLE_TIME_SNIFF_RANGE = (0.0, 100.0)
    MIN_YEAR, MAX_YEAR = 2020, 2030
    PERCENTILES = [50, 70, 85, 95]
    CYCLE_TIME_PERCENTILE = 0.85
    INDIVIDUALS_MULTIPLIER = 2.66
    MOVING_RANGE_MULTIPLIER = 3.27
    DEFAULT_SIMULATIONS = 10000
    SIMULATION_BOUNDS = (1000, 100000)
    DEFAULT_FORECAST_HORIZON = 14
    FORECAST_HORIZON_BOUNDS = (1, 365)
    SIMULATION_BATCH_DRAWS = 1_000_000
    LIMITED_HISTORY_DAYS = 10
    MIN_TREND_ITEMS = 3


@dataclass(frozen=True)
class ForecastSettings:
    """Parameters for one Monte Carlo run."""
    simulation_count: int = Config.DEFAULT_SIMULATIONS
    forecast_horizon_days: int = Config.DEFAULT_FORECAST_HORIZON

    def clamped(self) -> 'ForecastSettings':
        sims = _clamp(self.simulation_count, *Config.SIMULATION_BOUNDS, default=Config.DEFAULT_SIMULATIONS)
        horizon = _clamp(self.forecast_horizon_days, *Config.FORECAST_HORIZON_BOUNDS, default=Config.DEFAULT_FORECAST_HORIZON)
        if sims != self.simulation_count:
            logger.warning("simulation_count %s outside %s, using %s", self.simulation_count, Config.SIMULATION_BOUNDS, sims)
        if horizon != self.forecast_horizon_days:
            logger.warning("forecast_horizon_days %s outside %s, using %s", self.forecast_horizon_days, Config.FORECAST_HORIZON_BOUNDS, horizon)
        return ForecastSettings(simulation_count=sims, forecast_horizon_days=horizon)


def _clamp(value: float, low: int, high: int, default: int) -> int:
    # NaN compares false against both bounds
    if value != value: return default
    return int(max(low, min(high, value)))
