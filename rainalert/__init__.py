"""Short-horizon rain onset alerts from minute-level forecasts."""

__version__ = "0.1.0"
