"""fitmetrics - analytics aggregation engine for workout and AI activity records."""

__version__ = "1.0.0"
