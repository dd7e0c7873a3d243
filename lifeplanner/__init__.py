"""LifePlanner: behavior analysis and recommendations for a daily plan."""

__version__ = "0.1.0"
