"""Daily per-account AWS cost report with day-over-day trend markers."""

__version__ = "0.1.0"
