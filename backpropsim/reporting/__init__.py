"""Reporting utilities for backpropsim."""

from .formulas import FORMULAS
from .plots import ErrorCurvePlot
from .summary import network_summary, summarize_log

__all__ = ["FORMULAS", "ErrorCurvePlot", "network_summary", "summarize_log"]
