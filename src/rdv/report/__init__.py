"""Diff reporting."""

from rdv.report.ops import Report, Reporter

__all__ = ["Report", "Reporter"]
