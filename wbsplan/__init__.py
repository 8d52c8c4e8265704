"""Gantt timeline and WBS scheduling engine."""

__version__ = "0.1.0"
