"""ACFS planner — module selection, dependency resolution and resumable install plans."""

__version__ = "0.1.0"
