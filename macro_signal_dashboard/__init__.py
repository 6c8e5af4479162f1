"""Macro signal dashboard: FRED series normalization, trading signals and alerts."""

__version__ = "1.0.0"
