"""CSV Insights — column profiling and chart suggestions for tabular uploads."""

__version__ = "0.1.0"
