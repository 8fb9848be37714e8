"""Reporting utilities for sigmanet."""

from .artifacts import write_manifest
from .metrics import ConsoleSink, CsvSink, JsonlSink
from .plots import PlotAdapter

__all__ = ["ConsoleSink", "CsvSink", "JsonlSink", "PlotAdapter", "write_manifest"]
