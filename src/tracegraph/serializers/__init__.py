"""Serialization helpers."""

from .json import load_trace_json, save_trace_json, trace_from_json, trace_to_json

__all__ = ["load_trace_json", "save_trace_json", "trace_from_json", "trace_to_json"]
