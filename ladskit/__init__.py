"""
ladskit - Semantic annotation and data recording for laboratory device models

WHAT: Dictionary references on device models plus run recording and reports
WHERE: ladskit/ - top-level package
WHO: Device server implementations publishing interpretable, recorded runs

Subpackages:
- graph: in-memory device model, dictionary namespaces, event channels
- semantics: reference catalog and default-reference binder
- recording: tracks, recorders, exporters and value-change reporters
- config: environment-derived settings and event payload schema
- logging: structured binding audit records
"""

__version__ = "0.1.0"

__all__ = ["config", "graph", "logging", "recording", "semantics", "telemetry"]
