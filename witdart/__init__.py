"""witdart — Dart bindings generator for WIT worlds."""

__version__ = "0.1.0"
