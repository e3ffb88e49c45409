"""TaskFlow: a small task tracker with pluggable key-value persistence."""

__version__ = "0.1.0"
