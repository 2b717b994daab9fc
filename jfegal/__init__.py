"""A small visual-novel engine: YAML chapter scripts, scene playback state and controls."""

__version__ = "0.1.0"