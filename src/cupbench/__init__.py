"""Championship benchmark engine: classify hockey roles and score weaknesses."""

__version__ = "0.1.0"
