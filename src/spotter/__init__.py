"""
Spotter: deterministic, safety-aware workout program generation.

The generation pipeline lives in spotter.engine; catalog, profile and
configuration loading live at the package root.
"""

__version__ = "0.3.0"
