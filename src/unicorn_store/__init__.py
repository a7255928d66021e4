"""
unicorn_store

Top-level package for the Unicorn Store service.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Keep this file minimal; telemetry and DB setup belong to the composition root.
