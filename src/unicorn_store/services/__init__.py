"""
unicorn_store.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Publish domain events after successful commits.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services are plain Python and testable with fake publishers/sessions.
