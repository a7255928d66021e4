"""
unicorn_store.publishers

Outbound domain event publishers.

Responsibilities:
- Deliver unicorn lifecycle events to AWS EventBridge.
"""

# Package marker.
