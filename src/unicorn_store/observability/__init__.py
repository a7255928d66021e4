"""
unicorn_store.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment.
- OpenTelemetry providers, propagation, tracing and metrics middleware.
"""

# Package marker; import from submodules directly.


# --- Module Notes -----------------------------------------------------------
# Everything here is wired by `unicorn_store.api.app.create_app`; nothing registers
# itself at import time.
