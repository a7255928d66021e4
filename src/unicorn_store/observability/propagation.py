"""
unicorn_store.observability.propagation

Trace context propagation across W3C and AWS X-Ray header formats.

Responsibilities:
- Compose the W3C `traceparent` and X-Ray `X-Amzn-Trace-Id` propagators.
- Inject both formats on outgoing carriers; extract with first-registered precedence.
"""

from __future__ import annotations

from collections.abc import Sequence

from opentelemetry.context import Context
from opentelemetry.propagators.aws import AwsXRayPropagator
from opentelemetry.propagators.textmap import (
    CarrierT,
    Getter,
    Setter,
    TextMapPropagator,
    default_getter,
    default_setter,
)
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator


class PrecedenceCompositePropagator(TextMapPropagator):
    """
    Like `opentelemetry.propagators.composite.CompositePropagator`, except that on
    extraction the first-registered propagator wins when several formats are present.

    Each propagator leaves the context untouched when its header is absent, so
    extracting in reverse registration order lets earlier formats overwrite later ones.
    """

    def __init__(self, propagators: Sequence[TextMapPropagator]) -> None:
        self._propagators = tuple(propagators)

    @property
    def propagators(self) -> tuple[TextMapPropagator, ...]:
        return self._propagators

    def extract(
        self,
        carrier: CarrierT,
        context: Context | None = None,
        getter: Getter[CarrierT] = default_getter,
    ) -> Context:
        for propagator in reversed(self._propagators):
            context = propagator.extract(carrier, context, getter=getter)
        return context if context is not None else Context()

    def inject(
        self,
        carrier: CarrierT,
        context: Context | None = None,
        setter: Setter[CarrierT] = default_setter,
    ) -> None:
        for propagator in self._propagators:
            propagator.inject(carrier, context, setter=setter)

    @property
    def fields(self) -> set[str]:
        composite_fields: set[str] = set()
        for propagator in self._propagators:
            composite_fields.update(propagator.fields)
        return composite_fields


def build_propagator() -> PrecedenceCompositePropagator:
    # W3C first: it wins over X-Ray when a request carries both headers.
    return PrecedenceCompositePropagator(
        [TraceContextTextMapPropagator(), AwsXRayPropagator()]
    )


# --- Module Notes -----------------------------------------------------------
# X-Ray headers only carry epoch-prefixed trace ids; `observability.telemetry`
# generates ids with `AwsXRayIdGenerator` to match.
