"""The properties, init and destroy facets.

Facets are applied by the host to a component after it has been created:
``properties`` while configuring it, ``init`` while initializing it, and
``destroy`` once it is ready, to arrange for its teardown.
"""

import logging
from typing import Any

from facetwire.destroy import DestroyRegistry
from facetwire.domain import ComponentHandle, FacetRecord
from facetwire.invocation import invoke_all
from facetwire.plugin import Resolver
from facetwire.promise import Promise

__all__ = ["properties_facet", "init_facet", "DestroyFacet"]

logger = logging.getLogger(__name__)


def properties_facet(promise: Promise, facet: FacetRecord, resolver: Resolver) -> None:
    """Set every property named in ``facet.options`` to its resolved value.

    All values are resolved concurrently. ``promise`` resolves once every property
    has been set and rejects with the first failure; properties already set when a
    sibling fails are left as they are.
    """
    assignments = [
        _set_property(facet.target, name, value_spec, resolver)
        for name, value_spec in facet.options.items()
    ]
    resolver.when_all(assignments).then(promise.resolve, promise.reject)


def _set_property(
    target: ComponentHandle, name: str, value_spec: Any, resolver: Resolver
) -> Promise:
    return resolver.resolve(value_spec).then(lambda value: target.proxy.set(name, value))


def init_facet(
    promise: Promise, facet: FacetRecord, resolver: Resolver, *, strict: bool = False
) -> None:
    invoke_all(promise, facet, resolver, strict=strict)


class DestroyFacet:
    """Registers a component's teardown with the context's :class:`DestroyRegistry`.

    Registration resolves the facet's promise straight away, so teardown never holds
    up readiness. The teardown itself dispatches like the init facet when the
    registry runs it, and returns the promise for that dispatch so the registry can
    report failures. Teardown always invokes strictly: a method that is missing by
    then is reported as a :class:`~facetwire.errors.MissingMethodError` instead of
    leaving the context's destruction pending.
    """

    def __init__(self, registry: DestroyRegistry):
        self._registry = registry

    def __call__(self, promise: Promise, facet: FacetRecord, resolver: Resolver) -> None:
        target, options = facet.target, facet.options

        def destroy_component() -> Promise:
            logger.debug("Tearing down %r with %r", target.component, options)
            teardown = resolver.deferred()
            invoke_all(teardown, FacetRecord(target, options), resolver, strict=True)
            return teardown

        self._registry.register(destroy_component)
        promise.resolve()
