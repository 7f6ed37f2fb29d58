"""Extension points through which plugins contribute factories, facets and proxies.

A plugin is a :class:`PluginInitializer`: the host calls it once per context with
the context's ``ready`` and ``destroyed`` signals and the plugin options, and it
returns a :class:`Plugin` descriptor synchronously. The host merges descriptors
into a :class:`~facetwire.registry.PluginRegistry` and dispatches to them by
keyword (factories), by lifecycle verb (facets) or in order (proxies).
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Protocol

from facetwire.domain import FacetRecord
from facetwire.promise import Promise
from facetwire.proxy import Proxy

__all__ = [
    "CREATE",
    "CONFIGURE",
    "INITIALIZE",
    "READY",
    "LIFECYCLE",
    "Resolver",
    "FactoryProvider",
    "FacetProvider",
    "ProxyProvider",
    "Plugin",
    "PluginInitializer",
]


CREATE = "create"
CONFIGURE = "configure"
INITIALIZE = "initialize"
READY = "ready"

LIFECYCLE = (CREATE, CONFIGURE, INITIALIZE, READY)
"""Lifecycle verbs in the order the host drives every component through them.

``create`` is served by factories; the remaining verbs by facets.
"""


class Resolver(Protocol):
    """Resolution services the host hands to every factory and facet."""

    def resolve(self, spec: Any) -> Promise:
        """Resolve an arbitrary spec with the host's generic rules."""
        ...

    def resolve_ref(self, reference: Any) -> Promise:
        """Resolve a reference to a component, waiting for it if it is not ready yet."""
        ...

    def deferred(self) -> Promise:
        ...

    def when_all(self, promises: Iterable[Promise]) -> Promise:
        ...


class FactoryProvider(Protocol):
    def __call__(self, promise: Promise, spec: Any, resolver: Resolver) -> None:
        ...


class FacetProvider(Protocol):
    def __call__(self, promise: Promise, facet: FacetRecord, resolver: Resolver) -> None:
        ...


class ProxyProvider(Protocol):
    def __call__(self, target: Any, spec: Any) -> Optional[Proxy]:
        ...


@dataclass(frozen=True)
class Plugin:
    """What a plugin contributes to a context.

    Attributes:
        factories: Factory providers keyed by the spec keyword that selects them.
        facets: Facet providers keyed by facet name, then by lifecycle verb.
        proxies: Proxy providers, tried in order.
        teardown: Optional promise settling once the plugin's teardown for the
            context has finished.
    """

    factories: Mapping[str, FactoryProvider] = field(default_factory=dict)
    facets: Mapping[str, Mapping[str, FacetProvider]] = field(default_factory=dict)
    proxies: list[ProxyProvider] = field(default_factory=list)
    teardown: Optional[Promise] = None


class PluginInitializer(Protocol):
    def __call__(
        self, ready: Promise, destroyed: Promise, options: Optional[Mapping[str, Any]]
    ) -> Plugin:
        ...
