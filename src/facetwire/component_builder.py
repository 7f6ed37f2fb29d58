"""Drive a single component through its lifecycle.

This module provides the ComponentBuilder class, which creates a component from
its spec, selects a proxy for it, and then applies the facets named in the spec
one lifecycle verb at a time: every facet serving ``configure`` settles before any
facet serving ``initialize`` starts, and so on through ``ready``.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from facetwire.domain import ComponentHandle, FacetRecord
from facetwire.plugin import LIFECYCLE, Resolver
from facetwire.promise import Promise, resolved
from facetwire.registry import PluginRegistry

__all__ = ["ComponentBuilder"]

logger = logging.getLogger(__name__)


class ComponentBuilder:
    """Build ready :class:`ComponentHandle` instances from component specs."""

    def __init__(self, registry: PluginRegistry, resolver: Resolver):
        self._registry = registry
        self._resolver = resolver

    def build(self, name: str, spec: Any, created: Optional[Promise] = None) -> Promise:
        """Create, configure and initialize a component.

        Args:
            name: The component's name, for diagnostics.
            spec: The component spec. Keys naming a registered facet are applied as
                facets; the remainder of the spec creates the component.
            created: Settled with the bare component as soon as it has been created,
                before any facet is applied, or with the error creating it.

        Returns:
            A promise for the ready :class:`ComponentHandle`, rejected with the first
            error raised while creating the component or applying its facets.
        """
        creation_spec, facet_options = self._split(spec)
        logger.debug("Creating component '%s'", name)

        creation = self._resolver.resolve(creation_spec)
        if created is not None:
            creation.then(created.resolve, created.reject)

        return creation.then(
            lambda component: self._run_lifecycle(name, component, creation_spec, facet_options)
        )

    def _split(self, spec: Any) -> tuple[Any, dict[str, Any]]:
        if not isinstance(spec, Mapping):
            return spec, {}

        facet_names = self._registry.facet_names
        creation_spec = {k: v for k, v in spec.items() if k not in facet_names}
        facet_options = {k: v for k, v in spec.items() if k in facet_names}
        return creation_spec, facet_options

    def _run_lifecycle(
        self, name: str, component: Any, spec: Any, facet_options: dict[str, Any]
    ) -> Promise:
        handle = ComponentHandle(component, self._registry.proxy_for(component, spec))

        phase = resolved()
        for verb in LIFECYCLE[1:]:
            phase = phase.then(self._phase(name, verb, handle, facet_options))
        return phase.then(lambda _: handle)

    def _phase(self, name: str, verb: str, handle: ComponentHandle, facet_options: dict[str, Any]):
        def apply_facets(_previous: Any) -> Promise:
            logger.debug("Component '%s': %s", name, verb)
            applications = []
            for facet_name, provider in self._registry.facets_for(verb):
                if facet_name not in facet_options:
                    continue
                application = self._resolver.deferred()
                applications.append(application)
                try:
                    provider(application, FacetRecord(handle, facet_options[facet_name]), self._resolver)
                except Exception as e:
                    application.reject(e)
            return self._resolver.when_all(applications)

        return apply_facets
