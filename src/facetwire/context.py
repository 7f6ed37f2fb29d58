"""
Reference host resolving a mapping of component specs into a live context.

This module defines the :class:`ContextBuilder`, which initialises the context's
plugins, analyses the specs into a :class:`~facetwire.manifest.ContextManifest`,
and then issues every component's construction, in dependency order, through a
:class:`ComponentBuilder`. Components resolve concurrently. A reference resolves
as soon as the referenced component has been created, before its facets have
been applied, so components may refer to each other from their facet options.

Specs use a deliberately small grammar:

    - ``{"$ref": "name"}`` refers to another component;
    - a mapping containing a registered factory keyword (``literal``,
      ``prototype``, ...) is created by that factory;
    - any other mapping, list or tuple is resolved element-wise;
    - anything else stands for itself.

At the top level, keys naming a registered facet (``properties``, ``init``,
``destroy``, ...) are applied to the created component rather than used to create it.

Contexts may be layered via a parent-child relationship: a child context may
reference components of its parent, but not vice versa.
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Sequence, Union

from facetwire.component_builder import ComponentBuilder
from facetwire.component_set import ComponentSet
from facetwire.domain import is_ref, reference_name
from facetwire.errors import UnresolvedReferenceError
from facetwire.manifest import ContextManifestBuilder
from facetwire.plugin import PluginInitializer
from facetwire.promise import Promise, rejected, resolved, when_all
from facetwire.registry import PluginRegistry

__all__ = ["Context", "ContextBuilder", "ContextResolver", "PluginSpec"]

logger = logging.getLogger(__name__)

PluginSpec = Union[PluginInitializer, tuple[PluginInitializer, Optional[Mapping[str, Any]]]]
"""A plugin initializer, optionally paired with the options to initialise it with."""


class Context:
    """
    A set of ready components built from a spec, plus the means to destroy them.

    Components are retrieved by name; names not found locally are looked up in the
    parent context, if there is one.
    """

    def __init__(self, components: ComponentSet, destroyed: Promise, teardown: Promise):
        self.components = components
        self._destroyed = destroyed
        self._teardown = teardown

    def __getitem__(self, name: str) -> Any:
        return self.components[name].component

    def __contains__(self, name: str) -> bool:
        return name in self.components

    @property
    def is_destroyed(self) -> bool:
        return not self._destroyed.is_pending

    def destroy(self) -> Promise:
        """Fire the context's ``destroyed`` signal.

        Returns:
            A promise settling once every plugin has finished tearing down, rejected
            with the first plugin's teardown error, if any. Destroying an already
            destroyed context does nothing further and returns the same promise.
        """
        if self._destroyed.is_pending:
            logger.debug("Destroying context with components %s", list(self.components))
            self._destroyed.resolve(self)
        return self._teardown


class ContextResolver:
    """Host resolution services for one context, as handed to factories and facets."""

    def __init__(self, registry: PluginRegistry, parent: Optional[ComponentSet] = None):
        self._registry = registry
        self._parent = parent
        self._slots: dict[str, Promise] = {}

    def expect(self, name: str) -> Promise:
        """Reserve a promise for the component called ``name``.

        The promise settles as soon as the component has been created, so references
        to it resolve to an instance that may still be under construction.
        """
        slot = self._slots[name] = Promise()
        return slot

    def resolve(self, spec: Any) -> Promise:
        if isinstance(spec, Promise):
            return spec
        if is_ref(spec):
            return self.resolve_ref(spec)

        selected = self._registry.factory_for(spec)
        if selected is not None:
            keyword, factory = selected
            created = self.deferred()
            try:
                factory(created, spec, self)
            except Exception as e:
                logger.debug("Factory '%s' raised: %r", keyword, e)
                created.reject(e)
            return created

        if isinstance(spec, Mapping):
            keys = list(spec)
            return self.when_all(self.resolve(spec[key]) for key in keys).then(
                lambda values: dict(zip(keys, values))
            )
        if isinstance(spec, (list, tuple)):
            return self.when_all(self.resolve(item) for item in spec)
        return resolved(spec)

    def resolve_ref(self, reference: Any) -> Promise:
        try:
            name = reference_name(reference)
        except TypeError as e:
            return rejected(e)

        if name in self._slots:
            return self._slots[name]
        if self._parent is not None and name in self._parent:
            return resolved(self._parent[name].component)
        return rejected(UnresolvedReferenceError(name))

    def deferred(self) -> Promise:
        return Promise()

    def when_all(self, promises: Iterable[Promise]) -> Promise:
        return when_all(promises)


class ContextBuilder:
    """Build :class:`Context` instances from component specs."""

    def __init__(self, plugins: Sequence[PluginSpec], parent: Optional[Context] = None):
        self._plugins = [
            plugin if isinstance(plugin, tuple) else (plugin, None) for plugin in plugins
        ]
        self._parent = parent

    def build(self, specs: Mapping[str, Any]) -> Promise:
        """Build every component described by ``specs``.

        Args:
            specs: Mapping of component names to component specs.

        Returns:
            A promise resolving with the ready :class:`Context`, or rejecting with
            the first error encountered. Components already configured when another
            fails are not rolled back.
        """
        parent_components = self._parent.components if self._parent is not None else None
        ready, destroyed = Promise(), Promise()

        try:
            registry = PluginRegistry()
            for initializer, options in self._plugins:
                registry.register(initializer(ready, destroyed, options))
            manifest = ContextManifestBuilder(
                parent_components, registry.facet_names
            ).build(specs)
        except Exception as e:
            logger.debug("Context could not be prepared: %r", e)
            return rejected(e)

        resolver = ContextResolver(registry, parent_components)
        component_builder = ComponentBuilder(registry, resolver)

        created = {name: resolver.expect(name) for name in manifest.build_order}
        handles = [
            component_builder.build(name, specs[name], created[name])
            for name in manifest.build_order
        ]

        components = ComponentSet({}, parent_components)
        teardown = when_all(
            plugin.teardown for plugin in registry.plugins if plugin.teardown is not None
        ).then(lambda _: None)
        context = Context(components, destroyed, teardown)

        def complete(built: list) -> Context:
            by_name = dict(zip(manifest.build_order, built))
            components.components.update((name, by_name[name]) for name in specs)
            ready.resolve(context)
            return context

        return when_all(handles).then(complete)
