"""Dispatch table merging the factories, facets and proxies of a context's plugins."""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from facetwire.errors import WiringError
from facetwire.plugin import FacetProvider, FactoryProvider, Plugin, ProxyProvider
from facetwire.proxy import Proxy, object_proxy

__all__ = ["PluginRegistry"]

logger = logging.getLogger(__name__)


class PluginRegistry:
    """Registry for plugin contributions, looked up by keyword, verb or order.

    Example:
        >>> registry = PluginRegistry()
        >>> registry.register(base_plugin(ready, destroyed))
        >>> registry.factory_for({"literal": 42})
        ('literal', <function literal_factory ...>)
    """

    def __init__(self):
        self._plugins: list[Plugin] = []
        self._factories: dict[str, FactoryProvider] = {}
        self._facets: dict[str, dict[str, FacetProvider]] = {}
        self._proxies: list[ProxyProvider] = []

    def register(self, plugin: Plugin):
        """Register a plugin's contributions.

        Args:
            plugin: The descriptor returned by a plugin initializer.

        Raises:
            WiringError: If a factory keyword, or a facet name and verb pair, is
                already provided by another registered plugin.
        """
        conflicts = [keyword for keyword in plugin.factories if keyword in self._factories]
        conflicts += [
            f"{facet_name}.{verb}"
            for facet_name, providers in plugin.facets.items()
            for verb in providers
            if verb in self._facets.get(facet_name, {})
        ]
        if conflicts:
            raise WiringError(f"Plugin contributions {conflicts} are already registered")

        self._plugins.append(plugin)
        self._factories.update(plugin.factories)
        for facet_name, providers in plugin.facets.items():
            self._facets.setdefault(facet_name, {}).update(providers)
        self._proxies.extend(plugin.proxies)

    @property
    def plugins(self) -> list[Plugin]:
        return list(self._plugins)

    @property
    def facet_names(self) -> set[str]:
        return set(self._facets)

    def factory_for(self, spec: Any) -> Optional[tuple[str, FactoryProvider]]:
        """Find the factory selected by a spec.

        Returns:
            The keyword and factory of the first registered factory whose keyword
            appears in ``spec``, or ``None`` if ``spec`` selects no factory.
        """
        if not isinstance(spec, Mapping):
            return None
        return next(
            (
                (keyword, factory)
                for keyword, factory in self._factories.items()
                if keyword in spec
            ),
            None,
        )

    def facets_for(self, verb: str) -> list[tuple[str, FacetProvider]]:
        """List the facet providers serving a lifecycle verb, as (facet name, provider) pairs."""
        return [
            (facet_name, providers[verb])
            for facet_name, providers in self._facets.items()
            if verb in providers
        ]

    def proxy_for(self, target: Any, spec: Any = None) -> Proxy:
        """Select a proxy for ``target``, falling back to :func:`object_proxy`."""
        for provider in self._proxies:
            proxy = provider(target, spec)
            if proxy is not None:
                return proxy
        logger.debug("No proxy provider claimed %r; using plain-object proxy", target)
        return object_proxy(target, spec)
