"""The base plugin: literal and prototype factories, the properties, init and
destroy facets, and the plain-object proxy.
"""

from dataclasses import dataclass, fields
from functools import partial
from typing import Any, Mapping, Optional

from facetwire.destroy import DestroyRegistry
from facetwire.errors import ConfigurationError
from facetwire.facets import DestroyFacet, init_facet, properties_facet
from facetwire.factories import literal_factory, prototype_factory
from facetwire.plugin import CONFIGURE, INITIALIZE, READY, Plugin
from facetwire.promise import Promise
from facetwire.proxy import object_proxy

__all__ = ["PluginOptions", "base_plugin"]


@dataclass(frozen=True)
class PluginOptions:
    """Options recognised by the base plugin.

    Attributes:
        strict_invocation: Reject invocations of names that are not callable with
            :class:`~facetwire.errors.MissingMethodError`, instead of leaving them
            pending.
    """

    strict_invocation: bool = False

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "PluginOptions":
        """Build options from the mapping a host passes to plugin initializers.

        Raises:
            ConfigurationError: If the mapping contains unknown keys or values of
                the wrong type.
        """
        options = dict(options or {})
        known = {f.name for f in fields(cls)}

        extraneous = options.keys() - known
        if extraneous:
            raise ConfigurationError(f"Unexpected items {extraneous} in plugin options")

        strict_invocation = options.get("strict_invocation", False)
        if not isinstance(strict_invocation, bool):
            raise ConfigurationError(
                f"strict_invocation must be a bool, not {strict_invocation!r}"
            )

        return cls(strict_invocation=strict_invocation)


def base_plugin(
    ready: Promise,
    destroyed: Promise,
    options: Optional[Mapping[str, Any]] = None,
    *,
    registry: Optional[DestroyRegistry] = None,
) -> Plugin:
    """Initialise the base plugin for one context.

    Args:
        ready: Signal resolved once the context has been fully built.
        destroyed: Signal resolved when the context is destroyed; triggers the
            teardowns registered by the ``destroy`` facet.
        options: Plugin options, see :class:`PluginOptions`.
        registry: The context's teardown registry. A new one is created if omitted.

    Returns:
        The plugin descriptor.
    """
    plugin_options = PluginOptions.from_mapping(options)
    strict = plugin_options.strict_invocation
    registry = registry if registry is not None else DestroyRegistry()

    return Plugin(
        factories={
            "literal": literal_factory,
            "prototype": prototype_factory,
        },
        facets={
            # Sets properties on components after creation.
            "properties": {CONFIGURE: properties_facet},
            # Invokes methods on components once they have been configured.
            "init": {INITIALIZE: partial(init_facet, strict=strict)},
            # Registers methods to invoke when the enclosing context is destroyed.
            "destroy": {READY: DestroyFacet(registry)},
        },
        proxies=[object_proxy],
        teardown=registry.bind(destroyed),
    )
