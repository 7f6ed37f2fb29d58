"""High level entry points for constructing contexts."""

from typing import Any, Mapping, Optional, Sequence

from facetwire.base import base_plugin
from facetwire.context import Context, ContextBuilder, PluginSpec
from facetwire.promise import Promise

__all__ = ["make_context"]


def make_context(
    specs: Mapping[str, Any],
    plugins: Optional[Sequence[PluginSpec]] = None,
    parent: Optional[Context] = None,
) -> Promise:
    """Construct a fully wired :class:`Context` from component specs.

    Args:
        specs: Mapping of component names to component specs.
        plugins: Plugin initializers, each optionally paired with its options as an
            ``(initializer, options)`` tuple. Defaults to the base plugin alone.
        parent: An optional parent context whose components may be referenced.

    Returns:
        A promise for the ready :class:`Context`. It can be awaited from a running
        asyncio loop.

    Raises:
        Nothing directly; every failure rejects the returned promise, e.g. with
        :class:`~facetwire.errors.UnresolvedReferenceError` for references to
        unknown components or :class:`~facetwire.errors.DependencyError` for
        reference cycles.

    Example:
        >>> context = make_context({
        ...     "settings": {"literal": {"volume": 11}},
        ...     "overrides": {"prototype": "settings", "properties": {"muted": True}},
        ... }).value
        >>> context["overrides"]["volume"], context["overrides"]["muted"]
        (11, True)
    """
    builder = ContextBuilder(plugins if plugins is not None else [base_plugin], parent)
    return builder.build(specs)
