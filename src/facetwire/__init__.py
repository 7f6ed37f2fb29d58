"""Facetwire: asynchronous object-graph wiring with pluggable lifecycles.

Facetwire builds live components from declarative specs. Each component is created
by a factory, then driven through lifecycle facets: ``properties`` configures it,
``init`` initializes it, and ``destroy`` arranges for its teardown when the owning
context is destroyed. Dependencies between components are expressed as references
and resolved through promises, so components that do not depend on each other are
built concurrently, in a single thread, without locks.

Key Features:
    - Pluggable factories, facets and proxies, contributed by plugins
    - Literal values that bypass spec interpretation
    - Prototype delegation: children that defer to a parent, not copies of it
    - Ordered, once-only teardown scoped to each context
    - Reference cycles and missing references detected before anything is built

Basic Usage:
    >>> from facetwire.builders import make_context
    >>>
    >>> context = make_context({
    ...     "config": {"literal": {"url": "sqlite://"}},
    ...     "database": {
    ...         "$ref": "connection",
    ...         "properties": {"settings": {"$ref": "config"}},
    ...         "init": "connect",
    ...         "destroy": "close",
    ...     },
    ... }, parent=app_context).value
    >>> db = context["database"]
    >>> context.destroy()

The framework consists of several core modules:
    - promise: Single-settlement promises and the ``when_all`` join
    - proxy: Capability adapters over components
    - factories, facets, invocation: The base plugin's strategies
    - destroy: Per-context teardown registry
    - plugin, registry, base: Extension points and the base plugin
    - context, builders: The reference host
    - errors: Framework-specific exceptions
"""
