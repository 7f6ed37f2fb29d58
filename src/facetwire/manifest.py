"""Static analysis of a context spec before any component is built.

This module walks component specs for the references they make and checks that
every reference can be satisfied by the context or its parent. References made
while creating a component (a ``prototype``, a top-level ``$ref``, a plain spec
embedding references) need the referenced component created first, so they order
the build, and cycles among them are reported up front as a
:class:`DependencyError`. References in facet options only need the referenced
component to exist, possibly still under construction, so they may be mutual.
"""

from collections import deque, defaultdict
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Collection, FrozenSet, Iterable, Optional

from facetwire.component_set import ComponentSet
from facetwire.domain import is_ref, reference_name
from facetwire.errors import DependencyError, UnresolvedReferenceError

__all__ = ["ContextManifest", "ContextManifestBuilder", "collect_references"]

OPAQUE_KEYWORDS = ("literal",)
REFERENCE_KEYWORDS = ("prototype",)


@dataclass(frozen=True)
class ContextManifest:
    """Description of how to build a :class:`~facetwire.context.Context`."""

    parent: Optional[ComponentSet]
    """Components available from the parent context, if any."""

    references: dict[str, FrozenSet[str]]
    """Names referenced anywhere in each component's spec."""

    dependencies: dict[str, FrozenSet[str]]
    """Names each component needs created before it can itself be created."""

    required_from_parent: FrozenSet[str]
    """Referenced names satisfied by the parent context."""

    build_order: list[str]
    """Order in which component construction is issued."""


def collect_references(
    spec: Any,
    opaque_keywords: Collection[str] = OPAQUE_KEYWORDS,
    reference_keywords: Collection[str] = REFERENCE_KEYWORDS,
) -> set[str]:
    """Collect the names of all components referenced within a spec.

    Args:
        spec: The spec to walk.
        opaque_keywords: Keywords whose values are taken verbatim and never walked.
        reference_keywords: Keywords whose values are references, bare names included.

    Returns:
        The set of referenced component names.

    Example:
        >>> collect_references({"prototype": "base", "properties": {"db": {"$ref": "db"}}})
        {'base', 'db'}
    """
    if is_ref(spec):
        return {reference_name(spec)}

    found: set[str] = set()
    if isinstance(spec, Mapping):
        for key, value in spec.items():
            if key in opaque_keywords:
                continue
            if key in reference_keywords and isinstance(value, str):
                found.add(value)
            else:
                found |= collect_references(value, opaque_keywords, reference_keywords)
    elif isinstance(spec, (list, tuple)):
        for item in spec:
            found |= collect_references(item, opaque_keywords, reference_keywords)
    return found


class _DependencyGraph:
    """
    Internal helper to represent and traverse a directed acyclic graph of component references.

    Each node corresponds to a component, and each edge indicates a reference to another
    component of the same context. The graph supports topological traversal, raising an
    error if cycles remain.
    """

    def __init__(self):
        self._dependencies: dict[str, set[str]] = defaultdict(set)

    def add_dependencies(self, dependee: str, dependencies: Iterable[str]):
        self._dependencies[dependee].update(dependencies)

    def traverse(self):
        """
        Perform a topological traversal of the dependency graph.

        Yields:
            Component names in an order where every referenced component is yielded
            before the components referencing it.

        Raises:
            DependencyError: If any cycles remain.
        """
        ready_to_build = deque(
            dependee
            for dependee, dependencies in self._dependencies.items()
            if len(dependencies) == 0
        )

        while len(ready_to_build) > 0:
            next_item = ready_to_build.popleft()
            yield next_item

            self._remove_dependency(next_item, ready_to_build)

        if len(self._dependencies) > 0:
            raise DependencyError(
                f"Unresolvable dependencies: {set(self._dependencies.keys())}"
            )

    def _remove_dependency(self, next_item, ready_to_build):
        del self._dependencies[next_item]

        for dependee, dependencies in self._dependencies.items():
            if len(dependencies) > 0:
                dependencies.discard(next_item)
                if len(dependencies) == 0:
                    ready_to_build.append(dependee)


class ContextManifestBuilder:
    """Resolve a context spec into a :class:`ContextManifest`."""

    def __init__(
        self, parent: Optional[ComponentSet], facet_names: Collection[str] = frozenset()
    ):
        self._parent = parent
        self._facet_names = facet_names

    def build(self, specs: Mapping[str, Any]) -> ContextManifest:
        """Build a ContextManifest from a mapping of component names to specs.

        Raises:
            DependencyError: If component names conflict with the parent context, or
                if references form a cycle.
            UnresolvedReferenceError: If a reference names no component of the
                context or its parent.
        """
        self._validate_compatibility_with_parent(specs)

        dependencies = {}
        references = {}
        for name, spec in specs.items():
            creation_spec, facet_options = self._split(spec)
            dependencies[name] = frozenset(collect_references(creation_spec))
            references[name] = dependencies[name] | collect_references(facet_options)
        required_from_parent = self._get_required_from_parent(specs, references)

        dependency_graph = _DependencyGraph()
        for name, needed in dependencies.items():
            dependency_graph.add_dependencies(
                name,
                (
                    needed_name
                    for needed_name in needed
                    if needed_name not in required_from_parent
                ),
            )

        return ContextManifest(
            self._parent,
            references,
            dependencies,
            required_from_parent,
            list(dependency_graph.traverse()),
        )

    def _split(self, spec: Any) -> tuple[Any, list[Any]]:
        if not isinstance(spec, Mapping):
            return spec, []

        creation_spec = {k: v for k, v in spec.items() if k not in self._facet_names}
        facet_options = [v for k, v in spec.items() if k in self._facet_names]
        return creation_spec, facet_options

    def _get_required_from_parent(
        self, specs: Mapping[str, Any], references: dict[str, FrozenSet[str]]
    ) -> FrozenSet[str]:
        required_from_parent = set()
        for name, referenced in references.items():
            for referenced_name in sorted(referenced):
                if referenced_name in specs:
                    continue
                if self._parent is not None and referenced_name in self._parent:
                    required_from_parent.add(referenced_name)
                else:
                    raise UnresolvedReferenceError(referenced_name)
        return frozenset(required_from_parent)

    def _validate_compatibility_with_parent(self, specs: Mapping[str, Any]):
        if self._parent is None:
            return

        conflicts = [name for name in specs if name in self._parent]
        if conflicts:
            raise DependencyError(
                f"Component names {conflicts} conflict with components in parent context"
            )
