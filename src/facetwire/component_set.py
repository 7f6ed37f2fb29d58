"""Container for built components with optional parent lookup.

Provides hierarchical component lookup, allowing a child context's component set to
reach the components of its parent context while keeping its own components to
itself. A child may reference its parent's components, but not vice versa.
"""

from typing import Iterator, Optional

from facetwire.domain import ComponentHandle


class ComponentSet:
    """Collection of component handles with hierarchical lookup.

    Attributes:
        components: Dictionary mapping component names to ComponentHandle instances.
        _parent: Optional parent ComponentSet for hierarchical lookup.

    Example:
        >>> app_components = ComponentSet({"db": db_handle})
        >>> view_components = ComponentSet({"view": view_handle}, app_components)
        >>> view_components["db"]  # Found in parent
        >>> view_components["view"]  # Found locally
    """

    def __init__(
        self,
        components: dict[str, ComponentHandle],
        parent: Optional["ComponentSet"] = None,
    ):
        self.components = components
        self._parent = parent

    @property
    def parent(self) -> Optional["ComponentSet"]:
        return self._parent

    def __getitem__(self, item: str) -> ComponentHandle:
        if item in self.components:
            return self.components[item]
        if self._parent is not None and item in self._parent:
            return self._parent[item]
        raise KeyError(item)

    def __contains__(self, item: str) -> bool:
        return item in self.components or (self._parent is not None and item in self._parent)

    def __iter__(self) -> Iterator[str]:
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.components)
