"""Delegation links: children that fall back to a parent for anything they lack.

A delegating child is not a copy. It stores only its own overrides; every lookup
that misses locally is answered by the parent at the time of the lookup, so later
changes to the parent remain visible through the child.
"""

import inspect
import types
from collections import ChainMap
from collections.abc import Mapping
from typing import Any, Optional

__all__ = ["Delegate", "beget", "prototype_of"]


class Delegate:
    """An object whose missing attributes are looked up on a parent object.

    The parent is held in a slot, so ``vars(child)`` lists only local overrides.
    Methods found on the parent are re-bound to the child, so that they read and
    write the child's state rather than the parent's.

    Example:
        >>> parent = SimpleNamespace(x=1)
        >>> child = Delegate(parent)
        >>> child.x
        1
        >>> parent.x = 2
        >>> child.x
        2
        >>> vars(child)
        {}
    """

    __slots__ = ("_parent", "__dict__", "__weakref__")

    def __init__(self, parent: Any):
        self._parent = parent

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup misses.
        if name == "_parent" or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)

        parent = self._parent
        value = getattr(parent, name)
        if inspect.ismethod(value) and value.__self__ is parent:
            return types.MethodType(value.__func__, self)
        return value

    def __dir__(self):
        return sorted(set(dir(self._parent)) | set(self.__dict__))

    def __repr__(self) -> str:
        return f"Delegate({self._parent!r}, {self.__dict__!r})"


def beget(parent: Any) -> Any:
    """Create a new child delegating to ``parent``.

    Mappings get a :class:`~collections.ChainMap` child whose writes land in a
    fresh local map; any other object gets a :class:`Delegate`. No constructor
    of the parent's type is invoked.
    """
    if isinstance(parent, Mapping):
        return ChainMap({}, parent)
    return Delegate(parent)


def prototype_of(child: Any) -> Optional[Any]:
    """Return the object ``child`` delegates to, or ``None`` if it delegates to nothing."""
    if isinstance(child, Delegate):
        return object.__getattribute__(child, "_parent")
    if isinstance(child, ChainMap) and len(child.maps) > 1:
        return child.maps[1] if len(child.maps) == 2 else child.parents
    return None
