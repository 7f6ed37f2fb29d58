"""Capability adapters exposing get/set/invoke over constructed components.

Facets and factories never touch a component's native shape directly: they go
through a :class:`Proxy`. Plugins may contribute proxy providers for specialised
targets; :func:`object_proxy` is the fallback for everything else.
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from typing import Any, Callable, Sequence, Union

__all__ = ["Proxy", "ObjectProxy", "MappingProxy", "object_proxy"]

Method = Union[str, Callable]


class Proxy(ABC):
    """Capability interface over a single target object."""

    def __init__(self, target: Any):
        self.target = target

    @abstractmethod
    def get(self, name: str) -> Any:
        """Read the named property, or ``None`` if the target has no such property."""

    @abstractmethod
    def set(self, name: str, value: Any) -> Any:
        """Write the named property and return ``value``."""

    def invoke(self, method: Method, args: Sequence[Any] = ()) -> Any:
        """Call a method on the target with positional arguments.

        Args:
            method: The name of a method, looked up with :meth:`get`, or the
                method itself. A plain function, such as one stored in a mapping
                or set as an instance attribute, is applied with the target as its
                receiver, i.e. ``method(target, *args)``. Bound methods and other
                callables already carry their receiver and get ``args`` alone.
            args: Ordered positional arguments.

        Returns:
            Whatever the method returns.
        """
        if isinstance(method, str):
            method = self.get(method)
        if inspect.isfunction(method):
            return method(self.target, *args)
        return method(*args)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.target!r})"


class ObjectProxy(Proxy):
    """Proxy over an object's attributes."""

    def get(self, name: str) -> Any:
        return getattr(self.target, name, None)

    def set(self, name: str, value: Any) -> Any:
        setattr(self.target, name, value)
        return value


class MappingProxy(Proxy):
    """Proxy over the items of a mutable mapping."""

    def get(self, name: str) -> Any:
        return self.target.get(name)

    def set(self, name: str, value: Any) -> Any:
        self.target[name] = value
        return value


def object_proxy(target: Any, spec: Any = None) -> Proxy:
    """Default proxy provider, claiming any target.

    Mutable mappings (including delegating ``ChainMap`` children) are proxied
    item-wise; everything else attribute-wise.
    """
    if isinstance(target, MutableMapping):
        return MappingProxy(target)
    return ObjectProxy(target)
