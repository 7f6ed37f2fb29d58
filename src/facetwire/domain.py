"""Domain models used throughout the framework."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from facetwire.proxy import Proxy

__all__ = ["ComponentHandle", "FacetRecord", "REF_KEY", "ref", "is_ref", "reference_name"]


REF_KEY = "$ref"
"""Key marking a reference node, e.g. ``{"$ref": "database"}``."""


@dataclass(frozen=True)
class ComponentHandle:
    """A constructed component together with the proxy used to manipulate it.

    Attributes:
        component: The constructed object.
        proxy: The capability adapter selected for the object.
    """

    component: Any
    proxy: Proxy


@dataclass(frozen=True)
class FacetRecord:
    """The input to a single facet application.

    Attributes:
        target: The component the facet applies to.
        options: Either a single method or property name, or a mapping from names
            to argument/value specs.
    """

    target: ComponentHandle
    options: Union[str, Mapping[str, Any]]


def ref(name: str) -> dict[str, str]:
    """Build a reference node naming another component."""
    return {REF_KEY: name}


def is_ref(spec: Any) -> bool:
    return isinstance(spec, Mapping) and len(spec) == 1 and REF_KEY in spec


def reference_name(reference: Any) -> str:
    """Extract the component name from a bare name or a reference node.

    Raises:
        TypeError: If ``reference`` is neither.
    """
    if isinstance(reference, str):
        return reference
    if is_ref(reference):
        return reference[REF_KEY]
    raise TypeError(f"{reference!r} is not a reference")
