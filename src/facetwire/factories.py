"""Factories creating components from ``literal`` and ``prototype`` specs."""

import logging
from typing import Any, Mapping

from facetwire.delegation import beget
from facetwire.plugin import Resolver
from facetwire.promise import Promise

__all__ = ["literal_factory", "prototype_factory"]

logger = logging.getLogger(__name__)


def literal_factory(promise: Promise, spec: Mapping[str, Any], resolver: Resolver = None) -> None:
    """Resolve ``promise`` with ``spec["literal"]``, verbatim.

    The value is not resolved any further, so it may contain keys that would
    otherwise select a factory, or nodes shaped like references:

        >>> spec = {"literal": {"prototype": "not-a-reference"}}

    creates the dictionary ``{"prototype": "not-a-reference"}`` rather than a
    delegate of a component named ``not-a-reference``.
    """
    promise.resolve(spec["literal"])


def prototype_factory(promise: Promise, spec: Mapping[str, Any], resolver: Resolver) -> None:
    """Resolve ``promise`` with a new child delegating to the referenced component.

    A failure to resolve the reference rejects ``promise`` with the original error.
    """
    reference = spec["prototype"]

    def create_child(parent: Any) -> None:
        logger.debug("Creating delegate of %r", reference)
        promise.resolve(beget(parent))

    resolver.resolve_ref(reference).then(create_child, promise.reject)
