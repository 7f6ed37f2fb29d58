from typing import Any, Iterable

import pytest

from facetwire.domain import ComponentHandle, is_ref, reference_name
from facetwire.errors import UnresolvedReferenceError
from facetwire.promise import Promise, rejected, resolved, when_all
from facetwire.proxy import object_proxy


class StubResolver:
    """Resolver that returns promises verbatim, looks references up in a dict and
    takes everything else literally."""

    def __init__(self, components: dict[str, Any] = None):
        self.components = components or {}
        self.resolved_specs: list[Any] = []

    def resolve(self, spec: Any) -> Promise:
        self.resolved_specs.append(spec)
        if isinstance(spec, Promise):
            return spec
        if is_ref(spec):
            return self.resolve_ref(spec)
        return resolved(spec)

    def resolve_ref(self, reference: Any) -> Promise:
        name = reference_name(reference)
        if name not in self.components:
            return rejected(UnresolvedReferenceError(name))
        component = self.components[name]
        return component if isinstance(component, Promise) else resolved(component)

    def deferred(self) -> Promise:
        return Promise()

    def when_all(self, promises: Iterable[Promise]) -> Promise:
        return when_all(promises)


@pytest.fixture
def resolver() -> StubResolver:
    return StubResolver()


@pytest.fixture
def handle():
    def make(component: Any) -> ComponentHandle:
        return ComponentHandle(component, object_proxy(component))

    return make


@pytest.fixture
def make_resolver():
    return StubResolver
