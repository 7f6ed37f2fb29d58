from types import SimpleNamespace

from facetwire.errors import UnresolvedReferenceError
from facetwire.factories import literal_factory, prototype_factory
from facetwire.promise import Promise


def test_literal_factory_resolves_value_verbatim(resolver):
    value = {"a": 1, "other": {"$ref": "not-resolved"}}
    promise = Promise()

    literal_factory(promise, {"literal": value}, resolver)

    assert promise.value is value
    assert resolver.resolved_specs == []


def test_literal_factory_keeps_factory_keywords():
    promise = Promise()

    literal_factory(promise, {"literal": {"prototype": "x"}})

    assert promise.value == {"prototype": "x"}


def test_prototype_factory_creates_delegating_child(make_resolver):
    parent = SimpleNamespace(x=1)
    resolver = make_resolver({"parent": parent})
    promise = Promise()

    prototype_factory(promise, {"prototype": "parent"}, resolver)
    child = promise.value

    assert child.x == 1
    parent.x = 2
    assert child.x == 2
    assert "x" not in vars(child)


def test_prototype_factory_accepts_reference_nodes(make_resolver):
    resolver = make_resolver({"parent": {"x": 1}})
    promise = Promise()

    prototype_factory(promise, {"prototype": {"$ref": "parent"}}, resolver)

    assert promise.value["x"] == 1


def test_prototype_factory_waits_for_parent(make_resolver):
    pending_parent = Promise()
    resolver = make_resolver({"parent": pending_parent})
    promise = Promise()

    prototype_factory(promise, {"prototype": "parent"}, resolver)
    assert promise.is_pending

    pending_parent.resolve(SimpleNamespace(x=5))
    assert promise.value.x == 5


def test_prototype_factory_propagates_resolution_error_unwrapped(make_resolver):
    resolver = make_resolver()
    promise = Promise()

    prototype_factory(promise, {"prototype": "nobody"}, resolver)

    assert promise.is_rejected
    assert type(promise.value) is UnresolvedReferenceError
    assert promise.value.name == "nobody"


def test_prototype_factory_rejects_with_the_same_error_object(make_resolver):
    error = RuntimeError("parent failed")
    failed_parent = Promise()
    failed_parent.reject(error)
    promise = Promise()

    prototype_factory(promise, {"prototype": "parent"}, make_resolver({"parent": failed_parent}))

    assert promise.value is error
