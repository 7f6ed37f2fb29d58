import pytest

from facetwire.component_set import ComponentSet
from facetwire.domain import ComponentHandle
from facetwire.errors import DependencyError, UnresolvedReferenceError
from facetwire.manifest import ContextManifestBuilder, collect_references
from facetwire.proxy import object_proxy


FACETS = {"properties", "init", "destroy"}


def make_parent(**components) -> ComponentSet:
    return ComponentSet(
        {name: ComponentHandle(value, object_proxy(value)) for name, value in components.items()}
    )


def test_collect_references_from_nested_specs():
    spec = {
        "prototype": "base",
        "properties": {"db": {"$ref": "db"}, "caches": [{"$ref": "l1"}, {"$ref": "l2"}]},
        "init": {"start": {"$ref": "clock"}},
    }

    assert collect_references(spec) == {"base", "db", "l1", "l2", "clock"}


def test_literal_payloads_are_not_walked():
    spec = {"literal": {"$ref": "ignored", "prototype": "ignored"}, "init": {"$ref": "x"}}

    assert collect_references(spec) == {"x"}


def test_build_order_puts_components_needed_for_creation_first():
    manifest = ContextManifestBuilder(None, FACETS).build(
        {
            "view": {"prototype": "model", "properties": {"db": {"$ref": "db"}}},
            "model": {"settings": {"$ref": "config"}},
            "config": {"literal": {}},
            "db": {"literal": {}},
        }
    )

    assert manifest.build_order.index("config") < manifest.build_order.index("model")
    assert manifest.build_order.index("model") < manifest.build_order.index("view")
    assert manifest.references["view"] == frozenset({"model", "db"})
    assert manifest.dependencies["view"] == frozenset({"model"})


def test_facet_references_may_be_mutual():
    manifest = ContextManifestBuilder(None, FACETS).build(
        {
            "view": {"literal": {}, "properties": {"controller": {"$ref": "controller"}}},
            "controller": {"literal": {}, "properties": {"view": {"$ref": "view"}}},
        }
    )

    assert manifest.build_order == ["view", "controller"]
    assert manifest.references["view"] == frozenset({"controller"})
    assert manifest.dependencies["view"] == frozenset()


def test_unconstrained_components_keep_declaration_order():
    manifest = ContextManifestBuilder(None).build({"c": 1, "a": 2, "b": 3})

    assert manifest.build_order == ["c", "a", "b"]


def test_creation_reference_cycle_detected():
    with pytest.raises(DependencyError, match="Unresolvable dependencies"):
        ContextManifestBuilder(None, FACETS).build(
            {"a": {"prototype": "b"}, "b": {"$ref": "a", "init": "start"}}
        )


def test_self_prototype_detected():
    with pytest.raises(DependencyError, match="Unresolvable dependencies: {'a'}"):
        ContextManifestBuilder(None, FACETS).build({"a": {"prototype": "a"}})


def test_missing_facet_reference_raises():
    with pytest.raises(UnresolvedReferenceError, match="Unresolved reference 'db'"):
        ContextManifestBuilder(None, FACETS).build(
            {"a": {"literal": {}, "properties": {"db": {"$ref": "db"}}}}
        )


def test_missing_reference_raises():
    with pytest.raises(UnresolvedReferenceError, match="Unresolved reference 'nowhere'"):
        ContextManifestBuilder(None).build({"a": {"$ref": "nowhere"}})


def test_references_to_parent_are_required_from_parent():
    manifest = ContextManifestBuilder(make_parent(db="db"), FACETS).build(
        {"service": {"properties": {"db": {"$ref": "db"}}}}
    )

    assert manifest.required_from_parent == frozenset({"db"})
    assert manifest.build_order == ["service"]


def test_raises_if_child_component_aliases_parent():
    with pytest.raises(
        DependencyError,
        match=r"Component names .* conflict with components in parent context",
    ):
        ContextManifestBuilder(make_parent(it=1)).build({"it": 2})


def test_reference_beside_facets_is_collected():
    manifest = ContextManifestBuilder(make_parent(obj=object()), FACETS).build(
        {"configured": {"$ref": "obj", "properties": {"name": "x"}, "init": "setup"}}
    )

    assert manifest.references["configured"] == frozenset({"obj"})
    assert manifest.required_from_parent == frozenset({"obj"})


def test_reference_beside_facets_must_exist():
    with pytest.raises(UnresolvedReferenceError, match="'obj'"):
        ContextManifestBuilder(None, {"properties"}).build(
            {"configured": {"$ref": "obj", "properties": {"name": "x"}}}
        )
