from collections import ChainMap
from types import SimpleNamespace

from facetwire.proxy import MappingProxy, ObjectProxy, object_proxy


class Counter:
    def __init__(self):
        self.count = 0

    def add(self, *amounts):
        self.count += sum(amounts)
        return self.count


def test_set_mutates_object_and_returns_value():
    target = SimpleNamespace()
    proxy = object_proxy(target)

    assert proxy.set("n", 5) == 5
    assert target.n == 5
    assert proxy.get("n") == 5


def test_get_of_missing_property_is_none():
    assert object_proxy(SimpleNamespace()).get("missing") is None
    assert object_proxy({}).get("missing") is None


def test_invoke_function_with_target_as_receiver():
    target = SimpleNamespace(total=0)
    received = []

    def method(self, a, b):
        received.append((self, a, b))
        return a + b

    assert object_proxy(target).invoke(method, [1, 2]) == 3
    assert received == [(target, 1, 2)]


def test_invoke_by_name_calls_method():
    counter = Counter()

    assert object_proxy(counter).invoke("add", [1, 2]) == 3
    assert counter.count == 3


def test_invoke_bound_method_passes_args_only():
    counter = Counter()

    object_proxy(SimpleNamespace()).invoke(counter.add, (4,))

    assert counter.count == 4


def test_mapping_targets_are_proxied_itemwise():
    target = {}
    proxy = object_proxy(target)

    assert isinstance(proxy, MappingProxy)
    proxy.set("name", "x")
    assert target == {"name": "x"}


def test_mapping_invoke_by_name_applies_stored_function_to_target():
    calls = []
    target = {"start": lambda this, *args: calls.append((this, args))}

    object_proxy(target).invoke("start", [1, 2])

    assert calls == [(target, (1, 2))]


def test_invoke_by_name_applies_instance_attribute_function_to_target():
    def start(this, *args):
        this.started = args

    target = SimpleNamespace(start=start)

    object_proxy(target).invoke("start", [5])

    assert target.started == (5,)


def test_chain_map_child_receives_inherited_function():
    def setup(this):
        this["ready"] = True

    parent = {"setup": setup}
    child = ChainMap({}, parent)

    object_proxy(child).invoke("setup")

    assert child["ready"] is True
    assert "ready" not in parent


def test_invoke_by_name_passes_builtins_args_only():
    items = []
    proxy = object_proxy({"add": items.append})

    proxy.invoke("add", ["x"])

    assert items == ["x"]


def test_chain_map_children_write_locally():
    parent = {"x": 1}
    child = ChainMap({}, parent)

    object_proxy(child).set("x", 2)

    assert parent == {"x": 1}
    assert child["x"] == 2


def test_objects_get_object_proxy():
    assert isinstance(object_proxy(Counter()), ObjectProxy)
