import pytest

from lazycrate import LazyNamespace
from lazycrate.attributes import produced_names


def test_producer_runs_once_per_name():
    calls = []

    def produce(name):
        calls.append(name)
        return name.upper()

    ns = LazyNamespace(produce)

    assert ns.alpha == "ALPHA"
    assert ns.alpha == "ALPHA"
    assert ns["alpha"] == "ALPHA"
    assert ns.beta == "BETA"
    assert calls == ["alpha", "beta"]
    assert produced_names(ns) == ("alpha", "beta")


def test_mapping_producer_limits_names():
    ns = LazyNamespace({"one": lambda: 1})

    assert ns.one == 1
    with pytest.raises(AttributeError):
        _ = ns.two
    assert getattr(ns, "two", None) is None


def test_dunder_names_never_reach_producer():
    calls = []
    ns = LazyNamespace(lambda name: calls.append(name))

    with pytest.raises(AttributeError):
        _ = ns.__wrapped__
    assert not hasattr(ns, "__deepcopy__")
    assert calls == []


def test_namespace_is_read_only():
    ns = LazyNamespace(lambda name: name)

    with pytest.raises(AttributeError):
        ns.value = 1
    with pytest.raises(AttributeError):
        del ns.value


def test_item_access_requires_string():
    ns = LazyNamespace(lambda name: name)

    with pytest.raises(TypeError):
        _ = ns[1]


def test_rejects_non_callable_producer():
    with pytest.raises(TypeError):
        LazyNamespace(42)


@pytest.mark.asyncio
async def test_awaiting_namespace_returns_itself_without_producing():
    calls = []
    ns = LazyNamespace(lambda name: calls.append(name))

    result = await ns

    assert result is ns
    assert calls == []

