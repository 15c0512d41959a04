import pytest

from lazycrate import UNRESOLVED, SubContainer, UndiscoveredDependencyError, new_snooper
from lazycrate.snooper import Unresolved, snooped_keys


class FakeScope:
    def __init__(self, values):
        self.values = values
        self.calls = []

    def __getitem__(self, key):
        async def accessor(*args):
            self.calls.append((key, args))
            return self.values[key]

        return accessor


def test_records_each_distinct_key_in_order():
    container, _ = new_snooper()

    _ = container.beta
    _ = container.alpha
    _ = container["beta"]

    assert snooped_keys(container) == ("beta", "alpha")


def test_reads_return_the_placeholder():
    container, _ = new_snooper()

    assert container.config is UNRESOLVED
    assert container["db"] is UNRESOLVED


def test_nested_structural_reads_are_tolerated():
    container, _ = new_snooper()

    host = container.config.database.host
    port = container.config["database"]["port"]
    client = container.client.connect(timeout=3).session

    assert host is UNRESOLVED
    assert port is UNRESOLVED
    assert client is UNRESOLVED
    assert snooped_keys(container) == ("config", "client")


def test_membership_checks_are_recorded():
    container, _ = new_snooper()

    assert "prefix" in container
    assert 42 not in container
    assert list(container) == []
    assert snooped_keys(container) == ("prefix",)


def test_flag_guarded_reads_are_recorded():
    container, _ = new_snooper()

    cache = container.cache if container.use_cache else None

    assert cache is UNRESOLVED
    assert snooped_keys(container) == ("use_cache", "cache")


def test_mapping_methods_are_read_as_keys():
    container, _ = new_snooper()

    assert container.get("prefix") is UNRESOLVED
    assert snooped_keys(container) == ("get",)


def test_placeholder_behaves_inertly():
    assert Unresolved() is UNRESOLVED
    assert UNRESOLVED
    assert len(UNRESOLVED) == 0
    assert list(UNRESOLVED) == []
    assert str(UNRESOLVED) == "<unresolved>"
    assert f"{UNRESOLVED}" == "<unresolved>"


@pytest.mark.asyncio
async def test_placeholder_can_be_awaited():
    assert await UNRESOLVED is UNRESOLVED
    assert await UNRESOLVED.fetch() is UNRESOLVED


@pytest.mark.asyncio
async def test_resolve_reads_exactly_the_recorded_keys_without_arguments():
    container, resolve = new_snooper()
    scope = FakeScope({"prefix": "42", "retriever": "r", "unused": "x"})

    _ = container.prefix
    _ = container.retriever.value

    sub = await resolve(scope)

    assert dict(sub) == {"prefix": "42", "retriever": "r"}
    assert sorted(scope.calls) == [("prefix", ()), ("retriever", ())]


@pytest.mark.asyncio
async def test_resolve_without_reads_builds_empty_container():
    _, resolve = new_snooper()
    scope = FakeScope({})

    sub = await resolve(scope)

    assert len(sub) == 0
    assert scope.calls == []


@pytest.mark.asyncio
async def test_resolve_only_once():
    _, resolve = new_snooper()
    scope = FakeScope({})
    await resolve(scope)

    with pytest.raises(RuntimeError):
        await resolve(scope)


class TestSubContainer:
    def test_attribute_and_item_access(self):
        sub = SubContainer({"prefix": "42"})

        assert sub.prefix == "42"
        assert sub["prefix"] == "42"
        assert "prefix" in sub
        assert list(sub) == ["prefix"]

    def test_undiscovered_key_is_reported(self):
        sub = SubContainer({"prefix": "42"})

        with pytest.raises(UndiscoveredDependencyError) as excinfo:
            _ = sub.retriever

        assert excinfo.value.key == "retriever"
        assert excinfo.value.available == ("prefix",)
        assert "retriever" in str(excinfo.value)

    def test_undiscovered_key_is_a_key_and_attribute_error(self):
        sub = SubContainer({})

        assert sub.get("missing", "fallback") == "fallback"
        assert getattr(sub, "missing", None) is None

    def test_read_only(self):
        sub = SubContainer({"a": 1})

        with pytest.raises(AttributeError):
            sub.a = 2
