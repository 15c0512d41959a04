import dataclasses

import pytest

from lazycrate import ConfigurationError, LazyCrateError, ScopeOptions, create_scope


def test_defaults_are_strict_single_flight_and_cycle_checked():
    assert ScopeOptions() == ScopeOptions(strict=True, single_flight=True, detect_cycles=True)


def test_options_are_frozen():
    options = ScopeOptions()

    with pytest.raises(dataclasses.FrozenInstanceError):
        options.strict = False


@pytest.mark.parametrize("name", ["strict", "single_flight", "detect_cycles"])
def test_non_bool_values_are_rejected(name):
    with pytest.raises(ConfigurationError, match=f"Option '{name}' expects a bool"):
        ScopeOptions(**{name: "false"})


def test_configuration_error_is_a_lazycrate_error():
    with pytest.raises(LazyCrateError):
        ScopeOptions(strict=0)


@pytest.mark.asyncio
async def test_scope_keeps_the_options_it_was_given():
    scope = create_scope({}, options=dataclasses.replace(ScopeOptions(), strict=False))

    assert await scope.missing() is None
