import pytest

from pyduckx import ConfigurationError, Duck, Selector, SelectorError, create_selector


def test_plain_selectors_are_exposed():
    duck = Duck(selectors={"root": lambda state: state["users"]})
    assert duck.selectors.root({"users": [1]}) == [1]


def test_derived_selectors_resolve_regardless_of_order():
    duck = Duck(selectors={
        "count": Selector(lambda s: create_selector(s.items, result_fn=len)),
        "items": Selector(lambda s: lambda state: s.root(state)["items"]),
        "root": lambda state: state,
    })
    assert duck.selectors.count({"items": [1, 2]}) == 2
    assert list(duck.selectors) == ["count", "items", "root"]


def test_selectors_factory_receives_the_duck():
    duck = Duck(
        consts={"statuses": ["READY"]},
        selectors=lambda duck: {"is_ready": lambda state: state["status"] == duck.statuses.READY},
    )
    assert duck.selectors.is_ready({"status": "READY"}) is True


def test_selector_cycles_are_configuration_errors():
    with pytest.raises(ConfigurationError) as exc_info:
        Duck(selectors={
            "a": Selector(lambda s: s.b),
            "b": Selector(lambda s: s.a),
        })
    assert "a -> b -> a" in exc_info.value.message


def test_unknown_selector_reference_is_configuration_error():
    with pytest.raises(ConfigurationError):
        Duck(selectors={"a": Selector(lambda s: s.missing)})


def test_extractor_must_return_callable():
    with pytest.raises(ConfigurationError):
        Duck(selectors={"a": Selector(lambda s: 42)})


def test_selector_requires_callable_extractor():
    with pytest.raises(ConfigurationError):
        Selector("not callable")


def test_create_selector_memoizes_on_identity():
    calls = []
    items = [1, 2, 3]

    def total(values):
        calls.append(values)
        return sum(values)

    select_total = create_selector(lambda state: state["items"], result_fn=total)
    assert select_total({"items": items}) == 6
    assert select_total({"items": items}) == 6
    assert len(calls) == 1
    assert select_total({"items": [1, 2, 3]}) == 6
    assert len(calls) == 2
    hits, misses, maxsize, size = select_total.cache_info()
    assert (hits, misses, maxsize, size) == (1, 2, 128, 2)

    select_total.cache_clear()
    assert select_total.cache_info() == (0, 0, 128, 0)


def test_create_selector_deep_comparison():
    calls = []
    select = create_selector(
        lambda state: state["user"],
        result_fn=lambda user: calls.append(user) or user["name"],
        deep=True,
    )
    assert select({"user": {"name": "ann"}}) == "ann"
    assert select({"user": {"name": "ann"}}) == "ann"
    assert len(calls) == 1


def test_create_selector_respects_maxsize():
    select = create_selector(lambda state: state, result_fn=lambda value: value, maxsize=2)
    for value in (object(), object(), object()):
        select(value)
    assert select.cache_info()[3] == 2


def test_single_selector_without_result_fn_is_returned_as_is():
    def root(state):
        return state

    assert create_selector(root) is root


def test_selector_errors_propagate():
    select = create_selector(lambda state: state["missing"], result_fn=lambda value: value)
    with pytest.raises(SelectorError):
        select({})

    failing = create_selector(lambda state: state, result_fn=lambda value: 1 / 0)
    with pytest.raises(SelectorError):
        failing(1)
