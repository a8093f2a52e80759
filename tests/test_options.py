import pytest

from pyduckx import ConfigurationError, Duck, DuckOptions, create_duck


def test_parse_accepts_none_mapping_and_instance():
    assert DuckOptions.parse(None) == DuckOptions()
    parsed = DuckOptions.parse({"types": ["FETCH"]})
    assert parsed.types == ("FETCH",)
    assert DuckOptions.parse(parsed) is parsed


def test_parse_applies_overrides_to_instance():
    base = DuckOptions.parse({"namespace": "app", "store": "users"})
    overridden = DuckOptions.parse(base, store="admins")
    assert overridden.namespace == "app"
    assert overridden.store == "admins"
    assert base.store == "users"


def test_prefix():
    assert DuckOptions(namespace="app", store="users").prefix == "app/users/"
    assert DuckOptions(namespace="app").prefix == ""
    assert DuckOptions().prefix == ""


def test_provided_distinguishes_absent_from_none():
    assert not DuckOptions().provided("initial_state")
    assert DuckOptions.parse({"initial_state": None}).provided("initial_state")
    assert DuckOptions.parse({"initialState": {}}).provided("initial_state")


def test_consts_groups_are_deduplicated():
    assert DuckOptions.parse({"consts": {"statuses": ["A", "B", "A"]}}).consts == {"statuses": ("A", "B")}


@pytest.mark.parametrize("options,key", [
    ({"types": ["FETCH", "FETCH"]}, "types"),
    ({"types": [""]}, "types"),
    ({"types": "FETCH"}, "types"),
    ({"consts": ["statuses"]}, "consts"),
    ({"consts": {"statuses": "READY"}}, "consts"),
    ({"consts": {"statuses": [""]}}, "consts"),
    ({"consts": {"types": ["A"]}}, "consts"),
    ({"consts": {"_set": ["A"]}}, "consts"),
    ({"consts": {"__init__": ["A"]}}, "consts"),
    ({"consts": {"mro": ["A"]}}, "consts"),
    ({"creators": 42}, "creators"),
    ({"reducer": "not a function"}, "reducer"),
    ({"selectors": 3}, "selectors"),
    ({"selectors": {"root": 3}}, "selectors"),
    ({"typos": ["FETCH"]}, "typos"),
])
def test_malformed_options_raise_configuration_error(options, key):
    with pytest.raises(ConfigurationError) as exc_info:
        Duck(options)
    assert exc_info.value.config_key == key
    assert exc_info.value.component == "options"


def test_non_mapping_options_raise_configuration_error():
    with pytest.raises(ConfigurationError):
        Duck(["types"])


def test_create_duck_reports_errors_to_global_handler():
    from pyduckx import global_error_handler

    reported = []
    global_error_handler.register_handler(reported.append)
    with pytest.raises(ConfigurationError):
        create_duck(types=["A", "A"])
    assert len(reported) == 1
    assert isinstance(reported[0], ConfigurationError)


def test_options_are_frozen():
    options = DuckOptions(types=["FETCH"])
    with pytest.raises(Exception):
        options.types = ("OTHER",)


def test_const_group_may_not_hide_duck_methods():
    with pytest.raises(ConfigurationError):
        Duck(consts={"reducer": ["A"]})
    with pytest.raises(ConfigurationError):
        Duck().extend(consts={"_compose_creators": ["A"]})
    assert Duck(consts={"set": ["A"]}).set == {"A": "A"}
