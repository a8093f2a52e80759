import logging

import pytest

from pyduckx import ConfigurationError, Duck, ErrorHandler, PyDuckXError, SelectorError, handle_error


def test_configuration_error_details():
    err = ConfigurationError("bad option", component="options", config_key="types", received="str")
    assert err.component == "options"
    assert err.config_key == "types"
    assert err.details == {"component": "options", "config_key": "types", "received": "str"}
    data = err.to_dict()
    assert data["error_type"] == "ConfigurationError"
    assert data["message"] == "bad option"
    assert "component='options'" in str(err)


def test_selector_error_is_a_pyduckx_error():
    err = SelectorError("boom", selector_name="root")
    assert isinstance(err, PyDuckXError)
    assert err.details == {"selector_name": "root"}


def test_error_handler_logs_and_notifies(caplog):
    handler = ErrorHandler()
    received = []
    handler.register_handler(received.append)
    with caplog.at_level(logging.ERROR, logger="pyduckx.errors"):
        handler.handle(ValueError("plain"))
    assert len(received) == 1
    assert isinstance(received[0], PyDuckXError)
    assert received[0].details == {"original_type": "ValueError"}
    assert "plain" in caplog.text

    handler.unregister_handler(received.append)
    handler.handle(PyDuckXError("again"))
    assert len(received) == 1


def test_error_handler_writes_log_file(tmp_path):
    log_file = tmp_path / "errors.log"
    handler = ErrorHandler(log_to_console=False, log_to_file=True, log_file=str(log_file))
    handler.handle(ConfigurationError("bad", component="options"))
    for h in handler._file_logger.handlers:
        h.flush()
    assert "ConfigurationError: bad" in log_file.read_text(encoding="utf-8")


def test_error_handler_requires_log_file():
    with pytest.raises(ConfigurationError):
        ErrorHandler(log_to_file=True)


def test_handle_error_reraises(monkeypatch):
    from pyduckx import errors

    seen = []
    monkeypatch.setattr(errors, "global_error_handler", ErrorHandler(log_to_console=False))
    errors.global_error_handler.register_handler(seen.append)

    @handle_error
    def explode():
        raise ConfigurationError("nope", component="test")

    with pytest.raises(ConfigurationError):
        explode()
    assert [e.message for e in seen] == ["nope"]


def test_extend_errors_are_reported_once():
    from pyduckx import global_error_handler

    seen = []
    global_error_handler.register_handler(seen.append)
    with pytest.raises(ConfigurationError):
        Duck().extend(types=["A", "A"])
    assert len(seen) == 1


def test_duck_construction_errors_are_reported_once():
    from pyduckx import global_error_handler

    seen = []
    global_error_handler.register_handler(seen.append)
    with pytest.raises(ConfigurationError):
        Duck(types=["A", "A"])
    with pytest.raises(ConfigurationError):
        Duck(consts={"_set": ["A"]})
    assert [e.config_key for e in seen] == ["types", "consts"]


def test_global_handler_does_not_log_reraised_errors_at_error_level(caplog):
    with caplog.at_level(logging.DEBUG, logger="pyduckx.errors"):
        with pytest.raises(ConfigurationError):
            Duck(types=["A", "A"])
    records = [r for r in caplog.records if r.name == "pyduckx.errors"]
    assert [r.levelno for r in records] == [logging.DEBUG]


def test_error_handler_level_is_configurable(caplog):
    handler = ErrorHandler(level=logging.WARNING)
    with caplog.at_level(logging.DEBUG, logger="pyduckx.errors"):
        handler.handle(PyDuckXError("careful"))
    assert [r.levelno for r in caplog.records] == [logging.WARNING]
