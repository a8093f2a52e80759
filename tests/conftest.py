# tests/conftest.py
import pytest

from pyduckx import Duck, global_error_handler


@pytest.fixture(autouse=True)
def isolate_error_handler():
    handlers = list(global_error_handler.handlers)
    yield
    global_error_handler.handlers[:] = handlers


@pytest.fixture
def users_duck() -> Duck:
    """帶 types、consts、creators、reducer 與初始狀態的完整 duck。"""
    def reducer(state, action, duck):
        if action["type"] == duck.types.FETCH:
            return {**state, "status": duck.statuses.LOADING}
        if action["type"] == duck.types.LOADED:
            return {**state, "status": duck.statuses.READY, "items": action["items"]}
        return state

    return Duck(
        namespace="app",
        store="users",
        types=["FETCH", "LOADED"],
        consts={"statuses": ["NEW", "LOADING", "READY"]},
        initial_state=lambda duck: {"status": duck.statuses.NEW, "items": []},
        creators=lambda duck: {
            "fetch": lambda: {"type": duck.types.FETCH},
            "loaded": lambda items: {"type": duck.types.LOADED, "items": items},
        },
        reducer=reducer,
    )
