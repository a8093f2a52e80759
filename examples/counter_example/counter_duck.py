from typing import Optional

from pydantic import BaseModel
from pyduckx import Duck, Selector, create_action, create_reducer, create_selector, on


# ====== Model Definition ======
class CounterState(BaseModel):
    count: int = 0
    status: str = "IDLE"
    error: Optional[str] = None


# ====== Handlers ======
def increment_handler(state: CounterState, action) -> CounterState:
    return state.model_copy(update={"count": state.count + 1})


def increment_by_handler(state: CounterState, action) -> CounterState:
    return state.model_copy(update={"count": state.count + action.payload})


def reset_handler(state: CounterState, action) -> CounterState:
    return state.model_copy(update={"count": action.payload or 0})


# ====== Duck ======
counter_duck = Duck(
    namespace="app",
    store="counter",
    types=["INCREMENT", "INCREMENT_BY", "RESET"],
    consts={"statuses": ["IDLE", "BUSY"]},
    initial_state=lambda duck: CounterState(status=duck.statuses.IDLE),
    creators=lambda duck: {
        "increment": create_action(duck.types.INCREMENT),
        "increment_by": create_action(duck.types.INCREMENT_BY, lambda amount: amount),
        "reset": create_action(duck.types.RESET, lambda value=0: value),
    },
    reducer=create_reducer(
        on("INCREMENT", increment_handler),
        on("INCREMENT_BY", increment_by_handler),
        on("RESET", reset_handler),
    ),
    selectors={
        "count": lambda state: state.count,
        "is_even": Selector(lambda s: create_selector(s.count, result_fn=lambda count: count % 2 == 0)),
    },
)


# ====== Extended Duck ======
def decrement_handler(state: CounterState, action) -> CounterState:
    return state.model_copy(update={"count": state.count - 1})


bounded_counter_duck = counter_duck.extend(
    store="bounded_counter",
    types=["DECREMENT"],
    creators=lambda duck, parent: {
        "decrement": create_action(duck.types.DECREMENT),
        # 覆寫父 creator，但仍透過 parent 委派
        "increment_by": lambda amount: parent.increment_by(min(amount, 10)),
    },
    reducer=create_reducer(on("DECREMENT", decrement_handler)),
    initial_state=lambda duck, parent_state: parent_state.model_copy(update={"count": 1}),
)
