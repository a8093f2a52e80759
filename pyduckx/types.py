"""
PyDuckX 共用的類型定義。
"""
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TypeVar, Union
from typing_extensions import Protocol, TypedDict

P = TypeVar("P")

# reducer 主體：(state, action, duck) -> state
ReducerBody = Callable[..., Any]

# 選擇器：state -> value
StateSelector = Callable[[Any], Any]
ResultSelector = Callable[..., Any]

# creators 工廠：(duck, parent_creators) -> {name: creator}
CreatorsFactory = Callable[..., Mapping[str, Callable[..., Any]]]
# 初始狀態工廠：(duck, parent_initial_state) -> state
InitialStateFactory = Callable[..., Any]


class ActionCreator(Protocol[P]):
    """帶有 type 屬性的 Action 生成器。"""
    type: str

    def __call__(self, *args: Any, **kwargs: Any) -> Any: ...


class MemoizedSelector(Protocol):
    """經過快取的選擇器。"""

    def __call__(self, state: Any) -> Any: ...

    def cache_info(self) -> tuple: ...

    def cache_clear(self) -> None: ...


class DuckOptionsDict(TypedDict, total=False):
    """以字典形式提供 duck 選項時可用的鍵。"""
    namespace: Optional[str]
    store: Optional[str]
    types: Sequence[str]
    consts: Dict[str, Sequence[str]]
    creators: CreatorsFactory
    reducer: ReducerBody
    initial_state: Union[Any, InitialStateFactory]
    selectors: Union[Mapping[str, Any], Callable[..., Mapping[str, Any]]]
