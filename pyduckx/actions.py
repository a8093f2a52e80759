"""
PyDuckX 的 Action 定義模組。

此模組提供 Action 類別以及創建 Action 生成器的功能。
Actions 是描述狀態變更意圖的不可變對象，duck 的 creators 可以用它們
建立 action，也可以直接返回普通字典。
"""
from typing import Any, Callable, Dict, Generic, Optional, Union

from .immutable_utils import to_immutable
from .types import ActionCreator, P


class Action(Generic[P]):
    """
    表示一個有類型和可選負載的動作。

    泛型參數:
        P: 負載的類型

    屬性:
        type: 動作的類型字符串
        payload: 動作的負載數據（可選）
    """
    __slots__ = ('type', 'payload')

    def __init__(self, type: str, payload: Optional[P] = None):
        super().__setattr__('type', type)
        super().__setattr__('payload', payload)

    def __setattr__(self, name, value):
        if name not in self.__slots__:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        if hasattr(self, name):
            raise AttributeError(f"Cannot modify immutable instance attribute '{name}'")
        super().__setattr__(name, value)

    def __eq__(self, other):
        if not isinstance(other, Action):
            return False
        return self.type == other.type and self.payload == other.payload

    def __hash__(self):
        return hash((self.type, self.payload))

    def __repr__(self):
        return f"Action(type='{self.type}', payload={repr(self.payload)})"


def _process_payload(payload: Any) -> Any:
    """
    處理 payload，將字典、列表等轉換為不可變結構。

    Args:
        payload: 原始 payload

    Returns:
        處理後的 payload
    """
    return to_immutable(payload)


def create_action(action_type: str, prepare_fn: Optional[Callable[..., Any]] = None) -> 'ActionCreator[Any]':
    """
    創建一個 Action 生成器函數。

    Args:
        action_type: Action 的類型標識符
        prepare_fn: 可選的預處理函數，用於在創建 Action 前處理輸入參數

    Returns:
        一個可調用的函數，用於生成指定類型的 Action

    範例:
        >>> increment = create_action("app/counter/INCREMENT")
        >>> increment()  # 返回 Action(type="app/counter/INCREMENT", payload=None)
        >>>
        >>> add = create_action("app/counter/ADD", lambda amount: amount)
        >>> add(5)  # 返回 Action(type="app/counter/ADD", payload=5)
    """
    def action_creator(*args: Any, **kwargs: Any) -> Action[Any]:
        if prepare_fn:
            return Action(action_type, _process_payload(prepare_fn(*args, **kwargs)))
        elif len(args) == 1 and not kwargs:
            return Action(action_type, _process_payload(args[0]))
        elif args or kwargs:
            payload: Dict[Union[int, str], Any] = dict(zip(range(len(args)), args))
            payload.update(kwargs)
            return Action(action_type, _process_payload(payload))

        # 無參數，無負載
        return Action(action_type)

    # 添加 type 屬性以便於識別
    action_creator.type = action_type  # type: ignore

    return action_creator
