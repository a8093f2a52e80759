from typing import Any, Callable, Mapping, Optional

from .merge import adapt_arity
from .types import ReducerBody


def action_type(action: Any) -> Optional[str]:
    """
    讀取 action 的類型。

    支援帶 type 屬性的對象（例如 Action）以及含 "type" 鍵的映射。

    Args:
        action: 任意 action

    Returns:
        類型字串，無法判斷時返回 None
    """
    if action is None:
        return None
    if isinstance(action, Mapping):
        return action["type"] if "type" in action else None
    return getattr(action, "type", None)


def on(type_name_or_creator, handler: Callable[[Any, Any], Any]) -> dict:
    """
    創建一個 type 名稱與處理函式的映射。

    Args:
        type_name_or_creator: 不含前綴的 type 名稱（例如 "FETCH"），
            或帶有 type 屬性的 Action 創建器。
        handler: 處理該 Action 的函式，接收 (state, action) 並返回新狀態。

    Returns:
        一個包含 {type: handler} 的字典。
    """
    if callable(type_name_or_creator) and hasattr(type_name_or_creator, 'type'):
        # 如果是 action 創建器函式，則提取其類型
        key = type_name_or_creator.type
    else:
        key = str(type_name_or_creator)
    return {key: handler}


def create_reducer(*handlers) -> ReducerBody:
    """
    創建一個 duck 的 reducer 主體。

    處理器以不含前綴的 type 名稱註冊，執行時透過 duck.types 對應到
    完整的 type，因此 extend 改變 namespace 後同一個主體依然有效。
    以完整 type（或 action 創建器）註冊的處理器則直接比對。

    Args:
        *handlers: 一系列 (type, handler_fn) 元組或使用 on 函式創建的字典。

    Returns:
        reducer 主體 (state, action, duck) -> state
    """
    action_handlers = {}

    for handler in handlers:
        if isinstance(handler, tuple) and len(handler) == 2:
            key, handler_fn = handler
            action_handlers[key] = handler_fn
        else:
            action_handlers.update(handler)

    def reducer(state: Any, action: Any, duck: Any = None) -> Any:
        a_type = action_type(action)
        if a_type is None:
            return state

        handler_fn = None
        if duck is not None:
            prefix = duck.prefix
            bare = a_type[len(prefix):] if a_type.startswith(prefix) else None
            if bare is not None and bare in duck.types and duck.types[bare] == a_type:
                handler_fn = action_handlers.get(bare)
            elif a_type in duck.types:
                # 未加前綴的裸名稱不是這個 duck 的 action
                return state
        if handler_fn is None:
            handler_fn = action_handlers.get(a_type)
        if handler_fn:
            return handler_fn(state, action)
        return state

    reducer.handlers = action_handlers  # type: ignore[attr-defined]
    return reducer


def chain_reducers(*bodies: Optional[ReducerBody]) -> ReducerBody:
    """
    依序串接多個 reducer 主體，前一個的結果是下一個的輸入狀態。

    None 會被略過；只剩一個主體時直接返回它（已適配參數數量）。

    Args:
        *bodies: reducer 主體 (state, action, duck) -> state

    Returns:
        串接後的 reducer 主體
    """
    chain = [adapt_arity(body) for body in bodies if body is not None]
    if not chain:
        return lambda state, action, duck=None: state
    if len(chain) == 1:
        return chain[0]

    def chained(state: Any, action: Any, duck: Any = None) -> Any:
        for body in chain:
            state = body(state, action, duck)
        return state

    return chained
