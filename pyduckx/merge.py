"""
合併與呼叫輔助工具。

extend 只透過這裡的函式產生新的容器，從不原地修改父 duck 的資料。
"""
import inspect
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple


def union_unique(*sequences: Iterable[Any]) -> Tuple[Any, ...]:
    """
    依序串接多個序列並去重，保留第一次出現的位置。

    >>> union_unique(["READY", "ERROR"], ["ERROR", "FAILED"])
    ('READY', 'ERROR', 'FAILED')
    """
    seen = set()
    result = []
    for seq in sequences:
        for item in seq or ():
            if item not in seen:
                seen.add(item)
                result.append(item)
    return tuple(result)


def merge_consts(parent: Mapping[str, Iterable[str]], child: Mapping[str, Iterable[str]]) -> Dict[str, Tuple[str, ...]]:
    """
    合併常數群組：同名群組取聯集（父在前），新群組附加在後。

    Args:
        parent: 父 duck 的常數群組
        child: 子選項的常數群組

    Returns:
        新的常數群組字典
    """
    merged: Dict[str, Tuple[str, ...]] = {}
    for group in union_unique(parent or {}, child or {}):
        merged[group] = union_unique((parent or {}).get(group, ()), (child or {}).get(group, ()))
    return merged


def shallow_merge(*mappings: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """淺拷貝後依序覆蓋，後者的鍵優先，鍵的順序以首次出現為準。"""
    result: Dict[str, Any] = {}
    for mapping in mappings:
        if mapping:
            for key in mapping:
                result[key] = mapping[key]
    return result


def deep_merge(base: Optional[Mapping[str, Any]], overlay: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    遞迴合併巢狀映射，overlay 中的非映射值直接取代。

    兩個輸入都不會被修改。
    """
    base = base or {}
    overlay = overlay or {}
    result: Dict[str, Any] = {key: base[key] for key in base}
    for key in overlay:
        value = overlay[key]
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


def positional_arity(fn: Callable[..., Any]) -> Optional[int]:
    """
    計算可調用對象能接受的位置參數數量。

    Returns:
        位置參數個數；接受 *args 或無法取得簽名時返回 None（不限）
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return None

    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def adapt_arity(fn: Callable[..., Any]) -> Callable[..., Any]:
    """
    包裝 fn，使呼叫時只傳入它宣告的前幾個位置參數。

    讓 `lambda: {...}`、`lambda duck: {...}` 與 `lambda state, action: state`
    都能作為工廠或 reducer 使用。
    """
    arity = positional_arity(fn)
    if arity is None:
        return fn

    def adapted(*args: Any) -> Any:
        return fn(*args[:arity])

    adapted.__wrapped__ = fn  # type: ignore[attr-defined]
    return adapted


def call_with_arity(fn: Callable[..., Any], *args: Any) -> Any:
    """以 fn 可接受的參數數量呼叫它。"""
    return adapt_arity(fn)(*args)
