"""
duck 選擇器模組。

提供帶記憶化的 create_selector，以及可引用 duck 其他選擇器的衍生選擇器 Selector。
"""
import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from .errors import ConfigurationError, SelectorError
from .immutable_utils import AttrMap
from .types import MemoizedSelector, ResultSelector, StateSelector

logger = logging.getLogger(__name__)


class Selector:
    """
    衍生選擇器。

    extractor 接收 duck 已解析的全部選擇器（支援屬性存取），返回實際的
    選擇器函數。衍生選擇器可以引用其他衍生選擇器，與宣告順序無關。

    範例:
        ```python
        selectors = {
            "root": lambda state: state,
            "items": Selector(lambda s: lambda state: s.root(state)["items"]),
            "count": Selector(lambda s: create_selector(s.items, result_fn=len)),
        }
        ```
    """
    __slots__ = ('extractor',)

    def __init__(self, extractor: Callable[[Any], StateSelector]):
        if not callable(extractor):
            raise ConfigurationError("Selector 需要可調用的 extractor", component="selectors")
        self.extractor = extractor

    def __repr__(self):
        return f"Selector({getattr(self.extractor, '__name__', self.extractor)!r})"


class _SelectorView:
    """解析期間提供給 extractor 的選擇器視圖，按需解析被引用的選擇器。"""
    __slots__ = ('_lookup',)

    def __init__(self, lookup: Callable[[str], StateSelector]):
        self._lookup = lookup

    def __getattr__(self, name: str) -> StateSelector:
        if name.startswith('__'):
            raise AttributeError(name)
        return self._lookup(name)

    def __getitem__(self, name: str) -> StateSelector:
        return self._lookup(name)


def resolve_selectors(selectors: Optional[Mapping[str, Any]]) -> AttrMap:
    """
    解析選擇器映射：普通函數原樣保留，Selector 交由其 extractor 產生函數。

    Args:
        selectors: 選擇器名稱 -> 選擇器函數或 Selector

    Returns:
        已解析的選擇器 AttrMap

    Raises:
        ConfigurationError: 引用了不存在的選擇器、出現循環引用，或 extractor 未返回可調用對象
    """
    selectors = selectors or {}
    resolved: Dict[str, StateSelector] = {}
    resolving: List[str] = []

    def lookup(name: str) -> StateSelector:
        if name in resolved:
            return resolved[name]
        if name not in selectors:
            raise ConfigurationError(f"未知的 selector: {name}", component="selectors", config_key=name)

        entry = selectors[name]
        if not isinstance(entry, Selector):
            if not callable(entry):
                raise ConfigurationError(
                    f"selector '{name}' 必須可調用或為 Selector",
                    component="selectors",
                    config_key=name,
                )
            resolved[name] = entry
            return entry

        if name in resolving:
            cycle = " -> ".join(resolving[resolving.index(name):] + [name])
            raise ConfigurationError(f"selector 循環引用: {cycle}", component="selectors", config_key=name)

        resolving.append(name)
        try:
            fn = entry.extractor(view)
        finally:
            resolving.pop()
        if not callable(fn):
            raise ConfigurationError(
                f"selector '{name}' 的 extractor 必須返回可調用對象",
                component="selectors",
                config_key=name,
            )
        resolved[name] = fn
        return fn

    view = _SelectorView(lookup)
    for name in selectors:
        lookup(name)
    return AttrMap({name: resolved[name] for name in selectors})


def create_selector(*selectors: StateSelector, result_fn: Optional[ResultSelector] = None,
                    deep: bool = False, ttl: Optional[float] = None, maxsize: int = 128) -> MemoizedSelector:
    """
    創建一個複合選擇器，支援記憶化、深淺比較與TTL控制

    Args:
        *selectors: 多個輸入選擇器，這些函數會從 state 中提取對應的值
        result_fn: 處理輸出結果的函數，將多個選擇器的輸出進行處理
        deep: 是否進行深度比較（預設為 False）
        ttl: 快取有效時間（秒），若超過此時間則重新計算，預設為無限
        maxsize: 緩存的最大條目數，預設為128

    Returns:
        經過快取優化的 selector 函數

    Raises:
        SelectorError: 輸入選擇器或 result_fn 執行失敗
    """
    # 如果沒有 result_fn 且只有一個選擇器，直接返回該選擇器
    if not result_fn and len(selectors) == 1:
        return selectors[0]

    # 如果沒有提供 result_fn，預設為返回所有輸入值的函數
    if not result_fn:
        result_fn = lambda *args: args

    cache: List[tuple] = []
    hits = 0
    misses = 0

    def selector(state: Any) -> Any:
        nonlocal cache, hits, misses

        inputs = []
        for select in selectors:
            try:
                inputs.append(select(state))
            except Exception as err:
                raise SelectorError(
                    f"選擇器輸入錯誤: {err}",
                    selector_name=getattr(select, '__name__', None),
                ) from err
        inputs = tuple(inputs)

        now = time.time()
        if ttl is not None:
            # 清除過期項
            cache = [item for item in cache if now - item[0] <= ttl]

        for _, cached_inputs, cached_result in cache:
            if deep:
                matched = _safe_deep_equals(inputs, cached_inputs)
            else:
                matched = all(a is b for a, b in zip(inputs, cached_inputs))
            if matched:
                hits += 1
                return cached_result

        misses += 1
        try:
            result = result_fn(*inputs)
        except Exception as err:
            raise SelectorError(
                f"選擇器計算錯誤: {err}",
                selector_name=getattr(result_fn, '__name__', None),
            ) from err

        # 維護緩存大小
        while len(cache) >= maxsize:
            cache.pop(0)
        cache.append((now, inputs, result))
        logger.debug("selector cache miss, %d entries cached", len(cache))
        return result

    def cache_info():
        return (hits, misses, maxsize, len(cache))

    def cache_clear():
        nonlocal hits, misses
        cache.clear()
        hits = 0
        misses = 0

    selector.cache_info = cache_info  # type: ignore
    selector.cache_clear = cache_clear  # type: ignore

    return selector


def _safe_deep_equals(a: Any, b: Any) -> bool:
    """安全的深度比較，無法比較時返回False"""
    if a is b:
        return True
    if type(a) != type(b):
        return False
    if isinstance(a, Mapping):
        if len(a) != len(b):
            return False
        return all(key in b and _safe_deep_equals(a[key], b[key]) for key in a)
    if isinstance(a, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(_safe_deep_equals(x, y) for x, y in zip(a, b))
    try:
        return bool(a == b)
    except Exception:
        return False
